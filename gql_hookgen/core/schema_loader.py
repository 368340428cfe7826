"""Load the schema from a local SDL file or a remote GraphQL endpoint.

Remote schemas are fetched with the standard introspection query and
printed back to SDL, so both sources end up as the same SchemaIndex.
"""

import json
import logging
from typing import Any

import httpx
from graphql import build_client_schema, get_introspection_query, print_schema
from pydantic import BaseModel, ValidationError

from .errors import SchemaSourceError
from .schema_index import SchemaIndex

logger = logging.getLogger(__name__)


class IntrospectionResponse(BaseModel):
    """Envelope of a GraphQL response to the introspection query."""
    data: dict[str, Any] | None = None
    errors: list[dict[str, Any]] | None = None


class SchemaFetcher:
    """Fetches a schema from a GraphQL endpoint over HTTP.

    Examples:
        fetcher = SchemaFetcher("https://api.example.com/graphql")
        sdl = fetcher.fetch_sdl()

        # Extra headers, e.g. for an authenticated endpoint
        fetcher = SchemaFetcher(url, headers={"Authorization": f"Bearer {token}"})
    """

    def __init__(
        self,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the fetcher.

        Args:
            url: GraphQL endpoint URL
            headers: Extra request headers
            timeout: Request timeout in seconds
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        self.url = url
        self.timeout = timeout
        self.headers = {"Content-Type": "application/json"}
        self.headers.update(headers or {})
        self.transport = transport

    def fetch_introspection(self) -> dict[str, Any]:
        """Run the introspection query and return its ``data`` payload.

        Raises:
            SchemaSourceError: On transport failures, non-2xx responses
                or a response carrying GraphQL errors
        """
        payload = {"query": get_introspection_query()}
        try:
            with httpx.Client(
                timeout=self.timeout, headers=self.headers, transport=self.transport
            ) as client:
                response = client.post(self.url, json=payload)
        except httpx.HTTPError as e:
            raise SchemaSourceError(f"Could not fetch the schema from {self.url}: {e}") from e

        if not response.is_success:
            raise SchemaSourceError(response.reason_phrase)

        try:
            result = IntrospectionResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise SchemaSourceError(f"Invalid introspection response from {self.url}: {e}") from e

        if result.errors:
            raise SchemaSourceError(json.dumps(result.errors), result.errors)
        if not result.data:
            raise SchemaSourceError(f"Introspection response from {self.url} has no data")
        return result.data

    def fetch_sdl(self) -> str:
        """Fetch the schema and print it as SDL."""
        data = self.fetch_introspection()
        try:
            schema = build_client_schema(data)
        except (TypeError, ValueError) as e:
            raise SchemaSourceError(f"Invalid introspection result: {e}") from e
        return print_schema(schema)


def load_schema(
    schema_file: str,
    schema_url: str | None = None,
    save: bool = False,
    transport: httpx.BaseTransport | None = None,
) -> SchemaIndex:
    """Build the SchemaIndex for a run.

    With a URL the schema is fetched (and written to ``schema_file`` when
    ``save`` is set); otherwise ``schema_file`` is read.
    """
    if not schema_url:
        logger.debug("Loading schema from %s", schema_file)
        return SchemaIndex.load(schema_file)

    logger.debug("Fetching schema from %s", schema_url)
    sdl = SchemaFetcher(schema_url, transport=transport).fetch_sdl()
    if save:
        with open(schema_file, "w", encoding="utf-8") as f:
            f.write(sdl)
        logger.debug("Saved schema to %s", schema_file)
    return SchemaIndex.from_sdl(sdl)
