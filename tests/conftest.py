"""Shared fixtures: the test schema used across the suite."""

from pathlib import Path

import pytest
from graphql import parse, print_ast

from gql_hookgen.core.schema_index import SchemaIndex

SCHEMA_PATH = Path(__file__).parent / "schema.graphql"


@pytest.fixture(scope="session")
def schema_path() -> Path:
    return SCHEMA_PATH


@pytest.fixture(scope="session")
def schema() -> SchemaIndex:
    return SchemaIndex.load(str(SCHEMA_PATH))


@pytest.fixture
def normalize():
    """Print an operation the way the completer prints it."""
    def _normalize(text: str) -> str:
        return print_ast(parse(text))
    return _normalize
