"""Locate the embedded GraphQL operation inside a Python source file.

Two authoring forms are recognised at module level:

    query = gql(\"\"\"
        query { user { id name } }
    \"\"\")

    query = \"\"\"{ user { id name } }\"\"\"

The first matching assignment wins.
"""

import ast
from dataclasses import dataclass

from .errors import MalformedOperationError

OPERATION_KEYWORDS = ("query", "mutation", "subscription", "{")

# Names a generated module imports from its target module
HOOK_PRIMITIVES = frozenset(
    {
        "use_query",
        "use_lazy_query",
        "use_mutation",
        "use_subscription",
        "QueryHookOptions",
        "LazyQueryHookOptions",
        "MutationHookOptions",
        "SubscriptionHookOptions",
    }
)

AUTHORING_HINT = (
    "No GraphQL operation found. Declare it at module level, for example:\n\n"
    '    query = gql("""\n'
    "        query { user { id } }\n"
    '    """)'
)


@dataclass
class EmbeddedOperation:
    """The operation text and the variable it was assigned to."""
    variable: str
    document: str


def _parse_source(content: str) -> ast.Module:
    try:
        return ast.parse(content)
    except SyntaxError as e:
        raise MalformedOperationError(f"Could not parse the source file: {e}") from e


def _string_value(node: ast.expr | None) -> str | None:
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        return node.value
    return None


def _operation_text(value: ast.expr | None) -> str | None:
    """Text of a gql("...") call or of a bare operation string, else None."""
    if (
        isinstance(value, ast.Call)
        and isinstance(value.func, ast.Name)
        and value.func.id == "gql"
        and len(value.args) == 1
        and not value.keywords
    ):
        return _string_value(value.args[0])
    text = _string_value(value)
    if text is not None and text.lstrip().startswith(OPERATION_KEYWORDS):
        return text
    return None


def extract_gql(content: str) -> EmbeddedOperation:
    """Find the first module-level assignment holding a GraphQL operation."""
    for node in _parse_source(content).body:
        if isinstance(node, ast.Assign) and len(node.targets) == 1:
            target, value = node.targets[0], node.value
        elif isinstance(node, ast.AnnAssign):
            target, value = node.target, node.value
        else:
            continue
        if not isinstance(target, ast.Name):
            continue
        text = _operation_text(value)
        if text is not None:
            return EmbeddedOperation(variable=target.id, document=text)
    raise MalformedOperationError(AUTHORING_HINT)


def identify_library(content: str) -> str | None:
    """Module the source already imports hook primitives from, if any."""
    for node in ast.walk(_parse_source(content)):
        if isinstance(node, ast.ImportFrom) and any(
            alias.name in HOOK_PRIMITIVES for alias in node.names
        ):
            return "." * node.level + (node.module or "")
    return None
