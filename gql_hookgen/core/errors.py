"""Exceptions raised while completing operations and generating hooks."""

from typing import Any


class GraphQLHookError(Exception):
    """Base class for every error raised by gql-hookgen."""


class SchemaLookupError(GraphQLHookError):
    """A referenced type or field does not exist in the schema."""


class InvalidFieldError(SchemaLookupError):
    """A selection names a field the enclosing schema type does not declare."""

    def __init__(self, path: list[str], type_name: str, is_input: bool = False):
        self.path = list(path)
        self.type_name = type_name
        self.is_input = is_input
        kind = "input" if is_input else "type"
        super().__init__(
            f'Invalid field: "{".".join(self.path)}" - '
            f'no such field exists in "{kind} {type_name}"'
        )


class MalformedOperationError(GraphQLHookError):
    """The embedded operation is missing or cannot be parsed."""


class SchemaSourceError(GraphQLHookError):
    """The schema could not be read, fetched or parsed."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        self.message = message
        self.errors = errors or []
        super().__init__(message)


class VariableTypeConflictError(GraphQLHookError):
    """Two arguments resolved to the same variable name with different types."""

    def __init__(self, name: str, existing_type: str, new_type: str):
        self.name = name
        self.existing_type = existing_type
        self.new_type = new_type
        super().__init__(
            f'Variable "${name}" is used as both "{existing_type}" and "{new_type}"'
        )


class CodeGenerationError(GraphQLHookError):
    """The rendered module is not valid Python."""
