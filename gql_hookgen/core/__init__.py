"""Core modules for GraphQL hook generation."""

from .builder import ModuleBuilder, Renderer
from .errors import (
    CodeGenerationError,
    GraphQLHookError,
    InvalidFieldError,
    MalformedOperationError,
    SchemaLookupError,
    SchemaSourceError,
    VariableTypeConflictError,
)
from .hook_generator import (
    HookGeneratorOptions,
    generate_gql_hook,
    generate_hook_for_operation,
)
from .hooks import (
    BlackFormatHook,
    HeaderCommentHook,
    HookRunner,
    PostGenerateHook,
)
from .ir import CanonicalField, CanonicalType, TypeKind
from .request_completer import complete_document, complete_operation, fix_gql_request
from .schema_index import SchemaIndex
from .schema_loader import SchemaFetcher, load_schema
from .source import extract_gql, identify_library
from .type_extractor import TypeExtractor, deduplicate_types, extract_gql_types

__all__ = [
    # Errors
    "GraphQLHookError",
    "SchemaLookupError",
    "InvalidFieldError",
    "MalformedOperationError",
    "SchemaSourceError",
    "VariableTypeConflictError",
    "CodeGenerationError",
    # Schema
    "SchemaIndex",
    "SchemaFetcher",
    "load_schema",
    # IR types
    "CanonicalField",
    "CanonicalType",
    "TypeKind",
    # Request completion
    "fix_gql_request",
    "complete_document",
    "complete_operation",
    # Type extraction
    "TypeExtractor",
    "extract_gql_types",
    "deduplicate_types",
    # Source files
    "extract_gql",
    "identify_library",
    # Code generation
    "ModuleBuilder",
    "Renderer",
    "HookGeneratorOptions",
    "generate_gql_hook",
    "generate_hook_for_operation",
    # Hooks
    "PostGenerateHook",
    "BlackFormatHook",
    "HeaderCommentHook",
    "HookRunner",
]
