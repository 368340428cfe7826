"""Generate a typed hook module from a source file and a schema.

For every operation in the embedded document the generator emits the
extracted types followed by one accessor function:

    def use_user_query(
        request: RequestType,
        options: Optional[QueryHookOptions[QueryType, RequestType]] = None,
    ):
        return use_query(query, {"variables": request, "skip": not request.get("id"), ...})

The accessors call primitives imported from the target module (``gql_hooks``
unless the source file already imports them from somewhere else).
"""

import logging
from dataclasses import dataclass

from graphql import FieldNode, OperationDefinitionNode

from .builder import HookDecl, ModuleBuilder, Renderer
from .hooks import HookRunner
from .ir import CanonicalType
from .naming import split_words, to_snake_case
from .request_completer import fix_gql_request, parse_operation
from .schema_index import SchemaIndex
from .source import extract_gql, identify_library
from .type_extractor import REQUEST_TYPE_NAME, extract_gql_types, type_name_for

logger = logging.getLogger(__name__)

DEFAULT_PACKAGE = "gql_hooks"

# operation kind -> (primitive, options type)
OPERATION_PRIMITIVES = {
    "query": ("use_query", "QueryHookOptions"),
    "lazy_query": ("use_lazy_query", "LazyQueryHookOptions"),
    "mutation": ("use_mutation", "MutationHookOptions"),
    "subscription": ("use_subscription", "SubscriptionHookOptions"),
}


@dataclass
class HookGeneratorOptions:
    package: str = DEFAULT_PACKAGE
    template_dir: str | None = None
    hook_runner: HookRunner | None = None
    # Passed to post-generation hooks
    filename: str = "<string>"


def is_lazy_query(variable: str) -> bool:
    """A document variable named like ``lazy_user_query`` selects the lazy primitive."""
    return "lazy" in (word.lower() for word in split_words(variable))


def operation_kind(definition: OperationDefinitionNode, variable: str) -> str:
    operation = definition.operation.value
    if operation == "query" and is_lazy_query(variable):
        return "lazy_query"
    return operation


def generate_hook_name(definition: OperationDefinitionNode) -> str:
    """use_<selections joined by _and_>_<operation>, lazy queries included"""
    names = "-and-".join(
        selection.name.value
        for selection in definition.selection_set.selections
        if isinstance(selection, FieldNode)
    )
    return f"use_{to_snake_case(names)}_{definition.operation.value}"


def find_request_type(gql_types: list[CanonicalType]) -> CanonicalType | None:
    for gql_type in gql_types:
        if gql_type.name == REQUEST_TYPE_NAME and gql_type.original_name is None:
            return gql_type
    return None


def generate_hook_for_operation(
    schema: SchemaIndex,
    definition: OperationDefinitionNode,
    document_variable: str,
    builder: ModuleBuilder,
):
    """Add the types and the accessor of one completed operation to the builder."""
    operation = definition.operation.value
    kind = operation_kind(definition, document_variable)
    gql_types = extract_gql_types(schema, definition)
    request_type = find_request_type(gql_types)

    for gql_type in gql_types:
        builder.add_type(gql_type, allow_none=gql_type is request_type and operation == "query")

    request_fields = request_type.fields if request_type is not None else []
    required = [f.name for f in request_fields if f.is_non_null]
    primitive, options_type = OPERATION_PRIMITIVES[kind]
    hook = HookDecl(
        name=generate_hook_name(definition),
        primitive=primitive,
        options_type=options_type,
        response_type=type_name_for(operation),
        document_variable=document_variable,
        request_type=REQUEST_TYPE_NAME if request_fields else None,
        request_optional=not required,
        pass_variables=bool(request_fields),
        skip_fields=required if kind == "query" else [],
    )
    builder.add_hook(hook)
    logger.debug("Generated %s with %d types", hook.name, len(gql_types))


def generate_gql_hook(
    schema: SchemaIndex, content: str, options: HookGeneratorOptions | None = None
) -> str:
    """Regenerate a whole source file: document, types and accessors."""
    options = options or HookGeneratorOptions()
    embedded = extract_gql(content)
    completed = fix_gql_request(schema, embedded.document)

    builder = ModuleBuilder(identify_library(content) or options.package)
    builder.set_document(embedded.variable, completed)
    for definition in parse_operation(completed).definitions:
        if isinstance(definition, OperationDefinitionNode):
            generate_hook_for_operation(schema, definition, embedded.variable, builder)

    module = Renderer(options.template_dir).render_module(builder)
    if options.hook_runner is not None:
        module = options.hook_runner.run_post_hooks(options.filename, module)
    return module
