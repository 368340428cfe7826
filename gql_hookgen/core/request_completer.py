"""Complete a partially written GraphQL operation against the schema.

Every argument the schema declares for a selected field is bound to a
variable, and the operation's variable definitions are rebuilt from those
bindings:

    query { user { id } }   ->   query fetchUser($id: ID!) { user(id: $id) { id } }

Variable names that are already taken are prefixed with the camel-cased
selection path, e.g. ``followers(limit:)`` nested twice under ``user``
becomes ``$userFollowersFollowersLimit``.
"""

import logging
from dataclasses import dataclass, field, replace

from graphql import (
    ArgumentNode,
    DefinitionNode,
    DocumentNode,
    FieldNode,
    GraphQLSyntaxError,
    InlineFragmentNode,
    InputValueDefinitionNode,
    InterfaceTypeDefinitionNode,
    NameNode,
    Node,
    ObjectTypeDefinitionNode,
    OperationDefinitionNode,
    SelectionNode,
    SelectionSetNode,
    UnionTypeDefinitionNode,
    VariableDefinitionNode,
    VariableNode,
    Visitor,
    parse,
    print_ast,
    visit,
)

from .errors import InvalidFieldError, MalformedOperationError, VariableTypeConflictError
from .naming import to_camel_case
from .schema_index import SchemaIndex

logger = logging.getLogger(__name__)

SelectableDefinition = (
    ObjectTypeDefinitionNode | InterfaceTypeDefinitionNode | UnionTypeDefinitionNode
)


@dataclass
class VariableMapping:
    """Schema argument name and the variable it is bound to.

    ``target`` is None when the caller passed a literal value instead of a variable.
    """
    source: str
    target: str | None


@dataclass
class CompletionContext:
    """State threaded through the walk of one operation.

    ``path`` is per selection level; ``variables`` is the operation-wide
    registry and is shared by every context derived with ``descend``.
    """
    schema: SchemaIndex
    operation: str
    path: tuple[str, ...] = ()
    variables: dict[str, VariableDefinitionNode] = field(default_factory=dict)
    declared: dict[str, VariableDefinitionNode] = field(default_factory=dict)

    def descend(self, segment: str) -> "CompletionContext":
        return replace(self, path=(*self.path, segment))


class _VariableCollector(Visitor):
    """Collects the names of all variables referenced below a node."""

    def __init__(self):
        super().__init__()
        self.names: set[str] = set()

    def enter_variable(self, node: VariableNode, *_args):
        self.names.add(node.name.value)


def parse_operation(content: str) -> DocumentNode:
    """Parse operation text, reporting syntax errors as MalformedOperationError."""
    try:
        return parse(content)
    except GraphQLSyntaxError as e:
        raise MalformedOperationError(f"Could not parse the GraphQL operation: {e.message}") from e


def _find_argument(arguments, name: str) -> ArgumentNode | None:
    for argument in arguments:
        if argument.name.value == name:
            return argument
    return None


def _add_variable_definition(
    context: CompletionContext, name: str, argument_def: InputValueDefinitionNode
):
    """Register a variable unless one with the same name already exists."""
    registered = context.variables.get(name)
    if registered is not None:
        existing_type = print_ast(registered.type)
        new_type = print_ast(argument_def.type)
        if existing_type != new_type:
            raise VariableTypeConflictError(name, existing_type, new_type)
        return

    declared = context.declared.get(name)
    default_value = (
        declared.default_value
        if declared is not None and declared.default_value is not None
        else argument_def.default_value
    )
    context.variables[name] = VariableDefinitionNode(
        variable=VariableNode(name=NameNode(value=name)),
        type=argument_def.type,
        default_value=default_value,
        directives=(),
    )


def _register_variable(
    context: CompletionContext,
    existing_arguments,
    argument_def: InputValueDefinitionNode,
) -> VariableMapping:
    """Decide which variable a schema argument is bound to and register it."""
    source = argument_def.name.value
    existing = _find_argument(existing_arguments, source)
    if existing is not None:
        if not isinstance(existing.value, VariableNode):
            return VariableMapping(source=source, target=None)
        target = existing.value.name.value
    elif source in context.variables:
        target = to_camel_case("-".join([*context.path, source]))
    else:
        target = source
    _add_variable_definition(context, target, argument_def)
    return VariableMapping(source=source, target=target)


def _compose_arguments(
    argument_defs, argument_nodes, mappings: list[VariableMapping]
) -> tuple[ArgumentNode, ...]:
    """One argument per schema argument, keeping whatever the caller wrote."""
    targets = {mapping.source: mapping.target for mapping in mappings}
    arguments = []
    for argument_def in argument_defs:
        name = argument_def.name.value
        existing = _find_argument(argument_nodes, name)
        if existing is not None:
            arguments.append(existing)
            continue
        arguments.append(
            ArgumentNode(
                name=NameNode(value=name),
                value=VariableNode(name=NameNode(value=targets.get(name) or name)),
            )
        )
    return tuple(arguments)


def _complete_field(
    selection: FieldNode, type_def: SelectableDefinition, context: CompletionContext
) -> FieldNode:
    schema = context.schema
    field_name = selection.name.value
    field_def = schema.find_field(type_def, field_name)
    if field_def is None:
        raise InvalidFieldError([context.operation, *context.path, field_name], type_def.name.value)

    type_name = SchemaIndex.resolve_named_type(field_def.type)
    is_scalar = schema.is_scalar(type_name)
    field_context = context if is_scalar else context.descend(field_name)

    argument_defs = field_def.arguments or ()
    argument_nodes = selection.arguments or ()
    mappings = [
        _register_variable(field_context, argument_nodes, argument_def)
        for argument_def in argument_defs
    ]

    selection_set = selection.selection_set
    if selection_set is not None and not is_scalar:
        target_def = schema.find_type_definition(type_name)
        if isinstance(target_def, SelectableDefinition):
            selection_set = _complete_selection_set(selection_set, target_def, field_context)

    return FieldNode(
        alias=selection.alias,
        name=selection.name,
        arguments=_compose_arguments(argument_defs, argument_nodes, mappings),
        directives=selection.directives,
        selection_set=selection_set,
    )


def _complete_selection(
    selection: SelectionNode, type_def: SelectableDefinition, context: CompletionContext
) -> SelectionNode:
    if isinstance(selection, FieldNode):
        return _complete_field(selection, type_def, context)
    if isinstance(selection, InlineFragmentNode):
        # Fragments share the registry but add no path segment
        fragment_def = (
            context.schema.find_object_type(selection.type_condition.name.value)
            if selection.type_condition is not None
            else type_def
        )
        return InlineFragmentNode(
            type_condition=selection.type_condition,
            directives=selection.directives,
            selection_set=_complete_selection_set(selection.selection_set, fragment_def, context),
        )
    return selection


def _complete_selection_set(
    selection_set: SelectionSetNode, type_def: SelectableDefinition, context: CompletionContext
) -> SelectionSetNode:
    return SelectionSetNode(
        selections=tuple(
            _complete_selection(selection, type_def, context)
            for selection in selection_set.selections
        )
    )


def generate_operation_name(definition: OperationDefinitionNode) -> str:
    """Name an anonymous operation after its top-level selections."""
    names = "-and-".join(
        selection.name.value
        for selection in definition.selection_set.selections
        if isinstance(selection, FieldNode)
    )
    operation = definition.operation.value
    if operation == "query":
        return to_camel_case(f"fetch-{names}")
    if operation == "subscription":
        return to_camel_case(f"subscribeTo-{names}")
    return to_camel_case(names)


def _referenced_variables(node: Node) -> set[str]:
    collector = _VariableCollector()
    visit(node, collector)
    return collector.names


def complete_operation(schema: SchemaIndex, definition: DefinitionNode) -> DefinitionNode:
    """Complete one operation definition; other definitions are returned unchanged."""
    if not isinstance(definition, OperationDefinitionNode):
        return definition

    operation = definition.operation.value
    context = CompletionContext(
        schema=schema,
        operation=operation,
        declared={
            variable_def.variable.name.value: variable_def
            for variable_def in definition.variable_definitions or ()
        },
    )
    selection_set = _complete_selection_set(
        definition.selection_set, schema.root_type(operation), context
    )

    variable_definitions = list(context.variables.values())
    referenced = _referenced_variables(selection_set)
    for name, declared in context.declared.items():
        if name not in context.variables and name in referenced:
            variable_definitions.append(declared)

    name = definition.name or NameNode(value=generate_operation_name(definition))
    logger.debug(
        "Completed %s %s with variables %s",
        operation,
        name.value,
        ", ".join(f"${v.variable.name.value}" for v in variable_definitions) or "(none)",
    )
    return OperationDefinitionNode(
        operation=definition.operation,
        name=name,
        variable_definitions=tuple(variable_definitions),
        directives=definition.directives,
        selection_set=selection_set,
    )


def complete_document(schema: SchemaIndex, document: DocumentNode) -> DocumentNode:
    return DocumentNode(
        definitions=tuple(complete_operation(schema, d) for d in document.definitions)
    )


def fix_gql_request(schema: SchemaIndex, content: str) -> str:
    """Complete every operation in ``content`` and print the result."""
    return print_ast(complete_document(schema, parse_operation(content)))
