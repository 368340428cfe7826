"""Extract the data types of a completed GraphQL operation.

The extractor walks the operation's variables and selection set together
with the schema and builds a tree of CanonicalType values:

    RequestType      one field per operation variable
    QueryType        the selection below the root type (Mutation/Subscription alike)
    <Name>Type       one interface per nested selection level
    <Enum>, <Scalar> enums and custom scalars reached by a field
    <Union>Type      unions, with one interface per inline fragment

The deduplication pass then gives structurally identical types one shared
name and disambiguates colliding names using the selection path.
"""

import logging
from dataclasses import dataclass, field, replace

from graphql import (
    EnumTypeDefinitionNode,
    FieldNode,
    InlineFragmentNode,
    InputObjectTypeDefinitionNode,
    InputValueDefinitionNode,
    ListTypeNode,
    NamedTypeNode,
    NonNullTypeNode,
    OperationDefinitionNode,
    ScalarTypeDefinitionNode,
    SelectionSetNode,
    TypeNode,
    UnionTypeDefinitionNode,
)

from .errors import InvalidFieldError, MalformedOperationError, SchemaLookupError
from .ir import CanonicalField, CanonicalType, TypeKind
from .naming import to_camel_case, to_pascal_case
from .schema_index import SchemaIndex

logger = logging.getLogger(__name__)

REQUEST_TYPE_NAME = "RequestType"

# Attempts at a unique name before giving up on disambiguation
MAX_NAME_ATTEMPTS = 100


@dataclass(frozen=True)
class ExtractionContext:
    """Position of the walk: selection path plus whether input types are being read."""
    schema: SchemaIndex
    path: tuple[str, ...] = ()
    is_input: bool = False
    # Input object types being expanded, to stop on self-references
    input_stack: tuple[str, ...] = ()

    def next(self, segment: str) -> "ExtractionContext":
        return replace(self, path=(*self.path, segment))


@dataclass
class DeduplicationContext:
    """Name registry of one deduplication pass.

    ``names`` maps each claimed name to its content hash and ``ids`` maps
    each registered content hash to its final name.
    """
    names: dict[str, str] = field(default_factory=dict)
    ids: dict[str, str] = field(default_factory=dict)

    def claim(self, name: str, *content_ids: str):
        self.names[name] = content_ids[-1]
        for content_id in content_ids:
            self.ids[content_id] = name


def type_name_for(name: str) -> str:
    """Declaration name for an interface derived from a schema type."""
    return to_pascal_case(f"{name}-type")


class TypeExtractor:
    """Builds the CanonicalType tree of one operation definition."""

    def __init__(self, schema: SchemaIndex):
        self.schema = schema

    def extract(self, definition: OperationDefinitionNode) -> list[CanonicalType]:
        """Extract and deduplicate the types of one operation, root first."""
        operation = definition.operation.value
        context = ExtractionContext(schema=self.schema)
        root_type = self._extract_type(
            self.schema.root_type_name(operation), definition.selection_set, context.next(operation)
        )
        gql_types = [
            self._extract_request_type(definition, replace(context, is_input=True).next("variables")),
            # QueryType/MutationType/SubscriptionType whatever the schema calls its roots
            replace(root_type, name=type_name_for(operation)),
        ]
        return deduplicate_types(gql_types)

    def _find_field(self, type_def, field_name: str, context: ExtractionContext):
        field_def = self.schema.find_field(type_def, field_name)
        if field_def is None:
            raise InvalidFieldError(
                [*context.path, field_name], type_def.name.value, is_input=context.is_input
            )
        return field_def

    def _extract_field_type(
        self,
        name: str,
        type_node: TypeNode,
        selection_set: SelectionSetNode | None,
        context: ExtractionContext,
    ) -> CanonicalField:
        """Unwrap NonNull/List modifiers onto the field flags."""
        if isinstance(type_node, NonNullTypeNode):
            return replace(
                self._extract_field_type(name, type_node.type, selection_set, context),
                is_non_null=True,
            )
        if isinstance(type_node, ListTypeNode):
            return replace(
                self._extract_field_type(name, type_node.type, selection_set, context),
                is_array=True,
            )
        if isinstance(type_node, NamedTypeNode):
            schema_type = type_node.name.value
            if SchemaIndex.is_builtin_scalar(schema_type):
                return CanonicalField(name=name, type=schema_type, schema_type=schema_type)
            if schema_type in context.input_stack:
                # Self-referencing input object, refer to the enclosing declaration
                return CanonicalField(
                    name=name, type=type_name_for(schema_type), schema_type=schema_type
                )
            nested = self._extract_type(schema_type, selection_set, context)
            return CanonicalField(name=name, type=nested, schema_type=schema_type)
        raise SchemaLookupError(f'Invalid type reference found at "{".".join(context.path)}"')

    def _extract_field(self, selection, parent_def, context: ExtractionContext) -> CanonicalField:
        if isinstance(selection, InputValueDefinitionNode):
            field_def = self._find_field(parent_def, selection.name.value, context)
            return self._extract_field_type(
                selection.name.value, field_def.type, None, context.next(selection.name.value)
            )
        field_name = selection.name.value
        field_def = self._find_field(parent_def, field_name, context)
        response_key = selection.alias.value if selection.alias else field_name
        return self._extract_field_type(
            response_key, field_def.type, selection.selection_set, context.next(field_name)
        )

    def _extract_selection_fields(
        self, selection_set: SelectionSetNode, type_def, context: ExtractionContext
    ) -> list[CanonicalField]:
        fields = []
        for selection in selection_set.selections:
            if isinstance(selection, FieldNode):
                fields.append(self._extract_field(selection, type_def, context))
            elif isinstance(selection, InlineFragmentNode):
                fragment_def = (
                    self.schema.find_object_type(selection.type_condition.name.value)
                    if selection.type_condition is not None
                    else type_def
                )
                fields.extend(
                    self._extract_selection_fields(selection.selection_set, fragment_def, context)
                )
            else:
                raise MalformedOperationError(
                    f'Fragment spreads are not supported, found "...{selection.name.value}" '
                    f'at "{".".join(context.path)}"'
                )
        return fields

    def _extract_enum_type(
        self, type_def: EnumTypeDefinitionNode, context: ExtractionContext
    ) -> CanonicalType:
        return CanonicalType(
            name=type_def.name.value,
            kind=TypeKind.ENUM,
            path=list(context.path),
            fields=[
                CanonicalField(
                    name=value.name.value, type=value.name.value, schema_type=value.name.value
                )
                for value in type_def.values or ()
            ],
        )

    def _extract_union_type(
        self,
        type_def: UnionTypeDefinitionNode,
        selection_set: SelectionSetNode | None,
        context: ExtractionContext,
    ) -> CanonicalType:
        members = []
        for selection in selection_set.selections if selection_set else ():
            if not isinstance(selection, InlineFragmentNode) or selection.type_condition is None:
                # __typename is the only field a union can select directly
                continue
            condition = selection.type_condition.name.value
            member = self._extract_type(
                condition, selection.selection_set, context.next(to_camel_case(condition))
            )
            members.append(CanonicalField(name=member.name, type=member, schema_type=condition))
        return CanonicalType(
            name=type_name_for(type_def.name.value),
            kind=TypeKind.UNION,
            path=list(context.path),
            fields=members,
        )

    def _extract_type(
        self,
        name: str,
        selection_set: SelectionSetNode | None,
        context: ExtractionContext,
    ) -> CanonicalType:
        try:
            type_def = self.schema.find_type_definition(name)
        except SchemaLookupError:
            raise SchemaLookupError(
                f'Invalid type: "{name}" found at "{".".join(context.path)}"'
            ) from None

        if isinstance(type_def, EnumTypeDefinitionNode):
            return self._extract_enum_type(type_def, context)
        if isinstance(type_def, ScalarTypeDefinitionNode):
            return CanonicalType(name=name, kind=TypeKind.SCALAR, path=list(context.path))
        if isinstance(type_def, UnionTypeDefinitionNode):
            return self._extract_union_type(type_def, selection_set, context)

        if selection_set is not None:
            fields = self._extract_selection_fields(selection_set, type_def, context)
        elif not isinstance(type_def, InputObjectTypeDefinitionNode):
            raise MalformedOperationError(
                f'Field "{".".join(context.path)}" of type "{name}" '
                "must have a selection of subfields"
            )
        else:
            context = replace(context, input_stack=(*context.input_stack, name))
            fields = [
                self._extract_field(field_def, type_def, context)
                for field_def in self.schema.fields_of(type_def)
            ]
        return CanonicalType(
            name=type_name_for(name),
            kind=TypeKind.INTERFACE,
            path=list(context.path),
            fields=fields,
            original_name=None if self.schema.is_root_type(name) else name,
        )

    def _extract_request_type(
        self, definition: OperationDefinitionNode, context: ExtractionContext
    ) -> CanonicalType:
        fields = [
            self._extract_field_type(
                variable_def.variable.name.value,
                variable_def.type,
                None,
                context.next(variable_def.variable.name.value),
            )
            for variable_def in definition.variable_definitions or ()
        ]
        return CanonicalType(
            name=REQUEST_TYPE_NAME, kind=TypeKind.INTERFACE, path=list(context.path), fields=fields
        )


def deduplicate_type_name(gql_type: CanonicalType, context: DeduplicationContext) -> str:
    """Pick the final name of a type.

    Structurally identical types share a name; otherwise a taken name is
    prefixed with path segments from the end backwards, then numbered.
    """
    content_id = gql_type.content_id
    if content_id in context.ids:
        return context.ids[content_id]
    if gql_type.name not in context.names:
        context.claim(gql_type.name, content_id)
        return gql_type.name

    name = gql_type.name
    index = len(gql_type.path) - 1
    counter = 1
    while name in context.names and counter <= MAX_NAME_ATTEMPTS:
        if index >= 0:
            name = to_pascal_case(f"{'-'.join(gql_type.path[index:])}{gql_type.name}")
            index -= 1
        else:
            name = to_pascal_case(f"{gql_type.name}{counter}")
            counter += 1
    context.claim(name, content_id, replace(gql_type, name=name).content_id)
    return name


def deduplicate_type(gql_type: CanonicalType, context: DeduplicationContext) -> list[CanonicalType]:
    """Deduplicate a type and everything below it, the type itself first."""
    name = deduplicate_type_name(gql_type, context)
    nested_types: list[CanonicalType] = []
    fields = []
    for gql_field in gql_type.fields:
        if isinstance(gql_field.type, CanonicalType):
            deduplicated = deduplicate_type(gql_field.type, context)
            nested_types.extend(deduplicated)
            type_name = deduplicated[0].name
            if gql_type.kind == TypeKind.UNION:
                gql_field = replace(gql_field, name=type_name)
            gql_field = replace(gql_field, type=type_name)
        fields.append(gql_field)
    return [replace(gql_type, name=name, fields=fields), *nested_types]


def deduplicate_types(
    gql_types: list[CanonicalType], context: DeduplicationContext | None = None
) -> list[CanonicalType]:
    """Deduplicate and flatten; first-discovery order, one entry per content hash."""
    context = context or DeduplicationContext()
    unique: dict[str, CanonicalType] = {}
    for gql_type in gql_types:
        for deduplicated in deduplicate_type(gql_type, context):
            unique[deduplicated.content_id] = deduplicated
    logger.debug("Extracted types: %s", ", ".join(unique_type.name for unique_type in unique.values()))
    return list(unique.values())


def extract_gql_types(
    schema: SchemaIndex, definition: OperationDefinitionNode
) -> list[CanonicalType]:
    """Extract the deduplicated types of one operation definition."""
    if not isinstance(definition, OperationDefinitionNode):
        return []
    return TypeExtractor(schema).extract(definition)
