"""Schema lookups over a parsed GraphQL SDL document, using graphql-core.

The index is built once per run and only read afterwards, so it can be
shared by every file processed in that run.
"""

import os

from graphql import (
    DocumentNode,
    EnumTypeDefinitionNode,
    FieldDefinitionNode,
    GraphQLSyntaxError,
    InputObjectTypeDefinitionNode,
    InputObjectTypeExtensionNode,
    InputValueDefinitionNode,
    InterfaceTypeDefinitionNode,
    InterfaceTypeExtensionNode,
    ListTypeNode,
    NamedTypeNode,
    NameNode,
    NonNullTypeNode,
    ObjectTypeDefinitionNode,
    ObjectTypeExtensionNode,
    ScalarTypeDefinitionNode,
    SchemaDefinitionNode,
    TypeDefinitionNode,
    TypeNode,
    UnionTypeDefinitionNode,
    parse,
)

from .errors import SchemaLookupError, SchemaSourceError

BUILTIN_SCALARS = frozenset({"ID", "String", "Int", "Float", "Boolean"})

DEFAULT_ROOT_TYPES = {
    "query": "Query",
    "mutation": "Mutation",
    "subscription": "Subscription",
}

TYPENAME_FIELD = "__typename"

ObjectLikeDefinition = (
    ObjectTypeDefinitionNode | InterfaceTypeDefinitionNode | InputObjectTypeDefinitionNode
)
FieldLikeDefinition = FieldDefinitionNode | InputValueDefinitionNode

_TYPENAME_DEFINITION = FieldDefinitionNode(
    name=NameNode(value=TYPENAME_FIELD),
    arguments=(),
    type=NonNullTypeNode(type=NamedTypeNode(name=NameNode(value="String"))),
    directives=(),
)


class SchemaIndex:
    """Read-only lookups over the type definitions of one schema."""

    def __init__(self, document: DocumentNode):
        self.document = document
        self._types: dict[str, TypeDefinitionNode] = {}
        self._fields: dict[str, list[FieldLikeDefinition]] = {}
        self._root_types = dict(DEFAULT_ROOT_TYPES)
        self._process_ast(document)

    @classmethod
    def from_sdl(cls, content: str) -> "SchemaIndex":
        """Parse schema definition language text."""
        try:
            return cls(parse(content))
        except GraphQLSyntaxError as e:
            raise SchemaSourceError(f"Could not parse the schema: {e.message}") from e

    @classmethod
    def load(cls, schema_path: str) -> "SchemaIndex":
        """Read and parse a schema file."""
        if not os.path.isfile(schema_path):
            raise SchemaSourceError(
                f"Error: The schema file at {schema_path} could not be found. "
                "Please use the '--schema-file' option. "
                "Refer to '--help' for additional details."
            )
        with open(schema_path, encoding="utf-8") as f:
            return cls.from_sdl(f.read())

    def _process_ast(self, document: DocumentNode):
        """Register definitions first so extensions can merge into them."""
        extensions = []
        for definition in document.definitions:
            if isinstance(definition, SchemaDefinitionNode):
                for operation_type in definition.operation_types:
                    self._root_types[operation_type.operation.value] = (
                        operation_type.type.name.value
                    )
            elif isinstance(definition, TypeDefinitionNode):
                name = definition.name.value
                self._types[name] = definition
                self._fields[name] = list(getattr(definition, "fields", None) or [])
            elif isinstance(
                definition,
                (ObjectTypeExtensionNode, InterfaceTypeExtensionNode, InputObjectTypeExtensionNode),
            ):
                extensions.append(definition)

        for extension in extensions:
            self._merge_extension_fields(extension)

    def _merge_extension_fields(self, node):
        """Merge `extend type` fields into the existing type definition.

        An extension of a type with no base definition becomes the definition.
        """
        type_name = node.name.value
        if type_name not in self._types:
            base_class = {
                ObjectTypeExtensionNode: ObjectTypeDefinitionNode,
                InterfaceTypeExtensionNode: InterfaceTypeDefinitionNode,
                InputObjectTypeExtensionNode: InputObjectTypeDefinitionNode,
            }[type(node)]
            self._types[type_name] = base_class(
                name=node.name, fields=node.fields, directives=node.directives
            )
            self._fields[type_name] = []

        existing_names = {f.name.value for f in self._fields[type_name]}
        for field in node.fields or []:
            if field.name.value not in existing_names:
                self._fields[type_name].append(field)
                existing_names.add(field.name.value)

    def find_type_definition(self, name: str) -> TypeDefinitionNode:
        """Exact-name lookup across every named type definition."""
        definition = self._types.get(name)
        if definition is None:
            raise SchemaLookupError(f'Could not find "{name}" in your schema')
        return definition

    def find_object_type(self, name: str) -> ObjectTypeDefinitionNode | InterfaceTypeDefinitionNode:
        """Look up an object (or interface) type definition by name."""
        definition = self._types.get(name)
        if not isinstance(definition, (ObjectTypeDefinitionNode, InterfaceTypeDefinitionNode)):
            raise SchemaLookupError(f'Could not find "type {name}" in your schema')
        return definition

    def root_type_name(self, operation: str) -> str:
        """Name of the root object type for query, mutation or subscription."""
        return self._root_types[operation]

    def root_type(self, operation: str) -> ObjectTypeDefinitionNode:
        """Root object type definition for an operation kind."""
        return self.find_object_type(self.root_type_name(operation))

    def is_root_type(self, name: str) -> bool:
        """Check if a type is one of the synthetic root operation frames."""
        return name in self._root_types.values()

    def fields_of(self, definition: ObjectLikeDefinition) -> list[FieldLikeDefinition]:
        """Declared fields of a type, including fields added by extensions."""
        return self._fields.get(definition.name.value, [])

    def find_field(
        self, definition: ObjectLikeDefinition, field_name: str
    ) -> FieldLikeDefinition | None:
        """Find a field definition by name within a type; None if it is absent."""
        if field_name == TYPENAME_FIELD and not isinstance(
            definition, InputObjectTypeDefinitionNode
        ):
            return _TYPENAME_DEFINITION
        for field in self.fields_of(definition):
            if field.name.value == field_name:
                return field
        return None

    def is_scalar(self, name: str) -> bool:
        """True for built-in scalars and schema-declared scalar types."""
        return name in BUILTIN_SCALARS or isinstance(
            self._types.get(name), ScalarTypeDefinitionNode
        )

    def is_enum(self, name: str) -> bool:
        return isinstance(self._types.get(name), EnumTypeDefinitionNode)

    def is_union(self, name: str) -> bool:
        return isinstance(self._types.get(name), UnionTypeDefinitionNode)

    @property
    def type_names(self) -> list[str]:
        return list(self._types)

    @staticmethod
    def is_builtin_scalar(name: str) -> bool:
        return name in BUILTIN_SCALARS

    @staticmethod
    def resolve_named_type(type_node: TypeNode) -> str:
        """Strip List and NonNull wrappers down to the innermost named type."""
        if isinstance(type_node, NamedTypeNode):
            return type_node.name.value
        if isinstance(type_node, (NonNullTypeNode, ListTypeNode)) and type_node.type is not None:
            return SchemaIndex.resolve_named_type(type_node.type)
        raise SchemaLookupError(f"Invalid type reference: {type_node!r}")
