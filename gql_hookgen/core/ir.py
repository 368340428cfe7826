"""Intermediate Representation (IR) for the types of one GraphQL operation.

The extractor walks a completed operation together with the schema and
produces a tree of CanonicalType values. After deduplication every nested
type reference is replaced by the final type name and the tree is flattened.
"""

import hashlib
from dataclasses import dataclass, field
from enum import Enum


class TypeKind(str, Enum):
    """Kinds of declarations the code synthesizer knows how to emit."""
    INTERFACE = "INTERFACE"
    ENUM = "ENUM"
    SCALAR = "SCALAR"
    UNION = "UNION"


@dataclass
class CanonicalField:
    """A property of an interface, a value of an enum or a member of a union."""
    name: str
    # Built-in scalar name, nested type (before dedup) or final type name (after)
    type: "str | CanonicalType"
    schema_type: str
    is_non_null: bool = False
    is_array: bool = False

    @property
    def type_name(self) -> str:
        """Return the referenced type name whether or not it is still nested."""
        if isinstance(self.type, CanonicalType):
            return self.type.name
        return self.type


@dataclass
class CanonicalType:
    """A structural type derived from a schema type as seen through one selection."""
    name: str
    kind: TypeKind
    # Selection path from the operation root, only used to disambiguate names
    path: list[str] = field(default_factory=list)
    fields: list[CanonicalField] = field(default_factory=list)
    # Schema type name, None for synthetic Request/Query/Mutation/Subscription types
    original_name: str | None = None

    @property
    def content_id(self) -> str:
        """Hash over the name and the sorted unique field names."""
        names = sorted({f.name for f in self.fields})
        return hashlib.md5(":".join([self.name, "<>", *names]).encode("utf-8")).hexdigest()

    def find_field(self, name: str) -> CanonicalField | None:
        """Look up a field by name."""
        for f in self.fields:
            if f.name == name:
                return f
        return None
