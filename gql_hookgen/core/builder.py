"""Declarations of a generated hook module and their rendering.

Only the shapes the hook generator emits exist here: typed dicts, enums,
unions, scalar aliases, the embedded document, accessor functions and
imports. Each shape is rendered by its own Jinja2 template.

Supports custom templates via the template_dir parameter:
    renderer = Renderer(template_dir="./my_templates")

Template lookup order:
1. User's template directory (if provided)
2. Package default templates
"""

import ast
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, PackageLoader, select_autoescape

from .errors import CodeGenerationError
from .ir import CanonicalField, CanonicalType, TypeKind
from .naming import safe_identifier

BUILTIN_SCALAR_TYPES = {
    "ID": "str",
    "String": "str",
    "Int": "int",
    "Float": "float",
    "Boolean": "bool",
}

TYPENAME_PROPERTY = "__typename"


def python_block_string(text: str) -> str:
    """Escape text for use inside a triple-quoted string literal."""
    return text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')


@dataclass
class PropertyDecl:
    name: str
    annotation: str


@dataclass
class InterfaceDecl:
    template: ClassVar[str] = "interface.py.j2"
    name: str
    properties: list[PropertyDecl]


@dataclass
class EnumDecl:
    template: ClassVar[str] = "enum.py.j2"
    name: str
    members: list[str]


@dataclass
class UnionDecl:
    template: ClassVar[str] = "union.py.j2"
    name: str
    members: list[str]


@dataclass
class ScalarDecl:
    template: ClassVar[str] = "scalar.py.j2"
    name: str


@dataclass
class DocumentDecl:
    template: ClassVar[str] = "document.py.j2"
    variable: str
    document: str


@dataclass
class HookDecl:
    """An accessor function wrapping one of the target module's primitives."""
    template: ClassVar[str] = "hook.py.j2"
    name: str
    primitive: str
    options_type: str
    response_type: str
    document_variable: str
    request_type: str | None = None
    request_optional: bool = False
    # Pass the request as variables inside an options dict
    pass_variables: bool = False
    skip_fields: list[str] = field(default_factory=list)

    @property
    def skip_expression(self) -> str:
        return " or ".join(f'not request.get("{name}")' for name in self.skip_fields)


@dataclass
class ImportDecl:
    template: ClassVar[str] = "import.py.j2"
    module: str
    names: list[str]


Declaration = InterfaceDecl | EnumDecl | UnionDecl | ScalarDecl | HookDecl


class ModuleBuilder:
    """Collects the declarations and imports of one generated module."""

    def __init__(self, package: str):
        self.package = package
        self.document: DocumentDecl | None = None
        self.statements: list[Declaration] = []
        self._imports: dict[str, list[str]] = {}

    def add_import(self, module: str, *names: str):
        imports = self._imports.setdefault(module, [])
        for name in names:
            if name not in imports:
                imports.append(name)

    def _typing(self, *names: str):
        self.add_import("typing", *names)

    def set_document(self, variable: str, document: str):
        self.add_import("gql", "gql")
        self.document = DocumentDecl(variable=variable, document=document)

    def annotation(self, gql_field: CanonicalField, allow_none: bool = False) -> str:
        """Python annotation of one property, forward-referencing generated types."""
        type_name = gql_field.type_name
        annotation = BUILTIN_SCALAR_TYPES.get(type_name) or f'"{type_name}"'
        if gql_field.is_array:
            annotation = f"list[{annotation}]"
        if allow_none or not gql_field.is_non_null:
            self._typing("Optional")
            annotation = f"Optional[{annotation}]"
        if not gql_field.is_non_null:
            self._typing("NotRequired")
            annotation = f"NotRequired[{annotation}]"
        return annotation

    def add_type(self, gql_type: CanonicalType, allow_none: bool = False):
        """Add the declaration for one canonical type; empty interfaces are skipped."""
        if gql_type.kind == TypeKind.INTERFACE:
            if gql_type.fields:
                self.add_interface(gql_type, allow_none)
        elif gql_type.kind == TypeKind.ENUM:
            self.add_import("enum", "Enum")
            self.statements.append(
                EnumDecl(name=gql_type.name, members=[f.name for f in gql_type.fields])
            )
        elif gql_type.kind == TypeKind.UNION:
            self._typing("Union")
            self.statements.append(
                UnionDecl(name=gql_type.name, members=[f.type_name for f in gql_type.fields])
            )
        elif gql_type.kind == TypeKind.SCALAR:
            self._typing("Any")
            self.statements.append(ScalarDecl(name=gql_type.name))
        else:
            raise CodeGenerationError(f"Unsupported type kind: {gql_type.kind}")

    def add_interface(self, gql_type: CanonicalType, allow_none: bool = False):
        self._typing("TypedDict")
        properties = [
            PropertyDecl(name=f.name, annotation=self.annotation(f, allow_none))
            for f in gql_type.fields
        ]
        if gql_type.original_name:
            self._typing("Literal", "NotRequired")
            properties.append(
                PropertyDecl(
                    name=TYPENAME_PROPERTY,
                    annotation=f'NotRequired[Literal["{gql_type.original_name}"]]',
                )
            )
        self.statements.append(InterfaceDecl(name=gql_type.name, properties=properties))

    def add_hook(self, hook: HookDecl):
        self._typing("Optional")
        self.add_import(self.package, hook.options_type, hook.primitive)
        self.statements.append(hook)

    @property
    def imports(self) -> list[ImportDecl]:
        """Import statements, one per module, sorted by module name."""
        return [
            ImportDecl(module=module, names=sorted(names))
            for module, names in sorted(self._imports.items())
        ]


class Renderer:
    """Renders a ModuleBuilder to Python source with Jinja2 templates.

    Templates in template_dir take precedence over built-in templates.

    Available templates to override:
        - import.py.j2: a from-import statement
        - document.py.j2: the embedded gql(...) document
        - interface.py.j2: TypedDict declaration
        - enum.py.j2: Enum declaration
        - union.py.j2: Union alias
        - scalar.py.j2: custom scalar alias
        - hook.py.j2: accessor function
    """

    def __init__(self, template_dir: str | None = None):
        self.template_dir = template_dir

        # Build template loader - custom templates take precedence
        loaders = []
        if template_dir:
            template_path = Path(template_dir)
            if template_path.is_dir():
                loaders.append(FileSystemLoader(str(template_path)))
        loaders.append(PackageLoader("gql_hookgen", "templates"))

        self.env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=select_autoescape(),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["safe_identifier"] = safe_identifier
        self.env.filters["python_block_string"] = python_block_string

    def render(self, declaration) -> str:
        """Render a single declaration without surrounding blank lines."""
        template = self.env.get_template(declaration.template)
        return template.render(decl=declaration).strip("\n")

    def render_module(self, builder: ModuleBuilder) -> str:
        """Render the complete module: imports, document, declarations."""
        blocks = ["\n".join(self.render(imp) for imp in builder.imports)]
        if builder.document is not None:
            blocks.append(self.render(builder.document))
        blocks.extend(self.render(statement) for statement in builder.statements)
        content = "\n\n\n".join(blocks) + "\n"

        # Validate Python syntax
        try:
            ast.parse(content)
        except SyntaxError as e:
            raise CodeGenerationError(f"Generated invalid Python: {e}") from e
        return content
