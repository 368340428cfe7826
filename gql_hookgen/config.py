"""Options of a generate run."""

from pydantic import BaseModel, field_validator

from .core.hook_generator import DEFAULT_PACKAGE

DEFAULT_PATTERN = "**/*_gql.py"
DEFAULT_SCHEMA_FILE = "schema.graphql"
DEFAULT_IGNORE = [".venv", "venv", "node_modules", "build"]


class GenerateOptions(BaseModel):
    """Options accepted by ``gql-hookgen generate``.

    Example:
        options = GenerateOptions(pattern="app/**/*_gql.py", ignore="dist,build")
    """

    pattern: str = DEFAULT_PATTERN
    schema_file: str = DEFAULT_SCHEMA_FILE
    schema_url: str | None = None
    # Directory names skipped while matching the pattern
    ignore: list[str] = DEFAULT_IGNORE
    package: str = DEFAULT_PACKAGE
    save: bool = False
    template_dir: str | None = None
    format: bool = True
    # Comment banner written above each generated module
    header: str | None = None

    @field_validator("ignore", mode="before")
    @classmethod
    def split_ignore(cls, value):
        """Accept the comma-separated form used on the command line."""
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    @field_validator("package")
    @classmethod
    def check_package(cls, value: str) -> str:
        parts = value.lstrip(".").split(".")
        if not all(part.isidentifier() for part in parts):
            raise ValueError(f'"{value}" is not an importable module name')
        return value
