"""Command-line interface for gql-hookgen."""

import logging

import click
from pydantic import ValidationError

from . import __version__
from .config import DEFAULT_IGNORE, DEFAULT_PATTERN, DEFAULT_SCHEMA_FILE, GenerateOptions
from .core.errors import GraphQLHookError
from .core.hook_generator import DEFAULT_PACKAGE
from .core.schema_loader import load_schema
from .pipeline import FileStatus, collect_files, run

STATUS_COLORS = {
    FileStatus.UPDATED: "green",
    FileStatus.NO_CHANGE: "bright_black",
}


@click.group()
@click.version_option(version=__version__)
def main():
    """Typed GraphQL hook generator for Python.

    Complete the GraphQL operations embedded in your modules and generate
    typed accessors for them.
    """
    pass


@main.command()
@click.argument("pattern", default=DEFAULT_PATTERN)
@click.option(
    "--schema-file",
    "-f",
    default=DEFAULT_SCHEMA_FILE,
    show_default=True,
    help="Path to the GraphQL schema (SDL). Written to when --save is used.",
)
@click.option(
    "--schema-url",
    "-u",
    default=None,
    help="GraphQL endpoint to fetch the schema from by introspection.",
)
@click.option(
    "--ignore",
    "-i",
    default=",".join(DEFAULT_IGNORE),
    show_default=True,
    help="Comma-separated directory names to skip.",
)
@click.option(
    "--package",
    "-p",
    default=DEFAULT_PACKAGE,
    show_default=True,
    help="Module the generated hooks import their primitives from.",
)
@click.option(
    "--save",
    "-s",
    is_flag=True,
    help="Save the fetched schema to --schema-file.",
)
@click.option(
    "--template-dir",
    "-t",
    type=click.Path(exists=True, file_okay=False),
    default=None,
    help="Directory with templates overriding the built-in ones.",
)
@click.option(
    "--header",
    default=None,
    help="Comment banner written above each generated module.",
)
@click.option(
    "--no-format",
    is_flag=True,
    help="Skip formatting generated code with black.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
def generate(
    pattern: str,
    schema_file: str,
    schema_url: str | None,
    ignore: str,
    package: str,
    save: bool,
    template_dir: str | None,
    header: str | None,
    no_format: bool,
    verbose: bool,
):
    """Generate typed hooks for every file matching PATTERN.

    PATTERN is a glob (default "**/*_gql.py") or a single file path.

    Examples:

        gql-hookgen generate

        gql-hookgen generate "app/**/*_gql.py" -f ./schema.graphql

        gql-hookgen generate -u https://api.example.com/graphql --save

        gql-hookgen generate --header "Generated by gql-hookgen. Do not edit."
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        options = GenerateOptions(
            pattern=pattern,
            schema_file=schema_file,
            schema_url=schema_url,
            ignore=ignore,
            package=package,
            save=save,
            template_dir=template_dir,
            format=not no_format,
            header=header,
        )
    except ValidationError as e:
        raise click.UsageError(str(e)) from e

    try:
        if options.schema_url:
            click.secho(f"Fetching schema from {options.schema_url}...", fg="yellow")
        elif verbose:
            click.echo(f"Schema: {options.schema_file}")
        schema = load_schema(options.schema_file, options.schema_url, options.save)

        files = collect_files(options.pattern, options.ignore)
        if not files:
            click.secho(f'No files matching "{options.pattern}" found!', fg="yellow")
            return
        if verbose:
            click.echo(f"Files: {len(files)}")

        for result in run(options, files, schema=schema):
            click.secho(f"{result.path} - [{result.status.value}]", fg=STATUS_COLORS[result.status])
    except (GraphQLHookError, OSError) as e:
        raise click.ClickException(str(e)) from e

    click.secho("Done!", fg="green")


if __name__ == "__main__":
    main()
