"""Tests for the command-line interface."""

import httpx
import pytest
from click.testing import CliRunner
from graphql import build_schema, introspection_from_schema

from gql_hookgen import __version__
from gql_hookgen.cli import main

USER_SOURCE = 'from gql import gql\n\nquery = gql("""\nquery { user { id name } }\n""")\n'
SCHEMA_URL = "https://api.example.com/graphql"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def source_file(tmp_path):
    path = tmp_path / "user_gql.py"
    path.write_text(USER_SOURCE)
    return path


@pytest.fixture
def introspection_endpoint(schema_path, monkeypatch):
    """Route every httpx.Client to an endpoint answering with the test schema."""
    introspection = introspection_from_schema(build_schema(schema_path.read_text()))
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json={"data": introspection})

    transport = httpx.MockTransport(handler)
    original_client = httpx.Client
    monkeypatch.setattr(
        httpx, "Client", lambda **kwargs: original_client(**{**kwargs, "transport": transport})
    )
    return requests


class TestGenerateCommand:
    def test_updates_then_reports_no_change(self, runner, schema_path, source_file):
        args = ["generate", str(source_file), "--schema-file", str(schema_path)]

        result = runner.invoke(main, args)
        assert result.exit_code == 0, result.output
        assert f"{source_file} - [UPDATED]" in result.output
        assert result.output.rstrip().endswith("Done!")

        result = runner.invoke(main, args)
        assert result.exit_code == 0, result.output
        assert f"{source_file} - [NO CHANGE]" in result.output

    def test_no_format(self, runner, schema_path, source_file):
        result = runner.invoke(
            main, ["generate", str(source_file), "-f", str(schema_path), "--no-format"]
        )
        assert result.exit_code == 0, result.output
        assert "def use_user_query(" in source_file.read_text()

    def test_package_option(self, runner, schema_path, source_file):
        result = runner.invoke(
            main, ["generate", str(source_file), "-f", str(schema_path), "-p", "app.hooks"]
        )
        assert result.exit_code == 0, result.output
        assert "from app.hooks import QueryHookOptions, use_query" in source_file.read_text()

    def test_header(self, runner, schema_path, source_file):
        args = ["generate", str(source_file), "-f", str(schema_path), "--header", "Generated"]

        result = runner.invoke(main, args)
        assert result.exit_code == 0, result.output
        assert source_file.read_text().startswith("# Generated\n\nfrom gql import gql\n")

        result = runner.invoke(main, args)
        assert f"{source_file} - [NO CHANGE]" in result.output

    def test_glob_pattern_with_ignore(self, runner, schema_path, tmp_path):
        (tmp_path / "app").mkdir()
        (tmp_path / "build").mkdir()
        (tmp_path / "app" / "user_gql.py").write_text(USER_SOURCE)
        (tmp_path / "build" / "user_gql.py").write_text(USER_SOURCE)

        result = runner.invoke(
            main,
            ["generate", str(tmp_path / "**" / "*_gql.py"), "-f", str(schema_path), "-i", "build"],
        )
        assert result.exit_code == 0, result.output
        assert "[UPDATED]" in result.output
        assert (tmp_path / "build" / "user_gql.py").read_text() == USER_SOURCE

    def test_no_matching_files(self, runner, schema_path, tmp_path):
        pattern = str(tmp_path / "**" / "*_gql.py")
        result = runner.invoke(main, ["generate", pattern, "-f", str(schema_path)])
        assert result.exit_code == 0
        assert f'No files matching "{pattern}" found!' in result.output

    def test_missing_schema_file(self, runner, tmp_path, source_file):
        result = runner.invoke(
            main, ["generate", str(source_file), "-f", str(tmp_path / "missing.graphql")]
        )
        assert result.exit_code == 1
        assert "could not be found" in result.output

    def test_invalid_field_fails(self, runner, schema_path, tmp_path):
        path = tmp_path / "broken_gql.py"
        path.write_text(USER_SOURCE.replace("name", "invalid"))
        result = runner.invoke(main, ["generate", str(path), "-f", str(schema_path)])
        assert result.exit_code == 1
        assert 'Invalid field: "query.user.invalid"' in result.output

    def test_invalid_package_is_usage_error(self, runner, source_file):
        result = runner.invoke(main, ["generate", str(source_file), "-p", "not-a-module"])
        assert result.exit_code == 2
        assert "importable module name" in result.output

    def test_verbose(self, runner, schema_path, source_file):
        result = runner.invoke(
            main, ["generate", str(source_file), "-f", str(schema_path), "-v"]
        )
        assert result.exit_code == 0, result.output
        assert f"Schema: {schema_path}" in result.output
        assert "Files: 1" in result.output

    def test_schema_url_with_save(self, runner, introspection_endpoint, source_file, tmp_path):
        saved = tmp_path / "saved.graphql"

        result = runner.invoke(
            main,
            ["generate", str(source_file), "-u", SCHEMA_URL, "-f", str(saved), "--save"],
        )
        assert result.exit_code == 0, result.output
        assert f"Fetching schema from {SCHEMA_URL}" in result.output
        assert "type User {" in saved.read_text()
        assert "[UPDATED]" in result.output

    def test_schema_saved_when_no_files_match(self, runner, introspection_endpoint, tmp_path):
        saved = tmp_path / "saved.graphql"
        pattern = str(tmp_path / "**" / "*_gql.py")

        result = runner.invoke(
            main, ["generate", pattern, "-u", SCHEMA_URL, "-f", str(saved), "--save"]
        )
        assert result.exit_code == 0, result.output
        assert len(introspection_endpoint) == 1
        assert "type User {" in saved.read_text()
        assert f'No files matching "{pattern}" found!' in result.output


def test_version(runner):
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output
