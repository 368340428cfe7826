"""Tests for the generate run over source files."""

import pytest

from gql_hookgen.config import GenerateOptions
from gql_hookgen.core.errors import InvalidFieldError
from gql_hookgen.core.hooks import BlackFormatHook, HeaderCommentHook
from gql_hookgen.pipeline import (
    FileStatus,
    build_hook_runner,
    collect_files,
    content_hash,
    process_file,
    run,
)

USER_SOURCE = 'from gql import gql\n\nquery = gql("""\nquery { user { id name } }\n""")\n'
INVALID_SOURCE = 'from gql import gql\n\nquery = gql("""\nquery { user { invalid } }\n""")\n'


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def project(tmp_path):
    """A small project tree with sources in and out of ignored directories."""
    (tmp_path / "app" / "users").mkdir(parents=True)
    (tmp_path / "venv" / "lib").mkdir(parents=True)
    (tmp_path / "app" / "users" / "user_gql.py").write_text(USER_SOURCE)
    (tmp_path / "app" / "tweet_gql.py").write_text(USER_SOURCE)
    (tmp_path / "app" / "models.py").write_text("x = 1\n")
    (tmp_path / "venv" / "lib" / "vendored_gql.py").write_text(USER_SOURCE)
    return tmp_path


# =============================================================================
# Tests: collect_files
# =============================================================================


class TestCollectFiles:
    def test_matches_pattern_sorted(self, project):
        files = collect_files(str(project / "**" / "*_gql.py"), ["venv"])
        assert files == [
            str(project / "app" / "tweet_gql.py"),
            str(project / "app" / "users" / "user_gql.py"),
        ]

    def test_without_ignore(self, project):
        files = collect_files(str(project / "**" / "*_gql.py"))
        assert str(project / "venv" / "lib" / "vendored_gql.py") in files

    def test_single_file(self, project):
        path = str(project / "app" / "models.py")
        assert collect_files(path, ["app"]) == [path]

    def test_no_match(self, project):
        assert collect_files(str(project / "**" / "*_query.py")) == []


# =============================================================================
# Tests: process_file
# =============================================================================


class TestProcessFile:
    def test_updates_then_no_change(self, schema, project):
        path = str(project / "app" / "tweet_gql.py")
        options = GenerateOptions(format=False)

        first = process_file(schema, path, options)
        assert first.status == FileStatus.UPDATED
        content = (project / "app" / "tweet_gql.py").read_text()
        assert "def use_user_query(" in content

        second = process_file(schema, path, options)
        assert second.status == FileStatus.NO_CHANGE
        assert (project / "app" / "tweet_gql.py").read_text() == content

    def test_formatted_output_is_stable(self, schema, project):
        path = str(project / "app" / "tweet_gql.py")
        options = GenerateOptions()
        runner = build_hook_runner(options)

        assert process_file(schema, path, options, runner).status == FileStatus.UPDATED
        assert process_file(schema, path, options, runner).status == FileStatus.NO_CHANGE

    def test_uses_configured_package(self, schema, project):
        path = str(project / "app" / "tweet_gql.py")
        process_file(schema, path, GenerateOptions(package="app.hooks", format=False))
        assert "from app.hooks import QueryHookOptions, use_query" in (
            project / "app" / "tweet_gql.py"
        ).read_text()

    def test_header_is_written_once(self, schema, project):
        path = str(project / "app" / "tweet_gql.py")
        options = GenerateOptions(header="Generated by gql-hookgen")
        runner = build_hook_runner(options)

        assert process_file(schema, path, options, runner).status == FileStatus.UPDATED
        assert process_file(schema, path, options, runner).status == FileStatus.NO_CHANGE
        content = (project / "app" / "tweet_gql.py").read_text()
        assert content.startswith("# Generated by gql-hookgen\n\nfrom gql import gql\n")
        assert content.count("# Generated by gql-hookgen") == 1

    def test_error_leaves_file_untouched(self, schema, tmp_path):
        path = tmp_path / "broken_gql.py"
        path.write_text(INVALID_SOURCE)
        with pytest.raises(InvalidFieldError):
            process_file(schema, str(path), GenerateOptions(format=False))
        assert path.read_text() == INVALID_SOURCE

    def test_missing_file(self, schema, tmp_path):
        with pytest.raises(OSError):
            process_file(schema, str(tmp_path / "missing_gql.py"), GenerateOptions())


# =============================================================================
# Tests: run
# =============================================================================


class TestRun:
    def test_processes_files_in_order(self, schema, project):
        files = collect_files(str(project / "**" / "*_gql.py"), ["venv"])
        results = list(run(GenerateOptions(format=False), files, schema=schema))
        assert [r.path for r in results] == files
        assert all(r.status == FileStatus.UPDATED for r in results)

    def test_stops_at_first_error(self, schema, tmp_path):
        (tmp_path / "a_gql.py").write_text(INVALID_SOURCE)
        (tmp_path / "b_gql.py").write_text(USER_SOURCE)
        files = collect_files(str(tmp_path / "*_gql.py"))

        with pytest.raises(InvalidFieldError):
            list(run(GenerateOptions(format=False), files, schema=schema))
        assert (tmp_path / "b_gql.py").read_text() == USER_SOURCE

    def test_loads_schema_from_options(self, schema_path, project):
        options = GenerateOptions(schema_file=str(schema_path), format=False)
        files = [str(project / "app" / "tweet_gql.py")]
        assert [r.status for r in run(options, files)] == [FileStatus.UPDATED]


class TestBuildHookRunner:
    def test_defaults_to_black_only(self):
        runner = build_hook_runner(GenerateOptions())
        assert [type(hook) for hook in runner.post_hooks] == [BlackFormatHook]

    def test_header_runs_before_black(self):
        runner = build_hook_runner(GenerateOptions(header="Generated"))
        assert [type(hook) for hook in runner.post_hooks] == [HeaderCommentHook, BlackFormatHook]

    def test_no_format(self):
        assert build_hook_runner(GenerateOptions(format=False)).post_hooks == []


def test_content_hash():
    assert content_hash("a") == content_hash("a")
    assert content_hash("a") != content_hash("b")
