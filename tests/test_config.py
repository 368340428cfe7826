"""Tests for generate options."""

import pytest
from pydantic import ValidationError

from gql_hookgen.config import DEFAULT_IGNORE, GenerateOptions


class TestGenerateOptions:
    def test_defaults(self):
        options = GenerateOptions()
        assert options.pattern == "**/*_gql.py"
        assert options.schema_file == "schema.graphql"
        assert options.schema_url is None
        assert options.ignore == DEFAULT_IGNORE
        assert options.package == "gql_hooks"
        assert options.save is False
        assert options.format is True
        assert options.header is None

    def test_ignore_from_comma_string(self):
        options = GenerateOptions(ignore="dist, build,,.tox")
        assert options.ignore == ["dist", "build", ".tox"]

    def test_ignore_from_list(self):
        assert GenerateOptions(ignore=["dist"]).ignore == ["dist"]

    @pytest.mark.parametrize("package", ["app.hooks", ".client", "..graphql.hooks"])
    def test_valid_package(self, package):
        assert GenerateOptions(package=package).package == package

    @pytest.mark.parametrize("package", ["", "app-hooks", "app..hooks", "."])
    def test_invalid_package(self, package):
        with pytest.raises(ValidationError, match="importable module name"):
            GenerateOptions(package=package)
