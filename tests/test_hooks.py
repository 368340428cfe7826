"""Tests for generation hooks."""

import black

from gql_hookgen.core.hooks import (
    BlackFormatHook,
    HeaderCommentHook,
    HookRunner,
    PostGenerateHook,
)


class TestHeaderCommentHook:
    """Tests for HeaderCommentHook."""

    def test_adds_comment_banner(self):
        hook = HeaderCommentHook("Generated by gql-hookgen")
        result = hook.post_generate("user_gql.py", "DateTime = Any\n")
        assert result == "# Generated by gql-hookgen\n\nDateTime = Any\n"

    def test_multiline_text(self):
        hook = HeaderCommentHook("Generated by gql-hookgen.\n\n# Do not edit.\n")
        result = hook.post_generate("user_gql.py", "code")
        assert result == "# Generated by gql-hookgen.\n#\n# Do not edit.\n\ncode"

    def test_empty_text_keeps_content(self):
        assert HeaderCommentHook("\n").post_generate("user_gql.py", "code") == "code"

    def test_banner_survives_black(self):
        runner = HookRunner()
        runner.add_post_hook(HeaderCommentHook("Generated"))
        runner.add_post_hook(BlackFormatHook(black.Mode(line_length=100)))
        once = runner.run_post_hooks("user_gql.py", "x = 1\n")
        assert once == "# Generated\n\nx = 1\n"


class TestBlackFormatHook:
    """Tests for BlackFormatHook."""

    def test_formats_code(self):
        hook = BlackFormatHook(black.Mode(line_length=100))
        result = hook.post_generate("user_gql.py", "x = {  'a':1 }\n")
        assert result == 'x = {"a": 1}\n'

    def test_keeps_exploded_calls(self):
        hook = BlackFormatHook(black.Mode(line_length=100))
        content = 'UserType = TypedDict(\n    "UserType",\n    {\n        "id": str,\n    },\n)\n'
        assert hook.post_generate("user_gql.py", content) == content

    def test_reads_project_config(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text("[tool.black]\nline-length = 88\n")
        hook = BlackFormatHook(config_dir=str(tmp_path))
        assert hook.mode.line_length == 88


class TestHookRunner:
    """Tests for HookRunner."""

    def test_run_post_hooks(self):
        runner = HookRunner()
        runner.add_post_hook(HeaderCommentHook("Header"))

        result = runner.run_post_hooks("test.py", "code")
        assert result.startswith("# Header")

    def test_hooks_run_in_order(self):
        runner = HookRunner()
        runner.add_post_hook(HeaderCommentHook("First"))
        runner.add_post_hook(HeaderCommentHook("Second"))

        result = runner.run_post_hooks("test.py", "code")
        assert result == "# Second\n\n# First\n\ncode"

    def test_no_hooks_returns_content(self):
        assert HookRunner().run_post_hooks("test.py", "code") == "code"

    def test_custom_hook_receives_filename(self):
        seen = []

        class RecordFilename:
            def post_generate(self, filename, content):
                seen.append(filename)
                return content

        runner = HookRunner()
        runner.add_post_hook(RecordFilename())
        runner.run_post_hooks("app/user_gql.py", "code")
        assert seen == ["app/user_gql.py"]


class TestProtocols:
    """Tests for hook protocols."""

    def test_builtin_hooks_are_post_hooks(self):
        assert isinstance(HeaderCommentHook("x"), PostGenerateHook)
        assert isinstance(BlackFormatHook(black.Mode()), PostGenerateHook)

    def test_custom_post_hook(self):
        class MyPostHook:
            def post_generate(self, filename: str, content: str) -> str:
                return content.upper()

        assert isinstance(MyPostHook(), PostGenerateHook)
