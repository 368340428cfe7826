"""Post-generation hooks applied to each generated module.

A hook receives the path of the source file being regenerated and the
rendered module text, and returns the text to write.

Example usage:
    from gql_hookgen.core.hooks import BlackFormatHook, HeaderCommentHook, HookRunner

    runner = HookRunner()
    runner.add_post_hook(HeaderCommentHook("Generated by gql-hookgen"))
    runner.add_post_hook(BlackFormatHook())
"""

from typing import Protocol, runtime_checkable

import black

from .formatting import load_black_mode


@runtime_checkable
class PostGenerateHook(Protocol):
    """Protocol for post-generation hooks.

    Example:
        class StripTrailingWhitespace(PostGenerateHook):
            def post_generate(self, filename: str, content: str) -> str:
                return "\\n".join(line.rstrip() for line in content.splitlines()) + "\\n"
    """

    def post_generate(self, filename: str, content: str) -> str:
        """Called after a module has been rendered.

        Args:
            filename: Path of the source file the module is written to
            content: The generated code content

        Returns:
            The (possibly transformed) code to write
        """
        ...


class HeaderCommentHook:
    """Built-in hook prefixing generated modules with a comment banner.

    Each line of the text becomes a ``#`` comment unless it already is one.

    Example:
        hook = HeaderCommentHook("Generated by gql-hookgen.\\nDo not edit.")
    """

    def __init__(self, text: str):
        self.lines = [
            line if line.startswith("#") else f"# {line}".rstrip()
            for line in text.strip("\n").splitlines()
        ]

    def post_generate(self, _filename: str, content: str) -> str:
        if not self.lines:
            return content
        return "\n".join(self.lines) + "\n\n" + content


class BlackFormatHook:
    """Built-in hook formatting generated code with black.

    Example:
        hook = BlackFormatHook()  # reads [tool.black] from ./pyproject.toml
        hook = BlackFormatHook(black.Mode(line_length=88))
    """

    def __init__(self, mode: black.Mode | None = None, config_dir: str = "."):
        self.mode = mode if mode is not None else load_black_mode(config_dir)

    def post_generate(self, _filename: str, content: str) -> str:
        return black.format_str(content, mode=self.mode)


class HookRunner:
    """Runs a collection of hooks in order."""

    def __init__(self):
        self.post_hooks: list[PostGenerateHook] = []

    def add_post_hook(self, hook: PostGenerateHook):
        """Add a post-generation hook."""
        self.post_hooks.append(hook)

    def run_post_hooks(self, filename: str, content: str) -> str:
        """Run all post-generation hooks in order."""
        for hook in self.post_hooks:
            content = hook.post_generate(filename, content)
        return content
