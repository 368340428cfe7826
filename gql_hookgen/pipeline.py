"""Drive a generate run over every matching source file.

Files are processed one at a time in sorted order. The first error stops
the run; a file is only written when its content changes.
"""

import glob
import hashlib
import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterator

from .config import GenerateOptions
from .core.hook_generator import HookGeneratorOptions, generate_gql_hook
from .core.hooks import BlackFormatHook, HeaderCommentHook, HookRunner
from .core.schema_index import SchemaIndex
from .core.schema_loader import load_schema

logger = logging.getLogger(__name__)


class FileStatus(str, Enum):
    UPDATED = "UPDATED"
    NO_CHANGE = "NO CHANGE"


@dataclass
class FileResult:
    path: str
    status: FileStatus


def content_hash(content: str) -> str:
    return hashlib.md5(content.encode("utf-8")).hexdigest()


def collect_files(pattern: str, ignore: list[str] | None = None) -> list[str]:
    """Files matching a glob pattern (or a single file path), minus ignored directories."""
    if os.path.isfile(pattern):
        return [pattern]
    ignored = set(ignore or [])
    return sorted(
        path
        for path in glob.glob(pattern, recursive=True)
        if os.path.isfile(path) and not ignored.intersection(Path(path).parent.parts)
    )


def build_hook_runner(options: GenerateOptions) -> HookRunner:
    runner = HookRunner()
    if options.header:
        runner.add_post_hook(HeaderCommentHook(options.header))
    if options.format:
        runner.add_post_hook(BlackFormatHook())
    return runner


def process_file(
    schema: SchemaIndex,
    path: str,
    options: GenerateOptions,
    hook_runner: HookRunner | None = None,
) -> FileResult:
    """Regenerate one source file, writing it only when the content changed."""
    with open(path, encoding="utf-8") as f:
        content = f.read()

    generated = generate_gql_hook(
        schema,
        content,
        HookGeneratorOptions(
            package=options.package,
            template_dir=options.template_dir,
            hook_runner=hook_runner,
            filename=path,
        ),
    )
    if content_hash(generated) == content_hash(content):
        return FileResult(path=path, status=FileStatus.NO_CHANGE)

    with open(path, "w", encoding="utf-8") as f:
        f.write(generated)
    logger.debug("Wrote %s", path)
    return FileResult(path=path, status=FileStatus.UPDATED)


def run(
    options: GenerateOptions, files: list[str], schema: SchemaIndex | None = None
) -> Iterator[FileResult]:
    """Process files in order, yielding one result per file."""
    if schema is None:
        schema = load_schema(options.schema_file, options.schema_url, options.save)
    hook_runner = build_hook_runner(options)
    for path in files:
        yield process_file(schema, path, options, hook_runner)
