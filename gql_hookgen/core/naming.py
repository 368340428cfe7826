"""Naming-convention helpers shared by the completer, extractor and synthesizer."""

import keyword
import re


def split_words(name: str) -> list[str]:
    """Split camelCase, PascalCase, snake_case and dashed names into words."""
    s1 = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", name)
    s2 = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1 \2", s1)
    return [word for word in re.split(r"[^A-Za-z0-9]+", s2) if word]


def to_pascal_case(name: str) -> str:
    """Convert any supported naming style to PascalCase, keeping acronyms intact."""
    return "".join(word[0].upper() + word[1:] for word in split_words(name))


def to_camel_case(name: str) -> str:
    """Convert any supported naming style to camelCase."""
    words = split_words(name)
    if not words:
        return ""
    first = words[0].lower() if words[0].isupper() else words[0][0].lower() + words[0][1:]
    return first + "".join(word[0].upper() + word[1:] for word in words[1:])


def to_snake_case(name: str) -> str:
    """Convert camelCase or PascalCase to snake_case."""
    return "_".join(word.lower() for word in split_words(name))


def safe_identifier(name: str) -> str:
    """Suffix Python keywords with an underscore."""
    if keyword.iskeyword(name):
        return f"{name}_"
    return name
