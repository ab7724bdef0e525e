"""Stateless casing helpers used when rendering day and month names."""

import re

__all__ = ["first_char_upper", "to_underscore", "to_camel", "to_pascal", "to_kebab"]

_INVALID = re.compile(r"[\W_]+")
_SPACES = re.compile(r" {2,}")
_LOWER_UPPER = re.compile(r"([a-z])([A-Z])")


def _words(value: str | None, joiner: str) -> str:
    value = _INVALID.sub(" ", value or "").strip()
    value = _SPACES.sub(" ", value)
    return _LOWER_UPPER.sub(rf"\1{joiner}\2", value).replace(" ", joiner).replace(joiner * 2, joiner)


def first_char_upper(value: str | None) -> str:
    if not value:
        return ""
    return value[0].upper() + value[1:]


def to_underscore(value: str | None) -> str:
    """``"HelloWorld"`` -> ``"hello_world"``."""
    return _words(value, "_").lower()


def to_camel(value: str | None) -> str:
    pieces = [p for p in to_underscore(value).split("_") if p]
    return "".join(p if i == 0 else first_char_upper(p) for i, p in enumerate(pieces))


def to_pascal(value: str | None) -> str:
    return "".join(first_char_upper(p) for p in to_underscore(value).split("_") if p)


def to_kebab(value: str | None) -> str:
    """``"Hello World"`` -> ``"hello-world"``."""
    return _words(value, "-").lower()
