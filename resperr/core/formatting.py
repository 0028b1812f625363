"""Plain formatted errors that may wrap another error through the ``%w`` verb."""

from __future__ import annotations

import re
from typing import Any, Mapping

# printf-style conversion: %[(key)][flags][width][.precision][length]type
_CONVERSION = re.compile(
    r"%(?P<key>\([^)]*\))?"
    r"(?P<flags>[#0\- +]*)"
    r"(?P<width>\*|\d+)?"
    r"(?:\.(?P<precision>\*|\d+))?"
    r"[hlL]?"
    r"(?P<type>[diouxXeEfFgGcrsaw%])"
)


class FormattedError(Exception):
    """Error carrying only formatted text and, optionally, the error it wraps."""

    def __init__(self, text: str, cause: BaseException | None = None) -> None:
        super().__init__(text, cause)
        self._text = text
        self._cause = cause
        if cause is not None:
            self.__cause__ = cause

    @property
    def text(self) -> str:
        return self._text

    @property
    def cause(self) -> BaseException | None:
        return self._cause

    def unwrap(self) -> BaseException | None:
        return self._cause

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._text!r})"


def errorf(format: str, *args: Any) -> FormattedError:
    """
    Build an error from a printf-style template.

    Besides the usual ``%`` conversions the template accepts ``%w``, rendered
    like ``%s``. When its operand is an exception, that exception becomes the
    cause of the returned error so chain traversal reaches it. Only the first
    ``%w`` operand is linked; chains have a single cause per error.
    """
    rewritten, cause = _rewrite_wrap_verbs(format, args)
    if _uses_mapping_keys(format) and len(args) == 1 and isinstance(args[0], Mapping):
        text = rewritten % args[0]
    else:
        text = rewritten % args
    return FormattedError(text, cause)


def _rewrite_wrap_verbs(
    format: str,
    args: tuple[Any, ...],
) -> tuple[str, BaseException | None]:
    cause: BaseException | None = None
    position = 0

    def _replace(match: re.Match[str]) -> str:
        nonlocal cause, position
        conversion = match.group(0)
        kind = match.group("type")
        if kind == "%":
            return conversion

        if match.group("width") == "*":
            position += 1
        if match.group("precision") == "*":
            position += 1

        operand = _operand(match.group("key"), args, position)
        if match.group("key") is None:
            position += 1

        if kind != "w":
            return conversion
        if cause is None and isinstance(operand, BaseException):
            cause = operand
        return conversion[:-1] + "s"

    return _CONVERSION.sub(_replace, format), cause


def _operand(key: str | None, args: tuple[Any, ...], position: int) -> Any:
    if key is not None:
        if len(args) == 1 and isinstance(args[0], Mapping):
            return args[0].get(key[1:-1])
        return None
    if position < len(args):
        return args[position]
    return None


def _uses_mapping_keys(format: str) -> bool:
    return any(match.group("key") for match in _CONVERSION.finditer(format))


__all__ = ["FormattedError", "errorf"]
