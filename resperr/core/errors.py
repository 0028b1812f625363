"""
Status codes and user-facing messages attached to error chains.

Two decorators wrap an existing error without changing its ``str()``:

- ``StatusCodeError`` carries a status code for the transport layer.
- ``UserMessageError`` carries a message that is safe to show to end users.

The accessors (``status_code``, ``user_message``, ``user_message_status``)
walk the cause chain outward to inward and report the first error exposing
the requested capability. Any exception qualifies structurally by defining
``status_code()`` or ``user_message()``; no base class is required.
"""

from __future__ import annotations

from typing import Any, Iterator, Protocol, runtime_checkable

from resperr.core.config import Settings, get_settings
from resperr.core.formatting import errorf


@runtime_checkable
class StatusCoder(Protocol):
    """An error with an associated status code."""

    def status_code(self) -> int: ...


@runtime_checkable
class UserMessenger(Protocol):
    """An error with an associated user-facing message."""

    def user_message(self) -> str: ...


_CAPABILITY_METHODS: dict[type, str] = {
    StatusCoder: "status_code",
    UserMessenger: "user_message",
}


def unwrap(err: BaseException) -> BaseException | None:
    """Return the direct cause of ``err``: its ``unwrap()`` result or ``__cause__``."""
    method = getattr(err, "unwrap", None)
    if callable(method):
        # foreign unwrap() methods may take arguments or fail; fall back to __cause__
        try:
            cause = method()
        except Exception:
            return err.__cause__
        if cause is None or isinstance(cause, BaseException):
            return cause
    return err.__cause__


def iter_chain(err: BaseException | None) -> Iterator[BaseException]:
    """Yield ``err`` and each of its causes, outermost first."""
    seen: set[int] = set()
    current = err
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = unwrap(current)


def find(err: BaseException, capability: type) -> Any | None:
    """Return the first error in the chain of ``err`` exposing ``capability``, else None."""
    method_name = _CAPABILITY_METHODS.get(capability)
    for candidate in iter_chain(err):
        if not isinstance(candidate, capability):
            continue
        # runtime_checkable only checks presence; a plain attribute is not a capability
        if method_name is None or callable(getattr(candidate, method_name)):
            return candidate
    return None


def is_caused_by(err: BaseException | None, target: BaseException) -> bool:
    """Report whether ``target`` is ``err`` itself or any error in its cause chain."""
    return any(candidate is target for candidate in iter_chain(err))


class StatusCodeError(Exception):
    """Wraps a cause with a status code; ``str()`` is the cause's text."""

    def __init__(self, cause: BaseException, code: int) -> None:
        super().__init__(cause, code)
        self._cause = cause
        self._code = code
        self.__cause__ = cause

    @property
    def cause(self) -> BaseException:
        return self._cause

    @property
    def code(self) -> int:
        return self._code

    def unwrap(self) -> BaseException:
        return self._cause

    def status_code(self) -> int:
        return self._code

    def __str__(self) -> str:
        return str(self._cause)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._cause!r}, {self._code!r})"


class UserMessageError(Exception):
    """Wraps a cause with a user-facing message; ``str()`` is the cause's text."""

    def __init__(self, cause: BaseException, message: str) -> None:
        super().__init__(cause, message)
        self._cause = cause
        self._message = message
        self.__cause__ = cause

    @property
    def cause(self) -> BaseException:
        return self._cause

    @property
    def message(self) -> str:
        return self._message

    def unwrap(self) -> BaseException:
        return self._cause

    def user_message(self) -> str:
        return self._message

    def status_code(self, *, settings: Settings | None = None) -> int:
        """
        Return the status code of the wrapped chain.

        The search starts at the cause, never at this error. When no status
        code was set earlier, ``status_code_msg`` (400 by default) is returned.
        """
        coder = find(self._cause, StatusCoder)
        if coder is not None:
            return _code_of(coder, settings)
        return (settings or get_settings()).status_code_msg

    def __str__(self) -> str:
        return str(self._cause)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._cause!r}, {self._message!r})"


def _code_of(coder: Any, settings: Settings | None) -> int:
    if isinstance(coder, UserMessageError):
        return coder.status_code(settings=settings)
    return coder.status_code()


def with_status_code(err: BaseException | None, code: int) -> StatusCodeError:
    """
    Add a status code to the chain of ``err``.

    A None ``err`` is replaced by an error whose text is the standard text of
    ``code``, so the result is never causeless.
    """
    if err is None:
        err = Exception(get_settings().status_texter(code))
    return StatusCodeError(err, code)


def status_code(err: BaseException | None, *, settings: Settings | None = None) -> int:
    """
    Return the status code associated with ``err``.

    None yields ``status_code_no_err`` (200 by default). An error without any
    status code in its chain yields ``status_code_err`` (500 by default).
    """
    resolved = settings or get_settings()
    if err is None:
        return resolved.status_code_no_err
    coder = find(err, StatusCoder)
    if coder is not None:
        return _code_of(coder, resolved)
    return resolved.status_code_err


def with_user_message(err: BaseException | None, message: str) -> UserMessageError:
    """
    Add a user-facing message to the chain of ``err``.

    A None ``err`` is replaced by ``Exception("UserMessage<message>")``. Unless
    a status code is set elsewhere, the result reports ``status_code_msg``.
    """
    if err is None:
        err = Exception(f"UserMessage<{message}>")
    return UserMessageError(err, message)


def with_user_messagef(err: BaseException | None, format: str, *args: Any) -> UserMessageError:
    """Format the message printf-style before calling ``with_user_message``."""
    return with_user_message(err, format % args)


def user_message(err: BaseException | None, *, settings: Settings | None = None) -> str:
    """
    Return the user message associated with ``err``.

    None yields "". Without a message in the chain, the standard text of a
    status code found in the chain is used; a chain with neither, or a code
    without standard text, yields ``default_error_message``.
    """
    if err is None:
        return ""
    messenger = find(err, UserMessenger)
    if messenger is not None:
        return messenger.user_message()
    resolved = settings or get_settings()
    coder = find(err, StatusCoder)
    if coder is not None:
        text = resolved.status_texter(_code_of(coder, resolved))
        if text:
            return text
    return resolved.default_error_message


def user_message_status(err: BaseException | None, *, settings: Settings | None = None) -> str:
    """
    Return the user message associated with ``err``.

    Without a message in the chain, ``status_texter`` is applied to
    ``status_code(err)`` instead.
    """
    if err is None:
        return ""
    messenger = find(err, UserMessenger)
    if messenger is not None:
        return messenger.user_message()
    resolved = settings or get_settings()
    return resolved.status_texter(status_code(err, settings=resolved))


def with_code_and_message(
    err: BaseException | None,
    code: int,
    message: str,
) -> StatusCodeError:
    return with_status_code(with_user_message(err, message), code)


def new(code: int, format: str, *args: Any) -> StatusCodeError:
    """Format an error with ``errorf`` and attach ``code`` to it."""
    return with_status_code(errorf(format, *args), code)


__all__ = [
    "StatusCodeError",
    "StatusCoder",
    "UserMessageError",
    "UserMessenger",
    "find",
    "is_caused_by",
    "iter_chain",
    "new",
    "status_code",
    "unwrap",
    "user_message",
    "user_message_status",
    "with_code_and_message",
    "with_status_code",
    "with_user_message",
    "with_user_messagef",
]
