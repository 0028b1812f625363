"""
Attach status codes and user-facing messages to errors.

Decorate errors where they are created or wrapped, then ask the chain at the
boundary which status code to return and which message to show.
"""

from resperr.core.config import Settings, configure, get_settings, reset_settings, status_text
from resperr.core.errors import (
    StatusCodeError,
    StatusCoder,
    UserMessageError,
    UserMessenger,
    find,
    is_caused_by,
    iter_chain,
    new,
    status_code,
    unwrap,
    user_message,
    user_message_status,
    with_code_and_message,
    with_status_code,
    with_user_message,
    with_user_messagef,
)
from resperr.core.formatting import FormattedError, errorf
from resperr.core.version import __version__

__all__ = [
    "FormattedError",
    "Settings",
    "StatusCodeError",
    "StatusCoder",
    "UserMessageError",
    "UserMessenger",
    "__version__",
    "configure",
    "errorf",
    "find",
    "get_settings",
    "is_caused_by",
    "iter_chain",
    "new",
    "reset_settings",
    "status_code",
    "status_text",
    "unwrap",
    "user_message",
    "user_message_status",
    "with_code_and_message",
    "with_status_code",
    "with_user_message",
    "with_user_messagef",
]
