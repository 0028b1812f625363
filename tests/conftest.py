from __future__ import annotations

from typing import Iterator

import pytest

from resperr.core.config import reset_settings

_RESPERR_ENV_VARS = (
    "RESPERR_STATUS_CODE_NO_ERR",
    "RESPERR_STATUS_CODE_ERR",
    "RESPERR_STATUS_CODE_MSG",
    "RESPERR_DEFAULT_ERROR_MESSAGE",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for key in _RESPERR_ENV_VARS:
        monkeypatch.delenv(key, raising=False)
    reset_settings()
    yield
    reset_settings()
