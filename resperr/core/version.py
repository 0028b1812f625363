"""Resolve the resperr version from installed metadata or the source checkout."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Final

import tomllib

DISTRIBUTION_NAME: Final[str] = "resperr"
FALLBACK_VERSION: Final[str] = "0.0.0"


def _read_pyproject_version() -> str | None:
    """Read ``[project].version`` from pyproject.toml next to the package, if present."""
    pyproject_path = Path(__file__).resolve().parents[2] / "pyproject.toml"
    if not pyproject_path.exists():
        return None

    with pyproject_path.open("rb") as fp:
        data = tomllib.load(fp)

    project_data = data.get("project")
    if not isinstance(project_data, dict):
        return None
    version_value = project_data.get("version")
    return version_value if isinstance(version_value, str) else None


def _resolve_version() -> str:
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        return _read_pyproject_version() or FALLBACK_VERSION


__version__: Final[str] = _resolve_version()

__all__ = ["__version__"]
