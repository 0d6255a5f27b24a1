"""Single source of truth for the application version.

Reads the installed distribution metadata, falling back to pyproject.toml
when running from a source checkout.
"""

import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

_PROJECT_ROOT = Path(__file__).resolve().parent.parent


def get_version() -> str:
    """Return the version string of the lifeweeks distribution."""
    try:
        return version("lifeweeks")
    except PackageNotFoundError:
        pyproject_path = _PROJECT_ROOT / "pyproject.toml"
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
        return data["project"]["version"]


__version__: str = get_version()
