"""
Version management for LoanRisk.

The version is read from pyproject.toml, which serves as the single
source of truth. When the package runs from an installed wheel the file
is not available and the fallback version is used.
"""

from pathlib import Path

import tomli

_FALLBACK_VERSION = "0.1.0"


def _find_project_root() -> Path:
    """
    Find the project root directory containing pyproject.toml.

    Returns:
        Path to the project root (or the package parent if none is found)
    """
    file_path = Path(__file__).resolve()

    project_root = file_path.parent.parent
    if (project_root / "pyproject.toml").exists():
        return project_root

    cwd = Path.cwd()
    if (cwd / "pyproject.toml").exists():
        return cwd

    return file_path.parent.parent


PROJECT_ROOT = _find_project_root()
PYPROJECT_PATH = PROJECT_ROOT / "pyproject.toml"


def get_version_from_pyproject() -> str:
    """
    Read the version string from pyproject.toml.

    Returns:
        Version string, or the fallback version if the file is unavailable
    """
    try:
        with open(PYPROJECT_PATH, "rb") as f:
            pyproject_data = tomli.load(f)
        if pyproject_data["project"]["name"] != "loanrisk":
            return _FALLBACK_VERSION
        return pyproject_data["project"]["version"]
    except FileNotFoundError:
        return _FALLBACK_VERSION
    except (KeyError, tomli.TOMLDecodeError):
        return _FALLBACK_VERSION


__version__ = get_version_from_pyproject()


def get_version() -> str:
    """Get the current version of the LoanRisk package."""
    return __version__
