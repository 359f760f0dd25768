import re
import sys
from pathlib import Path
from typing import Optional

import tomlkit

PYPROJECT_FILE = Path("pyproject.toml")
INIT_FILE = Path("src/css_builder/__init__.py")
VERSION_PATTERN = r'__version__ = ["\'].*?["\']'


def validate_version(version: str) -> None:
    """Validates that the version follows MAJOR.MINOR.PATCH format."""
    if not re.match(r"^\d+\.\d+\.\d+$", version):
        raise ValueError("Version must be in MAJOR.MINOR.PATCH format (e.g., 0.1.0)")


def _require(filepath: Path) -> Path:
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"File not found: {filepath}")
    return filepath


def update_pyproject_version(filepath: Path, new_version: str) -> None:
    """Sets project.version in pyproject.toml, keeping the file's formatting."""
    filepath = _require(filepath)
    data = tomlkit.parse(filepath.read_text(encoding="utf-8"))

    if "project" not in data or "version" not in data["project"]:
        raise KeyError("Invalid pyproject.toml: missing 'project.version' field")

    data["project"]["version"] = new_version
    filepath.write_text(tomlkit.dumps(data), encoding="utf-8")
    print(f"Updated {filepath} to version {new_version}")


def update_init_version(filepath: Path, new_version: str) -> None:
    """Rewrites the __version__ assignment in the package __init__.py."""
    filepath = _require(filepath)
    content = filepath.read_text(encoding="utf-8")

    if not re.search(VERSION_PATTERN, content):
        raise ValueError(f"No __version__ found in {filepath}")

    filepath.write_text(
        re.sub(VERSION_PATTERN, f'__version__ = "{new_version}"', content),
        encoding="utf-8",
    )
    print(f"Updated {filepath} to version {new_version}")


def get_current_version(filepath: Path) -> Optional[str]:
    """Reads the current version from pyproject.toml."""
    filepath = Path(filepath)
    if not filepath.exists():
        return None
    data = tomlkit.parse(filepath.read_text(encoding="utf-8"))
    return data.get("project", {}).get("version")


def main() -> None:
    if len(sys.argv) != 2:
        print("Usage: python update_version.py <new_version>")
        sys.exit(1)

    new_version = sys.argv[1]
    try:
        validate_version(new_version)
        if get_current_version(PYPROJECT_FILE) == new_version:
            print(f"Version {new_version} already set in pyproject.toml, skipping update")
            return
        update_pyproject_version(PYPROJECT_FILE, new_version)
        update_init_version(INIT_FILE, new_version)
    except (ValueError, FileNotFoundError, KeyError) as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
