"""Locating and reading the packages.json list."""

import json
from pathlib import Path

PACKAGE_LIST_FILE_NAME = "packages.json"


def find_package_list(path: Path | None, search_dirs: list[Path]) -> Path | None:
    """Return the first existing package list.

    An explicit path wins; otherwise packages.json is looked up in each of
    search_dirs in order.
    """
    candidates = []
    if path is not None:
        candidates.append(path / PACKAGE_LIST_FILE_NAME if path.is_dir() else path)
    candidates.extend(d / PACKAGE_LIST_FILE_NAME for d in search_dirs)

    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def load_package_urls(path: Path) -> list[str]:
    """Read the package list; raises ValueError if it is not a JSON array of strings."""
    with open(path, "rb") as f:
        urls = json.load(f)
    if not isinstance(urls, list) or not all(isinstance(u, str) for u in urls):
        raise ValueError(f"{path} must contain a JSON array of URLs")
    return urls
