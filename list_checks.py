"""Structural checks run over the package list before any network access."""

import re
from collections.abc import Sequence
from typing import Protocol

from errors import ListCheckError

GIT_URL_PATTERN = re.compile(r"^https://github\.com/[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+\.git$")


class ListCheck(Protocol):
    success_description: str

    def validate(self, urls: list[str]) -> ListCheckError | None: ...


class GitUrlListCheck:
    success_description = "URLs are valid"

    def validate(self, urls: list[str]) -> ListCheckError | None:
        invalid = [url for url in urls if not GIT_URL_PATTERN.match(url)]
        if invalid:
            return ListCheckError("Invalid repository URLs", invalid)
        return None


class SortedListCheck:
    success_description = "List is sorted"

    def validate(self, urls: list[str]) -> ListCheckError | None:
        # Report each entry that sorts before its predecessor
        lowered = [url.lower() for url in urls]
        out_of_order = [urls[i] for i in range(1, len(urls)) if lowered[i] < lowered[i - 1]]
        if out_of_order:
            return ListCheckError("List is not sorted", out_of_order)
        return None


class UniqueListCheck:
    success_description = "URLs are unique"

    def validate(self, urls: list[str]) -> ListCheckError | None:
        seen: set[str] = set()
        duplicates = []
        for url in urls:
            key = url.lower()
            if key in seen:
                duplicates.append(url)
            seen.add(key)
        if duplicates:
            return ListCheckError("Duplicate URLs", duplicates)
        return None


DEFAULT_CHECKS: tuple[ListCheck, ...] = (GitUrlListCheck(), SortedListCheck(), UniqueListCheck())


def run_list_checks(urls: list[str], checks: Sequence[ListCheck] = DEFAULT_CHECKS) -> list[ListCheckError]:
    """Run every check and return the errors found (empty when the list is clean)."""
    errors = []
    for check in checks:
        error = check.validate(urls)
        if error is not None:
            errors.append(error)
    return errors
