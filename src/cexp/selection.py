"""Client-side narrowing of compiler listings."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable

from .api.models import CompilerInfo

_LOGGER = logging.getLogger(__name__)

Version = tuple[int, int, int]

# Compiler Explorer's semver field is not strict SemVer: development builds
# report things like "trunk" or "(trunk)" instead of a number.
_DEVELOPMENT = re.compile(r"\b(?:trunk|head|git|snapshot|nightly|tip|main|master)\b")
_NUMERIC = re.compile(r"^\s*v?(\d+)(?:\.(\d+))?(?:\.(\d+))?")

NEWEST: Version = (2**31, 0, 0)


def parse_version(value: str | None) -> Version | None:
    """Turn a semver-ish string into a comparable ``(major, minor, patch)``.

    Missing components are zero. Development builds with no leading number
    sort above every release. Returns ``None`` when nothing usable is found.
    """
    if not value:
        return None
    text = value.strip().lower()
    match = _NUMERIC.match(text)
    if match:
        return (int(match.group(1)), int(match.group(2) or 0), int(match.group(3) or 0))
    if _DEVELOPMENT.search(text):
        return NEWEST
    return None


def parse_bound(value: str | None, option: str) -> Version | None:
    """Parse a user supplied version bound, rejecting anything unparseable."""
    if value is None:
        return None
    parsed = parse_version(value)
    if parsed is None:
        raise ValueError(f"{option}: {value!r} is not a version (expected e.g. 12 or 12.3.1)")
    return parsed


def version_in_range(semver: str | None, minimum: Version | None, maximum: Version | None) -> bool:
    """Inclusive range check; unparseable versions never satisfy a bound."""
    if minimum is None and maximum is None:
        return True
    version = parse_version(semver)
    if version is None:
        return False
    if minimum is not None and version < minimum:
        return False
    if maximum is not None and version > maximum:
        return False
    return True


@dataclass(slots=True)
class CompilerQuery:
    """Narrowing criteria; ``None`` disables a pass."""

    name: str | None = None
    language: str | None = None
    instruction_set: str | None = None
    version_min: str | None = None
    version_max: str | None = None
    regex: bool = False

    def is_empty(self) -> bool:
        return not any(
            value is not None
            for value in (self.name, self.language, self.instruction_set, self.version_min, self.version_max)
        )

    def validate(self) -> None:
        """Raise ``ValueError`` if a pattern or bound cannot be used."""
        if self.name is not None and self.regex:
            try:
                re.compile(self.name)
            except re.error as exc:
                raise ValueError(f"--name: invalid regular expression {self.name!r}: {exc}") from exc
        minimum = parse_bound(self.version_min, "--version-min")
        maximum = parse_bound(self.version_max, "--version-max")
        if minimum is not None and maximum is not None and minimum > maximum:
            raise ValueError(f"--version-min {self.version_min} is greater than --version-max {self.version_max}")


def _by_name(compilers: list[CompilerInfo], needle: str, regex: bool) -> list[CompilerInfo]:
    if regex:
        pattern = re.compile(needle, re.IGNORECASE)
        return [c for c in compilers if pattern.search(c.name)]
    folded = needle.casefold()
    return [c for c in compilers if folded in c.name.casefold()]


def _by_field(compilers: list[CompilerInfo], attribute: str, wanted: str) -> list[CompilerInfo]:
    folded = wanted.casefold()
    return [c for c in compilers if getattr(c, attribute).casefold() == folded]


def find_compilers(compilers: Iterable[CompilerInfo], query: CompilerQuery) -> list[CompilerInfo]:
    """Apply each narrowing pass of ``query`` in turn.

    Order: name, language, instruction set, version range.
    """
    query.validate()
    result = list(compilers)
    total = len(result)

    if query.name is not None:
        result = _by_name(result, query.name, query.regex)
    if query.language is not None:
        result = _by_field(result, "lang", query.language)
    if query.instruction_set is not None:
        result = _by_field(result, "instruction_set", query.instruction_set)
    if query.version_min is not None or query.version_max is not None:
        minimum = parse_bound(query.version_min, "--version-min")
        maximum = parse_bound(query.version_max, "--version-max")
        result = [c for c in result if version_in_range(c.semver, minimum, maximum)]

    _LOGGER.debug("Selected %d of %d compilers", len(result), total)
    return result


__all__ = [
    "CompilerQuery",
    "NEWEST",
    "find_compilers",
    "parse_bound",
    "parse_version",
    "version_in_range",
]
