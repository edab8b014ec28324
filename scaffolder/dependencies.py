"""Dependency records and the parser for a stack template's ``deps`` table."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Sequence, Tuple


LATEST = "latest"


class ParseError(ValueError):
    """Raised when a dependency declaration is malformed."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.reason = message


class Ecosystem(str, Enum):
    NPM = "npm"
    CARGO = "cargo"
    COMPOSER = "composer"


ECOSYSTEM_ORDER: Tuple[Ecosystem, ...] = (Ecosystem.NPM, Ecosystem.CARGO, Ecosystem.COMPOSER)
"""Fixed order in which ecosystems are installed."""


ThenCommands = Tuple[Tuple[str, ...], ...]


@dataclass(frozen=True, slots=True)
class DependencyRecord:
    """One installable package as declared by a stack template."""

    name: str
    version: str = LATEST
    dev: bool = False
    features: Tuple[str, ...] = ()
    then: ThenCommands = ()

    @property
    def pinned(self) -> bool:
        return self.version != LATEST

    @property
    def package_spec(self) -> str:
        return f"{self.name}@{self.version}" if self.pinned else self.name


def parse_ecosystem(value: Any, *, field: str) -> Ecosystem:
    try:
        return Ecosystem(str(value))
    except ValueError:
        supported = ", ".join(item.value for item in ECOSYSTEM_ORDER)
        raise ParseError(field, f"unknown ecosystem '{value}' (supported: {supported})") from None


def _parse_then(value: Any, *, field: str) -> ThenCommands:
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise ParseError(field, "must be a list of argument lists")
    commands: List[Tuple[str, ...]] = []
    for index, argv in enumerate(value):
        entry_field = f"{field}[{index}]"
        if isinstance(argv, (str, bytes)) or not isinstance(argv, Sequence):
            raise ParseError(entry_field, "must be a list of arguments")
        if not argv:
            raise ParseError(entry_field, "must not be empty")
        commands.append(tuple(str(arg) for arg in argv))
    return tuple(commands)


def _parse_features(value: Any, *, field: str) -> Tuple[str, ...]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise ParseError(field, "must be a list of strings")
    features: List[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ParseError(field, "entries must be strings")
        features.append(item)
    return tuple(features)


def parse_dependency(data: Any, *, field: str = "dependency") -> DependencyRecord:
    """Build a :class:`DependencyRecord` from one declared table."""

    if not isinstance(data, Mapping):
        raise ParseError(field, "must be a table")

    name = data.get("name")
    if name is None:
        raise ParseError(f"{field}.name", "is required")
    if not isinstance(name, str) or not name.strip():
        raise ParseError(f"{field}.name", "must be a non-empty string")

    version = data.get("version", LATEST)
    if not isinstance(version, str) or not version:
        raise ParseError(f"{field}.version", "must be a non-empty string")

    dev = data.get("dev", False)
    if not isinstance(dev, bool):
        raise ParseError(f"{field}.dev", "must be a boolean")

    features: Tuple[str, ...] = ()
    if "features" in data:
        features = _parse_features(data["features"], field=f"{field}.features")

    then: ThenCommands = ()
    if "then" in data:
        then = _parse_then(data["then"], field=f"{field}.then")

    return DependencyRecord(name=name.strip(), version=version, dev=dev, features=features, then=then)


def parse_dependency_list(value: Any, *, field: str) -> List[DependencyRecord]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise ParseError(field, "must be an array of dependency tables")
    return [parse_dependency(entry, field=f"{field}[{index}]") for index, entry in enumerate(value)]


def parse_dependency_groups(table: Any, *, field: str = "deps") -> Dict[Ecosystem, List[DependencyRecord]]:
    """Parse a mapping of ecosystem name to dependency declarations.

    Only ecosystems present in ``table`` appear in the result, so an empty list
    means "ecosystem used with no dependencies" while a missing key means
    "ecosystem unused".
    """

    if not isinstance(table, Mapping):
        raise ParseError(field, "must be a table keyed by ecosystem")
    groups: Dict[Ecosystem, List[DependencyRecord]] = {}
    for key, value in table.items():
        ecosystem = parse_ecosystem(key, field=f"{field}.{key}")
        groups[ecosystem] = parse_dependency_list(value, field=f"{field}.{key}")
    return groups


def parse_dependency_table(document: Mapping[str, Any]) -> Dict[Ecosystem, List[DependencyRecord]]:
    """Resolve the ``deps`` table of a parsed template document."""

    if "deps" not in document:
        return {}
    return parse_dependency_groups(document["deps"])


__all__ = [
    "DependencyRecord",
    "ECOSYSTEM_ORDER",
    "Ecosystem",
    "LATEST",
    "ParseError",
    "parse_dependency",
    "parse_dependency_groups",
    "parse_dependency_list",
    "parse_dependency_table",
    "parse_ecosystem",
]
