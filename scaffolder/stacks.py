"""Discovery and parsing of stack template directories."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple

from core.config_loader import collect_config_files, load_config_file

from .dependencies import (
    DependencyRecord,
    Ecosystem,
    ParseError,
    parse_dependency_groups,
    parse_dependency_list,
    parse_dependency_table,
    parse_ecosystem,
)
from .ecosystems import EcosystemHandler
from .invocation import Invocation


BEFORE_INSTALL_DIR = "before_install"
AFTER_INSTALL_DIR = "after_install"
SCRIPT_ECOSYSTEMS = (Ecosystem.NPM, Ecosystem.COMPOSER)


@dataclass(frozen=True, slots=True)
class ToolDescriptor:
    """A selectable linter, formatter or test framework."""

    name: str
    ecosystem: Ecosystem
    dependencies: Tuple[DependencyRecord, ...] = ()

    @classmethod
    def from_mapping(cls, data: Any, *, field: str) -> "ToolDescriptor":
        if not isinstance(data, Mapping):
            raise ParseError(field, "must be a table")
        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ParseError(f"{field}.name", "is required")
        if "ecosystem" not in data:
            raise ParseError(f"{field}.ecosystem", "is required")
        ecosystem = parse_ecosystem(data["ecosystem"], field=f"{field}.ecosystem")
        dependencies = parse_dependency_list(data.get("deps", []), field=f"{field}.deps")
        return cls(name=name.strip(), ecosystem=ecosystem, dependencies=tuple(dependencies))

    def install_invocations(
        self, handlers: Mapping[Ecosystem, EcosystemHandler], cwd: Path | None
    ) -> List[Invocation]:
        return handlers[self.ecosystem].dependency_invocations(self.dependencies, cwd)


@dataclass(frozen=True, slots=True)
class DatabaseClient:
    """A database client offering packages for one or more ecosystems."""

    name: str
    dependencies: Mapping[Ecosystem, Tuple[DependencyRecord, ...]] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Any, *, field: str) -> "DatabaseClient":
        if not isinstance(data, Mapping):
            raise ParseError(field, "must be a table")
        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ParseError(f"{field}.name", "is required")
        groups = parse_dependency_groups(data.get("deps", {}), field=f"{field}.deps")
        return cls(name=name.strip(), dependencies={key: tuple(value) for key, value in groups.items()})

    def install_invocations(
        self,
        handlers: Mapping[Ecosystem, EcosystemHandler],
        used_ecosystems: Iterable[Ecosystem],
        cwd: Path | None,
    ) -> List[Invocation]:
        invocations: List[Invocation] = []
        for ecosystem in used_ecosystems:
            records = self.dependencies.get(ecosystem)
            if records:
                invocations.extend(handlers[ecosystem].dependency_invocations(records, cwd))
        return invocations


def _parse_subfolders(value: Any) -> Tuple[Path, ...]:
    if value is None:
        return ()
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise ParseError("subfolders", "must be a list of paths")
    folders: List[Path] = []
    for index, entry in enumerate(value):
        if isinstance(entry, str) and entry:
            folders.append(Path(entry))
        elif isinstance(entry, Sequence) and not isinstance(entry, (str, bytes)) and entry:
            folders.append(Path(*(str(part) for part in entry)))
        else:
            raise ParseError(f"subfolders[{index}]", "must be a path string or a list of path segments")
    for folder in folders:
        if folder.is_absolute():
            raise ParseError("subfolders", f"'{folder}' must be relative to the project root")
        if ".." in folder.parts:
            raise ParseError("subfolders", f"'{folder}' must stay inside the project root")
    return tuple(folders)


def _parse_scripts(value: Any) -> Dict[Ecosystem, Dict[str, str]]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ParseError("scripts", "must be a table keyed by ecosystem")
    scripts: Dict[Ecosystem, Dict[str, str]] = {}
    for key, entries in value.items():
        ecosystem = parse_ecosystem(key, field=f"scripts.{key}")
        if ecosystem not in SCRIPT_ECOSYSTEMS:
            raise ParseError(f"scripts.{key}", "ecosystem does not support named scripts")
        if not isinstance(entries, Mapping):
            raise ParseError(f"scripts.{key}", "must map script names to script bodies")
        mapping: Dict[str, str] = {}
        for name, body in entries.items():
            if not isinstance(body, str):
                raise ParseError(f"scripts.{key}.{name}", "must be a string")
            mapping[str(name)] = body
        scripts[ecosystem] = mapping
    return scripts


def _parse_tools(value: Any, *, field: str) -> Dict[str, ToolDescriptor]:
    if value is None:
        return {}
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise ParseError(field, "must be an array of tables")
    tools: Dict[str, ToolDescriptor] = {}
    for index, entry in enumerate(value):
        tool = ToolDescriptor.from_mapping(entry, field=f"{field}[{index}]")
        tools[tool.name] = tool
    return tools


@dataclass(slots=True)
class StackTemplate:
    name: str
    title: str
    path: Path
    description: str = ""
    subfolders: Tuple[Path, ...] = ()
    dependencies: Dict[Ecosystem, List[DependencyRecord]] = field(default_factory=dict)
    scripts: Dict[Ecosystem, Dict[str, str]] = field(default_factory=dict)
    linters: Dict[str, ToolDescriptor] = field(default_factory=dict)
    formatters: Dict[str, ToolDescriptor] = field(default_factory=dict)
    test_frameworks: Dict[str, ToolDescriptor] = field(default_factory=dict)
    databases: Dict[str, DatabaseClient] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, name: str, path: Path, data: Mapping[str, Any]) -> "StackTemplate":
        databases: Dict[str, DatabaseClient] = {}
        raw_databases = data.get("databases", [])
        if isinstance(raw_databases, (str, bytes)) or not isinstance(raw_databases, Sequence):
            raise ParseError("databases", "must be an array of tables")
        for index, entry in enumerate(raw_databases):
            client = DatabaseClient.from_mapping(entry, field=f"databases[{index}]")
            databases[client.name] = client

        return cls(
            name=name,
            title=str(data.get("title") or name),
            path=path,
            description=str(data.get("description", "")),
            subfolders=_parse_subfolders(data.get("subfolders")),
            dependencies=parse_dependency_table(data),
            scripts=_parse_scripts(data.get("scripts")),
            linters=_parse_tools(data.get("linters"), field="linters"),
            formatters=_parse_tools(data.get("formatters"), field="formatters"),
            test_frameworks=_parse_tools(data.get("test_frameworks"), field="test_frameworks"),
            databases=databases,
        )

    @property
    def before_install_dir(self) -> Path:
        return self.path / BEFORE_INSTALL_DIR

    @property
    def after_install_dir(self) -> Path:
        return self.path / AFTER_INSTALL_DIR


def load_stack(directory: Path) -> StackTemplate:
    name = directory.name
    files = collect_config_files(directory)
    path = files.get(name)
    if path is None:
        raise FileNotFoundError(f"Stack definition '{name}.toml' not found in {directory}")
    try:
        return StackTemplate.from_mapping(name, directory, load_config_file(path))
    except ParseError as exc:
        raise ParseError(f"{path.name}: {exc.field}", exc.reason) from exc


@dataclass(slots=True)
class StackRepository:
    stacks: Dict[str, StackTemplate]

    @classmethod
    def from_directories(cls, directories: Iterable[Path]) -> "StackRepository":
        stacks: Dict[str, StackTemplate] = {}
        for directory in directories:
            if not directory.is_dir():
                continue
            for candidate in sorted(directory.iterdir()):
                if not candidate.is_dir() or candidate.name.startswith((".", "_")):
                    continue
                if not collect_config_files(candidate).get(candidate.name):
                    continue
                stack = load_stack(candidate)
                stacks[stack.name] = stack
        return cls(stacks=stacks)

    def list_stacks(self) -> List[StackTemplate]:
        return [self.stacks[name] for name in sorted(self.stacks)]

    def get(self, name: str) -> StackTemplate:
        if name not in self.stacks:
            available = ", ".join(sorted(self.stacks)) or "<none>"
            raise KeyError(f"Stack '{name}' not found. Available stacks: {available}")
        return self.stacks[name]
