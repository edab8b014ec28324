"""Resolved scaffold configuration built from a stack template and user selections."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple

from core.config_loader import normalize_string_list

from .dependencies import ECOSYSTEM_ORDER, DependencyRecord, Ecosystem
from .ecosystems import NODE_TOOLS
from .stacks import DatabaseClient, StackTemplate, ToolDescriptor


@dataclass(slots=True)
class Selection:
    """Choices made by the user for one build."""

    project_name: str
    root_dir: Path
    linters: List[str] = field(default_factory=list)
    formatters: List[str] = field(default_factory=list)
    test_frameworks: List[str] = field(default_factory=list)
    database: str | None = None
    spa: bool = False
    template_engine: bool = False
    e2e: bool = False
    node_tool: str = "npm"
    git_init: bool = False

    def apply_mapping(self, data: Mapping[str, Any]) -> None:
        """Merge choices read from a selection file into this selection."""

        for key in ("linters", "formatters", "test_frameworks"):
            if key in data:
                getattr(self, key).extend(normalize_string_list(data[key], field_name=key))
        if data.get("database"):
            self.database = str(data["database"])
        for key in ("spa", "template_engine", "e2e", "git_init"):
            if key in data:
                value = data[key]
                if not isinstance(value, bool):
                    raise TypeError(f"{key} must be a boolean")
                setattr(self, key, value)
        if data.get("node_tool"):
            self.node_tool = str(data["node_tool"])


@dataclass(frozen=True, slots=True)
class ScaffoldConfig:
    project_name: str
    root_dir: Path
    stack: str
    template_dir: Path | None = None
    subfolders: Tuple[Path, ...] = ()
    dependencies: Mapping[Ecosystem, Tuple[DependencyRecord, ...]] = field(default_factory=dict)
    scripts: Mapping[Ecosystem, Mapping[str, str]] = field(default_factory=dict)
    linters: Tuple[ToolDescriptor, ...] = ()
    formatters: Tuple[ToolDescriptor, ...] = ()
    test_frameworks: Tuple[ToolDescriptor, ...] = ()
    database: DatabaseClient | None = None
    spa: bool = False
    template_engine: bool = False
    e2e: bool = False
    node_tool: str = "npm"
    git_init: bool = False

    def dependencies_for(self, ecosystem: Ecosystem) -> Tuple[DependencyRecord, ...] | None:
        return self.dependencies.get(ecosystem)

    def scripts_for(self, ecosystem: Ecosystem) -> Mapping[str, str] | None:
        return self.scripts.get(ecosystem)

    @property
    def used_ecosystems(self) -> Tuple[Ecosystem, ...]:
        return tuple(ecosystem for ecosystem in ECOSYSTEM_ORDER if ecosystem in self.dependencies)


def _pick(available: Mapping[str, Any], names: List[str], *, kind: str) -> Tuple[Any, ...]:
    picked: List[Any] = []
    for name in names:
        if name not in available:
            offered = ", ".join(sorted(available)) or "<none>"
            raise KeyError(f"Unknown {kind} '{name}'. Available {kind}s: {offered}")
        if available[name] not in picked:
            picked.append(available[name])
    return tuple(picked)


def resolve_config(stack: StackTemplate, selection: Selection) -> ScaffoldConfig:
    if selection.node_tool not in NODE_TOOLS:
        raise ValueError(
            f"Unsupported npm-family tool '{selection.node_tool}'. Available tools: {', '.join(NODE_TOOLS)}"
        )

    database: DatabaseClient | None = None
    if selection.database:
        database = _pick(stack.databases, [selection.database], kind="database")[0]

    dependencies: Dict[Ecosystem, Tuple[DependencyRecord, ...]] = {
        ecosystem: tuple(records) for ecosystem, records in stack.dependencies.items()
    }
    scripts: Dict[Ecosystem, Mapping[str, str]] = {
        ecosystem: dict(entries) for ecosystem, entries in stack.scripts.items()
    }

    return ScaffoldConfig(
        project_name=selection.project_name,
        root_dir=selection.root_dir,
        stack=stack.name,
        template_dir=stack.path,
        subfolders=stack.subfolders,
        dependencies=dependencies,
        scripts=scripts,
        linters=_pick(stack.linters, selection.linters, kind="linter"),
        formatters=_pick(stack.formatters, selection.formatters, kind="formatter"),
        test_frameworks=_pick(stack.test_frameworks, selection.test_frameworks, kind="test framework"),
        database=database,
        spa=selection.spa,
        template_engine=selection.template_engine,
        e2e=selection.e2e,
        node_tool=selection.node_tool,
        git_init=selection.git_init,
    )
