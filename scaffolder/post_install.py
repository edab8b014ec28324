"""Stack-specific steps that run once installation and script injection are done."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Mapping, Tuple

from core.filesystem import FilesystemError

from .config import ScaffoldConfig
from .dependencies import DependencyRecord, Ecosystem
from .ecosystems import EcosystemHandler
from .invocation import Invocation


SSRJS = "ssrjs"
RSAPI = "rsapi"
RSWEB = "rsweb"
PLAINWEB = "plainweb"

SPA_SCAFFOLD_ARGV: Tuple[str, ...] = ("npx", "create-vite@latest", "frontend", "--template", "react-ts")

TEMPLATE_ENGINES: Dict[str, Tuple[Ecosystem, DependencyRecord]] = {
    SSRJS: (Ecosystem.NPM, DependencyRecord(name="ejs")),
    RSAPI: (Ecosystem.CARGO, DependencyRecord(name="askama")),
}
"""Stacks that take part in frontend selection and the templating package each one adds."""

E2E_RUNNER = DependencyRecord(name="@playwright/test", dev=True)

RSWEB_FEATURES = """
[features]
default = []
ssr = ["dioxus-fullstack/axum"]
web = ["dioxus-fullstack/web"]
"""


class PostInstallSelector:
    def __init__(self, handlers: Mapping[Ecosystem, EcosystemHandler], *, cwd: Path | None) -> None:
        self._handlers = handlers
        self._cwd = cwd

    def frontend_invocation(self, config: ScaffoldConfig) -> Invocation | None:
        if config.stack not in TEMPLATE_ENGINES:
            return None
        if config.spa:
            return Invocation.from_argv(SPA_SCAFFOLD_ARGV, cwd=self._cwd, description="single-page app")
        if config.template_engine:
            ecosystem, record = TEMPLATE_ENGINES[config.stack]
            return self._handlers[ecosystem].install_invocation(record, self._cwd)
        return None

    def e2e_invocation(self, config: ScaffoldConfig) -> Invocation | None:
        if config.stack != PLAINWEB or not config.e2e:
            return None
        return self._handlers[Ecosystem.NPM].install_invocation(E2E_RUNNER, self._cwd)

    def select(self, config: ScaffoldConfig) -> List[Invocation]:
        invocations: List[Invocation] = []
        for invocation in (self.frontend_invocation(config), self.e2e_invocation(config)):
            if invocation is not None:
                invocations.append(invocation)
        return invocations


def patch_manifests(config: ScaffoldConfig, root: Path) -> List[Path]:
    """Apply manifest edits a stack needs after installation; returns the touched files."""

    if config.stack != RSWEB:
        return []
    manifest = root / "Cargo.toml"
    if not manifest.is_file():
        raise FilesystemError(f"Failed to open {manifest}")
    try:
        with manifest.open("a", encoding="utf-8") as handle:
            handle.write(RSWEB_FEATURES)
    except OSError as exc:
        raise FilesystemError(f"Failed to write to {manifest}: {exc}") from exc
    return [manifest]
