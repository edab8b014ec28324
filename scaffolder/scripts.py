"""Named run-script injection into package manifests."""
from __future__ import annotations

from pathlib import Path
from typing import List, Mapping

from .config import ScaffoldConfig
from .dependencies import ECOSYSTEM_ORDER, Ecosystem
from .ecosystems import EcosystemHandler
from .invocation import Invocation


class ScriptInjector:
    def __init__(self, handlers: Mapping[Ecosystem, EcosystemHandler], *, cwd: Path | None) -> None:
        self._handlers = handlers
        self._cwd = cwd

    def plan(self, config: ScaffoldConfig) -> List[Invocation]:
        invocations: List[Invocation] = []
        for ecosystem in ECOSYSTEM_ORDER:
            handler = self._handlers[ecosystem]
            scripts = config.scripts_for(ecosystem)
            if not scripts or not handler.supports_scripts:
                continue
            for name, body in scripts.items():
                invocations.append(handler.script_invocation(name, body, self._cwd))
        return invocations
