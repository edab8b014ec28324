"""Turn a resolved configuration into the ordered install queue."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Mapping, Set

from .config import ScaffoldConfig
from .dependencies import DependencyRecord, Ecosystem
from .ecosystems import EcosystemHandler
from .invocation import Invocation


INIT_ORDER = (Ecosystem.CARGO, Ecosystem.NPM, Ecosystem.COMPOSER)
"""Order in which manifests are initialized."""


class CommandPlanner:
    """Plans init and install invocations for every ecosystem a project uses.

    Ecosystems are initialized at most once per planner; a second planner
    (or a second build against the same directory) initializes again.
    """

    def __init__(self, handlers: Mapping[Ecosystem, EcosystemHandler], *, cwd: Path | None) -> None:
        self._handlers = handlers
        self._cwd = cwd
        self._initialized: Set[Ecosystem] = set()

    def plan_init(self, ecosystem: Ecosystem) -> List[Invocation]:
        if ecosystem in self._initialized:
            return []
        self._initialized.add(ecosystem)
        return [self._handlers[ecosystem].init_invocation(self._cwd)]

    def plan_dependencies(
        self, ecosystem: Ecosystem, records: Iterable[DependencyRecord] | None
    ) -> List[Invocation]:
        """Plan one ecosystem: init when first touched, then each install and its follow-ups."""

        if records is None:
            return []
        invocations = self.plan_init(ecosystem)
        invocations.extend(self._handlers[ecosystem].dependency_invocations(records, self._cwd))
        return invocations

    def plan_install_queue(self, config: ScaffoldConfig) -> List[Invocation]:
        queue: List[Invocation] = []
        for ecosystem in INIT_ORDER:
            if config.dependencies_for(ecosystem) is not None:
                queue.extend(self.plan_init(ecosystem))

        for ecosystem in config.used_ecosystems:
            queue.extend(self.plan_dependencies(ecosystem, config.dependencies_for(ecosystem)))

        for tools in (config.linters, config.formatters, config.test_frameworks):
            for tool in tools:
                queue.extend(tool.install_invocations(self._handlers, self._cwd))

        if config.database is not None:
            queue.extend(config.database.install_invocations(self._handlers, config.used_ecosystems, self._cwd))
        return queue
