"""Project build pipeline: folders, templates, installs, scripts, post-install."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping

from core.command_runner import CommandResult, CommandRunner
from core.console import Console
from core.filesystem import FilesystemError, copy_tree, ensure_directory

from .config import ScaffoldConfig
from .dependencies import Ecosystem
from .ecosystems import EcosystemHandler, default_handlers
from .executor import Executor
from .git_repo import ProjectRepository
from .invocation import Invocation
from .planner import CommandPlanner
from .post_install import PostInstallSelector, patch_manifests
from .scripts import ScriptInjector
from .stacks import AFTER_INSTALL_DIR, BEFORE_INSTALL_DIR


@dataclass(slots=True)
class BuildReport:
    install_results: List[CommandResult] = field(default_factory=list)
    script_results: List[CommandResult] = field(default_factory=list)
    post_install_results: List[CommandResult] = field(default_factory=list)
    git_results: List[CommandResult] = field(default_factory=list)


class ProjectBuilder:
    def __init__(
        self,
        config: ScaffoldConfig,
        *,
        command_runner: CommandRunner,
        console: Console,
        handlers: Mapping[Ecosystem, EcosystemHandler] | None = None,
        dry_run: bool = False,
    ) -> None:
        self._config = config
        self._console = console
        self._dry_run = dry_run
        self._handlers = handlers or default_handlers(config.node_tool)
        self._executor = Executor(command_runner, console)

    @property
    def root(self) -> Path:
        return self._config.root_dir

    def plan_install_queue(self) -> List[Invocation]:
        return CommandPlanner(self._handlers, cwd=self.root).plan_install_queue(self._config)

    def plan_scripts(self) -> List[Invocation]:
        return ScriptInjector(self._handlers, cwd=self.root).plan(self._config)

    def build(self) -> BuildReport:
        self._console.info(f"Building project '{self._config.project_name}' from stack '{self._config.stack}'...")
        report = BuildReport()
        self.make_folders()
        self.pre_install()

        self._console.info("Queueing install commands...")
        queue = self.plan_install_queue()
        report.install_results = self._executor.run_queue(queue)

        scripts = self.plan_scripts()
        if scripts:
            self._console.info("Setting scripts...")
            report.script_results = self._executor.run_queue(scripts)

        report.post_install_results = self.post_install()

        if self._config.git_init:
            self._console.info("Initializing git repository...")
            report.git_results = self._executor.run_queue(ProjectRepository(self.root).plan_initialization())
        return report

    def make_folders(self) -> None:
        self._console.info("Making folders...")
        folders = [self.root, *(self.root / folder for folder in self._config.subfolders)]
        for folder in folders:
            if self._dry_run:
                self._console.dry(f"mkdir -p {folder}")
                continue
            self._console.debug(f"Creating folder: {folder}")
            ensure_directory(folder)

    def _copy_template(self, name: str) -> None:
        if self._config.template_dir is None:
            return
        source = self._config.template_dir / name
        if self._dry_run:
            self._console.dry(f"copy {source} -> {self.root}")
            return
        copy_tree(source, self.root)

    def pre_install(self) -> None:
        self._console.info("Running pre-install commands...")
        try:
            self._copy_template(BEFORE_INSTALL_DIR)
        except FilesystemError as exc:
            self._console.error(f"Skipping pre-install templates: {exc}")

    def post_install(self) -> List[CommandResult]:
        self._console.info("Running post-install commands...")
        selector = PostInstallSelector(self._handlers, cwd=self.root)
        results = [self._executor.run(invocation) for invocation in selector.select(self._config)]

        if self._dry_run:
            self._console.dry(f"patch manifests for stack '{self._config.stack}'")
        else:
            for manifest in patch_manifests(self._config, self.root):
                self._console.info(f"Updated {manifest}")

        self._copy_template(AFTER_INSTALL_DIR)
        return results
