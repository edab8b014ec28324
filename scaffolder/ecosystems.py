"""Per-ecosystem command shapes for init, install and script injection."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Tuple

from .dependencies import DependencyRecord, Ecosystem
from .invocation import Invocation


NODE_TOOLS = ("npm", "bun")


class EcosystemHandler:
    """Builds invocations for one package ecosystem."""

    ecosystem: Ecosystem
    executable: str
    init_args: Tuple[str, ...] = ("init",)
    install_verb: str = "add"
    dev_flag: str = "--dev"
    supports_scripts: bool = False

    def install_environment(self) -> Mapping[str, str]:
        return {}

    def init_invocation(self, cwd: Path | None) -> Invocation:
        return Invocation(
            executable=self.executable,
            args=self.init_args,
            cwd=cwd,
            description=f"init {self.ecosystem.value}",
        )

    def install_args(self, record: DependencyRecord) -> List[str]:
        args = [self.install_verb, record.package_spec]
        if record.dev:
            args.append(self.dev_flag)
        return args

    def install_invocation(self, record: DependencyRecord, cwd: Path | None) -> Invocation:
        return Invocation(
            executable=self.executable,
            args=tuple(self.install_args(record)),
            cwd=cwd,
            env=dict(self.install_environment()),
            description=f"{self.ecosystem.value} {record.name}",
        )

    def dependency_invocations(self, records: Iterable[DependencyRecord], cwd: Path | None) -> List[Invocation]:
        """Install each record in order, each followed by its ``then`` commands."""

        invocations: List[Invocation] = []
        for record in records:
            invocations.append(self.install_invocation(record, cwd))
            for argv in record.then:
                invocations.append(
                    Invocation.from_argv(argv, cwd=cwd, description=f"then ({record.name})")
                )
        return invocations

    def script_args(self, name: str, body: str) -> List[str]:
        raise ValueError(f"{self.ecosystem.value} does not support named scripts")

    def script_invocation(self, name: str, body: str, cwd: Path | None) -> Invocation:
        return Invocation(
            executable=self.executable,
            args=tuple(self.script_args(name, body)),
            cwd=cwd,
            description=f"{self.ecosystem.value} script {name}",
        )


class NodeHandler(EcosystemHandler):
    ecosystem = Ecosystem.NPM
    init_args = ("init", "-y")
    supports_scripts = True

    def __init__(self, tool: str = "npm"):
        if tool not in NODE_TOOLS:
            raise ValueError(f"Unsupported npm-family tool '{tool}'. Available tools: {', '.join(NODE_TOOLS)}")
        self.executable = tool

    def script_args(self, name: str, body: str) -> List[str]:
        return ["pkg", "set", f"scripts.{name}={body}"]


class CargoHandler(EcosystemHandler):
    ecosystem = Ecosystem.CARGO
    executable = "cargo"
    features_flag = "--features"

    def install_environment(self) -> Mapping[str, str]:
        return {"CARGO_NET_GIT_FETCH_WITH_CLI": "true"}

    def install_args(self, record: DependencyRecord) -> List[str]:
        args = super().install_args(record)
        if record.features:
            args.extend([self.features_flag, ",".join(record.features)])
        return args


class ComposerHandler(EcosystemHandler):
    ecosystem = Ecosystem.COMPOSER
    executable = "composer"
    install_verb = "require"
    supports_scripts = True

    def script_args(self, name: str, body: str) -> List[str]:
        return ["config", "--", f"scripts.{name}", body]


def default_handlers(node_tool: str = "npm") -> Dict[Ecosystem, EcosystemHandler]:
    return {
        Ecosystem.NPM: NodeHandler(node_tool),
        Ecosystem.CARGO: CargoHandler(),
        Ecosystem.COMPOSER: ComposerHandler(),
    }
