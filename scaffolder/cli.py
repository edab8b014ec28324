"""Command line interface for the scaffolder tool."""
from __future__ import annotations

from argparse import ArgumentParser, Namespace
from pathlib import Path
from typing import Iterable, List
import os
import sys

from core.command_runner import LaunchError, RecordingCommandRunner, SubprocessCommandRunner
from core.config_loader import load_config_file
from core.console import Console
from core.filesystem import FilesystemError

from .build import ProjectBuilder
from .config import Selection, resolve_config
from .dependencies import ParseError
from .ecosystems import NODE_TOOLS
from .stacks import StackRepository


BUNDLED_TEMPLATES = Path(__file__).resolve().parent / "templates"
TEMPLATES_ENV = "SCAFFOLDER_TEMPLATES_DIR"


def _split_path_values(values: Iterable[str]) -> List[str]:
    parts: List[str] = []
    for value in values:
        if not value:
            continue
        for segment in value.split(os.pathsep):
            trimmed = segment.strip()
            if trimmed:
                parts.append(trimmed)
    return parts


def _resolve_template_directories(workspace: Path, cli_values: Iterable[str]) -> List[Path]:
    directories: List[Path] = [BUNDLED_TEMPLATES]
    env_value = os.environ.get(TEMPLATES_ENV)
    entries = _split_path_values([env_value] if env_value else [])
    entries.extend(_split_path_values(cli_values))
    for entry in entries:
        path = Path(entry).expanduser()
        if not path.is_absolute():
            path = workspace / path
        directories.append(path)

    ordered: List[Path] = []
    for path in directories:
        if path in ordered:
            ordered.remove(path)
        ordered.append(path)
    return ordered


def _load_repository(args: Namespace, workspace: Path) -> StackRepository:
    return StackRepository.from_directories(
        _resolve_template_directories(workspace, getattr(args, "templates", []))
    )


def _collect_names(values: Iterable[str]) -> List[str]:
    names: List[str] = []
    for value in values:
        if not value:
            continue
        names.extend(part.strip() for part in value.split(",") if part.strip())
    return names


def _parse_arguments(argv: Iterable[str]) -> Namespace:
    parser = ArgumentParser(prog="scaffolder", description="Bootstrap projects from stack templates")
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List available stacks")
    list_parser.add_argument("--templates", action="append", default=[], help="Additional template directory")

    build_parser = subparsers.add_parser("build", help="Scaffold a new project")
    build_parser.add_argument("stack", help="Stack to scaffold")
    build_parser.add_argument("name", help="Project name; also the project folder name")
    build_parser.add_argument("--root", help="Parent directory for the project (default: current directory)")
    build_parser.add_argument("--templates", action="append", default=[], help="Additional template directory")
    build_parser.add_argument("--selection", help="File with pre-made selections (toml/json/yaml)")
    build_parser.add_argument("--linter", action="append", default=[], help="Linter(s) to install (comma-separated)")
    build_parser.add_argument("--formatter", action="append", default=[], help="Formatter(s) to install (comma-separated)")
    build_parser.add_argument(
        "--test-framework",
        dest="test_framework",
        action="append",
        default=[],
        help="Test framework(s) to install (comma-separated)",
    )
    build_parser.add_argument("--database", help="Database client to install")
    build_parser.add_argument("--spa", action="store_true", default=None, help="Scaffold a single-page app frontend")
    build_parser.add_argument(
        "--template-engine",
        dest="template_engine",
        action="store_true",
        default=None,
        help="Add a server-side template engine",
    )
    build_parser.add_argument("--e2e", action="store_true", default=None, help="Install an end-to-end test runner")
    build_parser.add_argument("--node-tool", dest="node_tool", choices=NODE_TOOLS, help="npm-family package manager")
    build_parser.add_argument("--git-init", dest="git_init", action="store_true", default=None, help="Create an initial git commit")
    build_parser.add_argument("--dry-run", action="store_true", help="Print commands without executing them")
    build_parser.add_argument("--log-level", choices=list(Console.LEVELS), default="info", help="Console verbosity")

    return parser.parse_args(list(argv))


def main(argv: Iterable[str] | None = None) -> int:
    args = _parse_arguments(sys.argv[1:] if argv is None else argv)
    workspace = Path.cwd()

    if args.command == "list":
        return _handle_list(args, workspace)
    if args.command == "build":
        return _handle_build(args, workspace)
    raise ValueError(f"Unknown command: {args.command}")


def _handle_list(args: Namespace, workspace: Path) -> int:
    try:
        repository = _load_repository(args, workspace)
    except (ParseError, FileNotFoundError, ValueError, TypeError) as exc:
        print(f"Error: {exc}")
        return 2

    stacks = repository.list_stacks()
    if not stacks:
        print("No stacks found")
        return 0
    for stack in stacks:
        line = f"{stack.name}  {stack.title}"
        if stack.description:
            line = f"{line}  {stack.description}"
        print(line)
    return 0


def _build_selection(args: Namespace, workspace: Path) -> Selection:
    parent = Path(args.root).expanduser() if args.root else workspace
    if not parent.is_absolute():
        parent = workspace / parent
    selection = Selection(project_name=args.name, root_dir=parent / args.name)

    if args.selection:
        selection.apply_mapping(load_config_file(Path(args.selection)))

    selection.linters.extend(_collect_names(args.linter))
    selection.formatters.extend(_collect_names(args.formatter))
    selection.test_frameworks.extend(_collect_names(args.test_framework))
    if args.database:
        selection.database = args.database
    for key in ("spa", "template_engine", "e2e", "git_init"):
        value = getattr(args, key)
        if value is not None:
            setattr(selection, key, value)
    if args.node_tool:
        selection.node_tool = args.node_tool
    return selection


def _handle_build(args: Namespace, workspace: Path) -> int:
    console = Console(level=args.log_level, dry_run=args.dry_run)
    try:
        repository = _load_repository(args, workspace)
        stack = repository.get(args.stack)
        config = resolve_config(stack, _build_selection(args, workspace))
    except (ParseError, FileNotFoundError, KeyError, ValueError, TypeError) as exc:
        message = exc.args[0] if isinstance(exc, KeyError) and exc.args else exc
        print(f"Error: {message}")
        return 2

    runner: SubprocessCommandRunner | RecordingCommandRunner
    if args.dry_run:
        runner = RecordingCommandRunner()
    else:
        runner = SubprocessCommandRunner()

    builder = ProjectBuilder(config, command_runner=runner, console=console, dry_run=args.dry_run)
    try:
        builder.build()
    except (LaunchError, FilesystemError) as exc:
        print(f"Error: {exc}")
        return 1

    if args.dry_run and isinstance(runner, RecordingCommandRunner):
        for line in runner.iter_formatted(workspace=config.root_dir):
            print(line)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
