"""Sequential, best-effort execution of planned invocations."""
from __future__ import annotations

from typing import Iterable, List

from core.command_runner import CommandResult, CommandRunner
from core.console import Console

from .invocation import Invocation


class Executor:
    """Runs invocations strictly in order.

    A non-zero exit status is reported and the queue continues. A
    :class:`~core.command_runner.LaunchError` propagates and stops the queue.
    """

    def __init__(self, runner: CommandRunner, console: Console) -> None:
        self._runner = runner
        self._console = console

    def run(self, invocation: Invocation) -> CommandResult:
        self._console.info(f"Running command: {self._runner.format_command(invocation.argv)}")
        result = self._runner.run(
            invocation.argv,
            cwd=invocation.cwd,
            env=invocation.env or None,
            check=False,
            note=invocation.description,
        )
        self._console.info(f"->> STDOUT: {result.stdout.rstrip()}")
        self._console.info(f"->> STDERR: {result.stderr.rstrip()}")
        if result.returncode != 0:
            self._console.error(
                f"Command exited with status {result.returncode}: {self._runner.format_command(invocation.argv)}"
            )
        return result

    def run_queue(self, queue: Iterable[Invocation]) -> List[CommandResult]:
        return [self.run(invocation) for invocation in queue]
