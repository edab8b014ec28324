"""Immutable description of one external command."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Sequence, Tuple


@dataclass(frozen=True, slots=True)
class Invocation:
    executable: str
    args: Tuple[str, ...] = ()
    cwd: Path | None = None
    env: Mapping[str, str] = field(default_factory=dict, hash=False)
    description: str | None = None

    @classmethod
    def from_argv(
        cls,
        argv: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        description: str | None = None,
    ) -> "Invocation":
        if not argv:
            raise ValueError("Invocation requires at least an executable")
        return cls(
            executable=str(argv[0]),
            args=tuple(str(arg) for arg in argv[1:]),
            cwd=cwd,
            env=dict(env or {}),
            description=description,
        )

    @property
    def argv(self) -> Tuple[str, ...]:
        return (self.executable, *self.args)
