"""Initial git repository setup for a freshly scaffolded project.

Reads go through pygit2; writes use the git CLI so hooks and user
configuration are respected.
"""
from __future__ import annotations

from pathlib import Path
from typing import List

import pygit2

from .invocation import Invocation


INITIAL_BRANCH = "main"
INITIAL_COMMIT_MESSAGE = "Initial commit"


class ProjectRepository:
    def __init__(self, path: Path) -> None:
        self.path = Path(path).resolve()

    @property
    def is_repository_root(self) -> bool:
        """True when ``path`` itself is the working tree of an existing repository."""

        if not self.path.exists():
            return False
        try:
            repo = pygit2.Repository(str(self.path))
        except pygit2.GitError:
            return False
        workdir = repo.workdir
        return bool(workdir) and Path(workdir).resolve() == self.path

    def plan_initialization(self) -> List[Invocation]:
        invocations: List[Invocation] = []
        if not self.is_repository_root:
            invocations.append(
                Invocation.from_argv(["git", "init", "-b", INITIAL_BRANCH], cwd=self.path, description="git init")
            )
        invocations.append(Invocation.from_argv(["git", "add", "-A"], cwd=self.path, description="git add"))
        invocations.append(
            Invocation.from_argv(
                ["git", "commit", "-m", INITIAL_COMMIT_MESSAGE], cwd=self.path, description="git commit"
            )
        )
        return invocations
