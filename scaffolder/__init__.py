"""Bootstrap new projects from declarative stack templates."""
from __future__ import annotations

from .cli import main

__all__ = ["main"]
