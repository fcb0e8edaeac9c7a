"""Locate the external executables tools shell out to."""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DependencyCheck:
    """Where (if anywhere) one required executable was found on PATH."""

    name: str
    path: Optional[str]

    @property
    def available(self) -> bool:
        return self.path is not None


def check_dependencies(required: list[str]) -> list[DependencyCheck]:
    """Look up each executable in required, preserving order."""
    return [DependencyCheck(name=tool, path=shutil.which(tool)) for tool in required]


def missing_dependencies(required: list[str]) -> list[str]:
    """Names from required that are not on PATH."""
    return [check.name for check in check_dependencies(required) if not check.available]
