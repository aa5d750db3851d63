"""Contrato común de las fuentes de registros (vitales y pruebas de marcha)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from breathe_track.model import VitalsReading, WalkTestResult


@dataclass(frozen=True)
class SourcePaths:
    """Folder holding a source's files."""

    root: Path


class DataSource(ABC):
    """Source of stored vitals log entries and walk-test results.

    Implementations resolve one file from ``paths.root`` and load both
    record kinds from it, oldest first.
    """

    def __init__(self, paths: SourcePaths) -> None:
        self._paths = paths

    @property
    def root(self) -> Path:
        return self._paths.root

    @abstractmethod
    def validate(self) -> None:
        """Raise FileNotFoundError if the source folder is missing."""

    @abstractmethod
    def newest_export(self) -> Path:
        """Most recent file in the source folder."""

    @abstractmethod
    def load_vitals(self, path: Path) -> list[VitalsReading]:
        """Vitals log entries of ``path`` sorted by timestamp."""

    @abstractmethod
    def load_walk_tests(self, path: Path) -> list[WalkTestResult]:
        """Walk-test results of ``path`` sorted by timestamp."""

    def load_all(self, path: Path) -> tuple[list[VitalsReading], list[WalkTestResult]]:
        """Both record kinds of ``path``."""
        return self.load_vitals(path), self.load_walk_tests(path)
