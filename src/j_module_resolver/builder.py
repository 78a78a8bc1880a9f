"""Build `Project` values from POM files or repository coordinates."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from j_module_resolver.exceptions import FetchError, PomNotFoundError
from j_module_resolver.fetcher import ArtifactFetcher
from j_module_resolver.layout import LocalRepository
from j_module_resolver.models import Coordinate, Project
from j_module_resolver.parser import parse_pom

logger = logging.getLogger(__name__)


class DescriptorBuilder(Protocol):
    """Turns a descriptor file or an artifact handle into a `Project`."""

    def build(self, source: Path | Coordinate, *, resolve_dependencies: bool = True) -> Project:
        """Raise `DescriptorBuildError` when the source is missing or malformed."""
        ...


class PomProjectBuilder:
    """Descriptor builder backed by the lxml POM parser.

    Building from a `Coordinate` looks the `pom` up in the local repository
    and asks the fetcher to download it first when it is not cached yet.
    """

    def __init__(self, repository: LocalRepository, fetcher: ArtifactFetcher | None = None):
        self.repository = repository
        self.fetcher = fetcher

    def build(self, source: Path | Coordinate, *, resolve_dependencies: bool = True) -> Project:
        if isinstance(source, Coordinate):
            return self._build_from_coordinate(source, resolve_dependencies)
        return parse_pom(source, resolve_dependencies=resolve_dependencies)

    def _build_from_coordinate(self, coordinate: Coordinate, resolve_dependencies: bool) -> Project:
        if not coordinate.version:
            raise PomNotFoundError(f"Cannot locate the POM of {coordinate.compact()}: no version given")

        # One POM per version: classified artifacts share the plain descriptor.
        pom_coordinate = coordinate.descriptor().model_copy(update={"classifier": ""})
        pom_file = self.repository.path_for(pom_coordinate)
        if not pom_file.exists():
            if self.fetcher is None:
                raise PomNotFoundError(f"POM of {coordinate.compact()} is not cached at {pom_file}")
            try:
                self.fetcher.fetch(pom_coordinate)
            except FetchError as exc:
                raise PomNotFoundError(f"Failed to fetch POM of {coordinate.compact()}: {exc}") from exc

        return parse_pom(pom_file, resolve_dependencies=resolve_dependencies)
