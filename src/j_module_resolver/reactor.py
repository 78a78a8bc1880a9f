"""Lookup of modules that are part of the current build (the reactor)."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from j_module_resolver.models import Coordinate, Project

logger = logging.getLogger(__name__)


class ReactorIndex:
    """Read-only view over the projects participating in the current build."""

    def __init__(self, projects: Iterable[Project] = ()):
        self._projects: tuple[Project, ...] = tuple(projects)

    def __len__(self) -> int:
        return len(self._projects)

    def __iter__(self):
        return iter(self._projects)

    @property
    def projects(self) -> tuple[Project, ...]:
        return self._projects

    def find(self, coordinate: Coordinate) -> Project | None:
        """Return the reactor project matching `(groupId, artifactId)`.

        Duplicate entries are logged and the first match wins.
        """
        found: Project | None = None
        prefix = f"Module {coordinate.group_id}:{coordinate.artifact_id}"

        for project in self._projects:
            if project.key != coordinate.key:
                continue
            if found is not None:
                logger.warning(f"{prefix} found twice in reactor!")
            else:
                logger.debug(f"{prefix} found in reactor!")
                found = project

        return found
