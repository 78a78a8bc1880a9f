"""Resolution of modules from the local repository, falling back to remotes."""

from __future__ import annotations

import logging

from j_module_resolver.builder import DescriptorBuilder
from j_module_resolver.exceptions import DescriptorBuildError, FetchError, ResolutionError
from j_module_resolver.fetcher import ArtifactFetcher
from j_module_resolver.layout import LocalRepository
from j_module_resolver.models import Coordinate, Project

logger = logging.getLogger(__name__)


class RepositoryLocator:
    """Last resolution tier: the local cache plus remote fetching.

    `parent_project` is the project the resolution runs for. It supplies the
    version of same-group coordinates declared without one, and becomes the
    parent of every project resolved here.
    """

    def __init__(
        self,
        repository: LocalRepository,
        builder: DescriptorBuilder,
        fetcher: ArtifactFetcher,
        parent_project: Project | None = None,
    ):
        self.repository = repository
        self.builder = builder
        self.fetcher = fetcher
        self.parent_project = parent_project

    def infer_version(self, coordinate: Coordinate) -> Coordinate:
        """Take the parent's version for a versionless coordinate of the same group."""
        parent = self.parent_project
        if coordinate.version or parent is None or parent.group_id != coordinate.group_id:
            return coordinate
        logger.info(f"Assuming project version {parent.version} for artifact {coordinate}")
        return coordinate.with_version(parent.version)

    def locate(self, coordinate: Coordinate) -> Project:
        """Resolve `coordinate` or raise.

        Raises:
            ResolutionError: If no project descriptor could be built.
            FetchError: If the artifact could not be downloaded.
        """
        logger.debug(
            f"Module {coordinate.group_id}:{coordinate.artifact_id} not found in reactor, "
            "trying to find it in the local repository."
        )
        coordinate = self.infer_version(coordinate)

        artifact_file = self.repository.path_for(coordinate)
        pom_file = self.repository.path_for(coordinate.descriptor())

        try:
            project = self.builder.build(pom_file)
        except DescriptorBuildError:
            logger.debug(f"failed... try to resolve {coordinate.artifact_id} from remote repository...")
            try:
                project = self.builder.build(coordinate)
            except DescriptorBuildError as exc:
                raise ResolutionError(coordinate) from exc
            self._fetch(coordinate)
        else:
            if not artifact_file.exists():
                self._fetch(coordinate)

        logger.debug(f"Dependency resolved: {coordinate.artifact_id}:{coordinate.version}")
        return project.model_copy(update={"artifact_file": artifact_file, "parent": self.parent_project})

    def _fetch(self, coordinate: Coordinate) -> None:
        logger.info(f"Try to resolve artifact for {coordinate.artifact_id} from remote repository...")
        try:
            self.fetcher.fetch(coordinate)
        except FetchError:
            logger.error(f"Failed to resolve artifact {coordinate}.")
            raise
