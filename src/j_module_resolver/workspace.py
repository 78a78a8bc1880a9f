"""Lookup of sibling modules built on disk but not part of the reactor."""

from __future__ import annotations

import logging

from j_module_resolver.builder import DescriptorBuilder
from j_module_resolver.exceptions import DescriptorBuildError
from j_module_resolver.models import Coordinate, Project

logger = logging.getLogger(__name__)

DESCRIPTOR_FILE_NAME = "pom.xml"


class LocalWorkspaceLocator:
    """Find `<root basedir>/<artifactId>/pom.xml` projects with a packaged artifact.

    Only coordinates sharing the root project's groupId are looked up. Every
    failure here is a miss so that resolution can continue with the repository.
    """

    def __init__(self, root_project: Project | None, builder: DescriptorBuilder):
        self.root_project = root_project
        self.builder = builder

    def locate(self, coordinate: Coordinate) -> Project | None:
        root = self.root_project
        if root is None or root.basedir is None or root.group_id != coordinate.group_id:
            return None

        logger.debug(f"Module {coordinate.group_id}:{coordinate.artifact_id} might exist locally.")
        pom_file = root.basedir / coordinate.artifact_id / DESCRIPTOR_FILE_NAME
        if not pom_file.is_file():
            return None

        try:
            project = self.builder.build(pom_file)
        except DescriptorBuildError as exc:
            logger.debug(f"Failed to build local project {pom_file}: {exc}")
            return None

        artifact_file = project.final_artifact_path()
        if artifact_file is None or not artifact_file.exists():
            logger.debug(f"Local project {pom_file} has no packaged artifact, skipping it.")
            return None

        logger.info(f"Resolved {coordinate} via local project {pom_file}")
        return project.model_copy(update={"artifact_file": artifact_file})
