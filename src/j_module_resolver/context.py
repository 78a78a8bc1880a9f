"""Build context: the project resolution runs for, and the reactor around it."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from j_module_resolver.builder import DescriptorBuilder
from j_module_resolver.exceptions import DescriptorBuildError
from j_module_resolver.models import Project
from j_module_resolver.scanner import find_pom_files

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildContext:
    """What the resolver needs to know about the running build.

    Attributes:
        project: The overriding project. Its `parent`, when set, is the root
            project whose base directory holds the sibling modules.
        local_repository: Root of the local artifact cache.
    """

    project: Project
    local_repository: Path

    @classmethod
    def from_pom(cls, pom: Path, builder: DescriptorBuilder, local_repository: Path) -> "BuildContext":
        """Build the current project and attach its root project when found on disk.

        The root is the POM at the parent's `relativePath` (default
        `../pom.xml`) whose groupId and artifactId match the declared parent.

        Raises:
            DescriptorBuildError: If the current project's POM cannot be built.
        """
        project = builder.build(pom)
        root = _load_parent(project, builder)
        if root is not None:
            project = project.model_copy(update={"parent": root})
        return cls(project=project, local_repository=local_repository)


def _load_parent(project: Project, builder: DescriptorBuilder) -> Project | None:
    declared = project.parent_coordinate
    if declared is None or not project.parent_relative_path or project.basedir is None:
        return None

    candidate = project.basedir / project.parent_relative_path
    if candidate.is_dir():
        candidate = candidate / "pom.xml"
    if not candidate.is_file():
        logger.debug(f"Parent POM {candidate} of {project.compact()} does not exist")
        return None

    try:
        parent = builder.build(candidate, resolve_dependencies=False)
    except DescriptorBuildError as exc:
        logger.debug(f"Failed to build parent project {candidate}: {exc}")
        return None

    if parent.key != declared.key:
        logger.debug(
            f"{candidate} is {parent.compact()}, not the declared parent {declared.compact()}; ignoring it"
        )
        return None
    return parent


def load_reactor(paths: Iterable[Path], builder: DescriptorBuilder) -> list[Project]:
    """Build the reactor projects from POM files or directories to scan.

    The packaged artifact is bound when it already exists. POMs that cannot be
    built are logged and skipped.
    """
    pom_files: list[Path] = []
    for path in paths:
        pom_files.extend(find_pom_files(path))

    projects: list[Project] = []
    for pom_file in sorted(set(pom_files)):
        try:
            project = builder.build(pom_file)
        except DescriptorBuildError as exc:
            logger.warning(f"Skipping reactor POM {pom_file}: {exc}")
            continue

        artifact_file = project.final_artifact_path()
        if artifact_file is not None and artifact_file.exists():
            project = project.model_copy(update={"artifact_file": artifact_file})
        projects.append(project)
    return projects
