"""Pydantic models for Maven coordinates, projects and resolved modules."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Callable, Iterable

from pydantic import BaseModel, ConfigDict, Field, model_validator


UNKNOWN_VERSION = "Unknown"
DEFAULT_EXTENSION = "jar"
DEFAULT_SCOPE = "compile"

_COORDINATE_RE = re.compile(
    r"^[^: ]+:[^: ]+"  # groupId:artifactId
    r"(?::[^: ]+"  # :version
    r"|:[^: ]*:[^: ]+"  # :extension:version
    r"|:[^: ]*:[^: ]*:[^: ]+)?$"  # :extension:classifier:version
)


class Coordinate(BaseModel):
    """Maven artifact coordinates.

    Identity for matching purposes is `(group_id, artifact_id)`; an empty
    version means "not known yet" and may be inferred later.
    """

    model_config = ConfigDict(frozen=True)

    group_id: str = Field(..., min_length=1)
    artifact_id: str = Field(..., min_length=1)
    classifier: str = ""
    extension: str = DEFAULT_EXTENSION
    version: str = ""

    @classmethod
    def parse(cls, text: str) -> "Coordinate":
        """Parse `groupId:artifactId[:extension[:classifier]][:version]`.

        A bare `groupId:artifactId` leaves the version empty, and
        `groupId:artifactId:version` uses the default extension.

        Raises:
            ValueError: If the text is not a valid coordinate.
        """
        value = (text or "").strip()
        if not _COORDINATE_RE.match(value):
            raise ValueError(
                f"Bad artifact coordinates {text!r}, expected format is "
                "<groupId>:<artifactId>[:<extension>[:<classifier>]]:<version>"
            )
        parts = value.split(":")
        group_id, artifact_id = parts[0], parts[1]
        extension, classifier, version = DEFAULT_EXTENSION, "", ""
        if len(parts) == 3:
            version = parts[2]
        elif len(parts) == 4:
            extension, version = parts[2] or DEFAULT_EXTENSION, parts[3]
        elif len(parts) == 5:
            extension, classifier, version = parts[2] or DEFAULT_EXTENSION, parts[3], parts[4]
        return cls(
            group_id=group_id,
            artifact_id=artifact_id,
            extension=extension,
            classifier=classifier,
            version=version,
        )

    @property
    def key(self) -> tuple[str, str]:
        return self.group_id, self.artifact_id

    def with_version(self, version: str) -> "Coordinate":
        """Return a coordinate that supersedes this one with `version` set."""
        return self.model_copy(update={"version": version})

    def descriptor(self) -> "Coordinate":
        """Return the coordinate of this artifact's `pom` descriptor."""
        return self.model_copy(update={"extension": "pom"})

    def compact(self) -> str:
        """Return a compact string representation.

        Returns:
            A string like `groupId:artifactId:version`.
        """
        return f"{self.group_id}:{self.artifact_id}:{self.version}"

    def __str__(self) -> str:
        parts = [self.group_id, self.artifact_id, self.extension]
        if self.classifier:
            parts.append(self.classifier)
        parts.append(self.version)
        return ":".join(parts)


ArtifactFilter = Callable[[Coordinate], bool]


def accept_all(coordinate: Coordinate) -> bool:
    """Artifact filter that accepts every artifact."""
    return True


class Dependency(BaseModel):
    """A Maven dependency entry."""

    model_config = ConfigDict(frozen=True)

    coordinate: Coordinate
    scope: str | None = None
    optional: bool | None = None

    def label(self) -> str:
        """Return a user-facing label for the dependency.

        Returns:
            A formatted string including coordinates and scope when present.
        """
        parts: list[str] = [self.coordinate.compact()]
        if self.scope:
            parts.append(f"(scope={self.scope})")
        if self.optional is True:
            parts.append("(optional)")
        return " ".join(parts)

    def in_scopes(self, scopes: Iterable[str]) -> bool:
        """Whether this dependency applies to `scopes`.

        A dependency without `<scope>` counts as `compile`. An empty scope list
        accepts every dependency.
        """
        wanted = {s.strip().lower() for s in scopes if (s or "").strip()}
        return not wanted or (self.scope or DEFAULT_SCOPE).lower() in wanted


class BuildInfo(BaseModel):
    """Build output metadata of a project (`<build>` section)."""

    model_config = ConfigDict(frozen=True)

    directory: Path
    final_name: str = Field(..., min_length=1)


class Project(BaseModel):
    """A Maven project resolved to (or resolvable to) a build artifact.

    Projects are immutable: each resolution step returns a new value through
    `model_copy(update=...)` instead of mutating the built one.
    """

    model_config = ConfigDict(frozen=True)

    group_id: str = Field(..., min_length=1)
    artifact_id: str = Field(..., min_length=1)
    version: str = UNKNOWN_VERSION
    packaging: str = DEFAULT_EXTENSION
    basedir: Path | None = None
    pom_file: Path | None = None
    build: BuildInfo | None = None
    parent_coordinate: Coordinate | None = None
    parent_relative_path: str | None = None
    parent: Project | None = None
    artifact_file: Path | None = None
    dependencies: list[Dependency] = Field(default_factory=list)
    artifact_filter: ArtifactFilter | None = Field(default=None, exclude=True, repr=False)

    @property
    def key(self) -> tuple[str, str]:
        return self.group_id, self.artifact_id

    def compact(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"

    def final_artifact_path(self) -> Path | None:
        """Return `<build directory>/<final name>.<packaging>`, or None without build metadata."""
        if self.build is None:
            return None
        return self.build.directory / f"{self.build.final_name}.{self.packaging}"


class ModuleDeclaration(BaseModel):
    """A module as requested by the caller: coordinates plus applicable scopes."""

    name: str = ""
    coordinates: list[Coordinate] = Field(default_factory=list)
    scopes: list[str] = Field(default_factory=list)

    def label(self) -> str:
        if self.name:
            return self.name
        return ", ".join(c.compact() for c in self.coordinates) or "<empty module>"


class Module(BaseModel):
    """A module declaration together with one resolved project per coordinate."""

    declaration: ModuleDeclaration
    projects: list[Project] = Field(default_factory=list)

    @model_validator(mode="after")
    def _one_project_per_coordinate(self) -> "Module":
        if len(self.projects) != len(self.declaration.coordinates):
            raise ValueError(
                f"Module {self.declaration.label()} has {len(self.declaration.coordinates)} "
                f"coordinate(s) but {len(self.projects)} resolved project(s)"
            )
        return self

    @property
    def coordinates(self) -> list[Coordinate]:
        return self.declaration.coordinates

    @property
    def scopes(self) -> list[str]:
        return self.declaration.scopes

    def dependencies_in_scope(self, project: Project | None = None) -> list[Dependency]:
        """Return the direct dependencies whose scope was requested.

        Covers `project` only when given, otherwise every resolved project.
        """
        projects = [project] if project is not None else self.projects
        return [dep for p in projects for dep in p.dependencies if dep.in_scopes(self.scopes)]
