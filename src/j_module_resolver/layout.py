"""Maven 2 repository layout for the local artifact cache."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from j_module_resolver.models import Coordinate


def artifact_file_name(coordinate: Coordinate) -> str:
    """Return `artifactId-version[-classifier].extension`."""
    name = f"{coordinate.artifact_id}-{coordinate.version}"
    if coordinate.classifier:
        name = f"{name}-{coordinate.classifier}"
    return f"{name}.{coordinate.extension}"


def relative_path(coordinate: Coordinate) -> PurePosixPath:
    """Map a coordinate to its repository-relative path.

    `org.acme:demo:jar:1.0` becomes `org/acme/demo/1.0/demo-1.0.jar`. The same
    path is used below the local cache root and below a remote repository URL.
    """
    return PurePosixPath(
        *coordinate.group_id.split("."),
        coordinate.artifact_id,
        coordinate.version,
        artifact_file_name(coordinate),
    )


@dataclass(frozen=True)
class LocalRepository:
    """The local artifact cache rooted at `base_dir` (usually `~/.m2/repository`)."""

    base_dir: Path

    def relative_path(self, coordinate: Coordinate) -> PurePosixPath:
        return relative_path(coordinate)

    def path_for(self, coordinate: Coordinate) -> Path:
        """Return the absolute cache path for `coordinate`. Performs no I/O."""
        return self.base_dir.joinpath(*relative_path(coordinate).parts)
