"""Pytest configuration and fixtures for j-module-resolver tests."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

import pytest

from j_module_resolver.builder import PomProjectBuilder
from j_module_resolver.exceptions import FetchError
from j_module_resolver.layout import LocalRepository
from j_module_resolver.models import Coordinate


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Undo the CLI's logging.basicConfig(force=True) between tests."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level

    yield

    root.handlers[:] = handlers
    root.setLevel(level)


def pom_xml(
    artifact_id: str,
    *,
    group_id: str | None = "com.acme",
    version: str | None = "1.0",
    packaging: str | None = None,
    parent: tuple[str, str, str] | None = None,
    relative_path: str | None = None,
    build: str = "",
    dependencies: str = "",
) -> str:
    lines = ['<?xml version="1.0" encoding="UTF-8"?>', '<project xmlns="http://maven.apache.org/POM/4.0.0">']
    lines.append("  <modelVersion>4.0.0</modelVersion>")
    if parent is not None:
        lines.append("  <parent>")
        lines.append(f"    <groupId>{parent[0]}</groupId>")
        lines.append(f"    <artifactId>{parent[1]}</artifactId>")
        lines.append(f"    <version>{parent[2]}</version>")
        if relative_path is not None:
            lines.append(f"    <relativePath>{relative_path}</relativePath>")
        lines.append("  </parent>")
    if group_id is not None:
        lines.append(f"  <groupId>{group_id}</groupId>")
    lines.append(f"  <artifactId>{artifact_id}</artifactId>")
    if version is not None:
        lines.append(f"  <version>{version}</version>")
    if packaging is not None:
        lines.append(f"  <packaging>{packaging}</packaging>")
    if build:
        lines.append(f"  <build>{build}</build>")
    if dependencies:
        lines.append(f"  <dependencies>{dependencies}</dependencies>")
    lines.append("</project>")
    return "\n".join(lines) + "\n"


@pytest.fixture
def pom_text() -> Callable[..., str]:
    return pom_xml


@pytest.fixture
def write_pom() -> Callable[..., Path]:
    """Write a pom.xml (or a repository .pom when `path` ends with .pom)."""

    def _write(path: Path, artifact_id: str, **kwargs) -> Path:
        if path.suffix not in {".xml", ".pom"}:
            path = path / "pom.xml"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(pom_xml(artifact_id, **kwargs), encoding="utf-8")
        return path

    return _write


class FakeFetcher:
    """Artifact fetcher serving bytes from an in-memory "remote"."""

    def __init__(self, repository: LocalRepository, remote: dict[str, bytes] | None = None):
        self.repository = repository
        self.remote = remote or {}
        self.calls: list[Coordinate] = []

    def fetch(self, coordinate: Coordinate) -> None:
        self.calls.append(coordinate)
        target = self.repository.path_for(coordinate)
        if target.exists():
            return
        payload = self.remote.get(str(coordinate))
        if payload is None:
            raise FetchError(coordinate, f"Could not find artifact {coordinate}")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(payload)


@pytest.fixture
def repository(tmp_path: Path) -> LocalRepository:
    return LocalRepository(tmp_path / "repository")


@pytest.fixture
def fetcher(repository: LocalRepository) -> FakeFetcher:
    return FakeFetcher(repository)


@pytest.fixture
def builder(repository: LocalRepository, fetcher: FakeFetcher) -> PomProjectBuilder:
    return PomProjectBuilder(repository, fetcher)
