"""Resolve module declarations against the reactor, workspace and repository."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Callable

from j_module_resolver.builder import DescriptorBuilder
from j_module_resolver.context import BuildContext
from j_module_resolver.exceptions import ResolutionError
from j_module_resolver.fetcher import ArtifactFetcher
from j_module_resolver.layout import LocalRepository
from j_module_resolver.models import Coordinate, Module, ModuleDeclaration, Project, accept_all
from j_module_resolver.reactor import ReactorIndex
from j_module_resolver.repository import RepositoryLocator
from j_module_resolver.workspace import LocalWorkspaceLocator

logger = logging.getLogger(__name__)

# A tier returns a project, or None to let the next tier try.
Locator = Callable[[Coordinate], Project | None]


class ModuleResolver:
    """Resolve every coordinate of a module through an ordered list of locators.

    The first locator returning a project wins. The default order is reactor,
    local workspace, repository (see `for_context`).
    """

    def __init__(self, locators: Sequence[Locator]):
        if not locators:
            raise ValueError("At least one locator is required")
        self.locators: tuple[Locator, ...] = tuple(locators)

    @classmethod
    def for_context(
        cls,
        context: BuildContext,
        builder: DescriptorBuilder,
        fetcher: ArtifactFetcher,
        reactor: ReactorIndex | None = None,
    ) -> "ModuleResolver":
        """Wire the three standard tiers for the project in `context`."""
        if reactor is None:
            reactor = ReactorIndex()
        repository = LocalRepository(context.local_repository)
        return cls(
            [
                reactor.find,
                LocalWorkspaceLocator(context.project.parent, builder).locate,
                RepositoryLocator(repository, builder, fetcher, context.project).locate,
            ]
        )

    def resolve(self, declaration: ModuleDeclaration) -> Module:
        """Resolve all coordinates of `declaration`.

        Raises:
            ResolutionError: If no locator supplied a project for a coordinate.
            FetchError: If an artifact download failed.
        """
        logger.debug(f"Resolving module {declaration.label()}")
        projects = [self.resolve_coordinate(c) for c in declaration.coordinates]
        return Module(declaration=declaration, projects=[self.normalize(p) for p in projects])

    def resolve_coordinates(
        self,
        coordinates: Iterable[Coordinate],
        scopes: Iterable[str] = (),
        *,
        name: str = "",
    ) -> Module:
        return self.resolve(
            ModuleDeclaration(name=name, coordinates=list(coordinates), scopes=list(scopes))
        )

    def resolve_coordinate(self, coordinate: Coordinate) -> Project:
        for locate in self.locators:
            project = locate(coordinate)
            if project is not None:
                return project
        raise ResolutionError(coordinate)

    @staticmethod
    def normalize(project: Project) -> Project:
        """Return a deep copy that accepts every artifact during later filtering."""
        return project.model_copy(update={"artifact_filter": accept_all}, deep=True)
