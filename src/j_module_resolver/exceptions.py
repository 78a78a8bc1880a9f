"""Custom exceptions for J-Module Resolver."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from j_module_resolver.models import Coordinate


class JModError(Exception):
    """Base exception for J-Module Resolver."""


class DescriptorBuildError(JModError):
    """Raised when a project descriptor cannot be turned into a project."""


class PomNotFoundError(DescriptorBuildError):
    """Raised when a pom.xml file cannot be found."""


class PomParseError(DescriptorBuildError):
    """Raised when a pom.xml file cannot be parsed."""


class PomModelError(DescriptorBuildError):
    """Raised when required Maven model fields are missing or invalid."""


class FetchError(JModError):
    """Raised when an artifact cannot be placed into the local repository."""

    def __init__(self, coordinate: Coordinate, message: str) -> None:
        super().__init__(message)
        self.coordinate = coordinate


class ResolutionError(JModError):
    """Raised when no source could supply a project for a coordinate."""

    def __init__(self, coordinate: Coordinate, message: str | None = None) -> None:
        super().__init__(
            message
            or f"No dependency for {coordinate} found in local or remote repository."
        )
        self.coordinate = coordinate
