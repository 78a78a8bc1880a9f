"""Resolver configuration module.

Configuration is read from environment variables; CLI options override it.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from j_module_resolver.fetcher import MAVEN_CENTRAL


_TRUE_VALUES = {"1", "true", "yes", "on"}


def default_local_repository() -> Path:
    return Path.home() / ".m2" / "repository"


@dataclass
class ResolverConfig:
    """Resolver configuration container.

    Attributes:
        local_repository: Root of the local artifact cache
        remote_repositories: Remote repository base URLs, tried in order
        timeout: HTTP timeout in seconds for remote fetches
        offline: Disable remote fetches entirely
    """

    local_repository: Path = field(default_factory=default_local_repository)
    remote_repositories: list[str] = field(default_factory=lambda: [MAVEN_CENTRAL])
    timeout: float = 30.0
    offline: bool = False

    @classmethod
    def from_env(cls) -> "ResolverConfig":
        """Create configuration from environment variables.

        Environment variables:
            JMOD_LOCAL_REPOSITORY: Local repository path (default: "~/.m2/repository")
            JMOD_REMOTE_REPOSITORIES: Comma-separated remote URLs (default: Maven Central)
            JMOD_TIMEOUT: HTTP timeout in seconds (default: 30)
            JMOD_OFFLINE: "true" to disable remote fetches (default: "false")
        """
        local_repo = os.getenv("JMOD_LOCAL_REPOSITORY")
        remotes = os.getenv("JMOD_REMOTE_REPOSITORIES")

        return cls(
            local_repository=(
                Path(local_repo).expanduser().resolve() if local_repo else default_local_repository()
            ),
            remote_repositories=(
                [u.strip() for u in remotes.split(",") if u.strip()] if remotes is not None else [MAVEN_CENTRAL]
            ),
            timeout=float(os.getenv("JMOD_TIMEOUT", "30")),
            offline=os.getenv("JMOD_OFFLINE", "false").strip().lower() in _TRUE_VALUES,
        )

    def validate(self) -> None:
        """Validate the configuration.

        Raises:
            ValueError: If a value is out of range or malformed.
        """
        if self.timeout <= 0:
            raise ValueError("JMOD_TIMEOUT must be a positive number of seconds")
        for url in self.remote_repositories:
            if not url.startswith(("http://", "https://")):
                raise ValueError(f"Unsupported remote repository URL: {url}")
