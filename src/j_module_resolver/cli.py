"""Typer CLI entry point for J-Module Resolver."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from j_module_resolver.builder import PomProjectBuilder
from j_module_resolver.config import ResolverConfig
from j_module_resolver.context import BuildContext, load_reactor
from j_module_resolver.exceptions import JModError
from j_module_resolver.fetcher import HttpArtifactFetcher
from j_module_resolver.layout import LocalRepository
from j_module_resolver.models import Coordinate
from j_module_resolver.reactor import ReactorIndex
from j_module_resolver.resolver import ModuleResolver
from j_module_resolver.visualize import build_dependency_tree, build_module_table

app = typer.Typer(
    add_completion=False,
    help="Resolve Maven modules from the reactor, sibling projects or a repository.",
)
console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _load_config(local_repo: Path | None, remote: list[str] | None, offline: bool) -> ResolverConfig:
    config = ResolverConfig.from_env()
    if local_repo is not None:
        config.local_repository = local_repo.expanduser().resolve()
    if remote:
        config.remote_repositories = list(remote)
    if offline:
        config.offline = True
    config.validate()
    return config


@app.command()
def resolve(
    coordinates: Annotated[
        List[str],
        typer.Argument(help="groupId:artifactId[:extension[:classifier]][:version], version optional."),
    ],
    project: Annotated[
        Path, typer.Option("--project", help="pom.xml of the project the modules are resolved for.")
    ] = Path("pom.xml"),
    reactor: Annotated[
        Optional[List[Path]],
        typer.Option("--reactor", help="POM file or folder of modules built together (repeatable)."),
    ] = None,
    scope: Annotated[
        Optional[List[str]], typer.Option("--scope", help="Dependency scope to report (repeatable).")
    ] = None,
    local_repo: Annotated[
        Optional[Path], typer.Option("--local-repo", help="Local repository folder.")
    ] = None,
    remote: Annotated[
        Optional[List[str]], typer.Option("--remote", help="Remote repository URL (repeatable).")
    ] = None,
    offline: Annotated[bool, typer.Option("--offline", help="Never download from remotes.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log every resolution step.")] = False,
) -> None:
    """Resolve COORDINATES to artifact files and print the result."""
    _configure_logging(verbose)
    try:
        config = _load_config(local_repo, remote, offline)
        requested = [Coordinate.parse(c) for c in coordinates]
        repository = LocalRepository(config.local_repository)

        with HttpArtifactFetcher(
            repository,
            config.remote_repositories,
            timeout=config.timeout,
            offline=config.offline,
        ) as fetcher:
            builder = PomProjectBuilder(repository, fetcher)
            context = BuildContext.from_pom(project, builder, config.local_repository)
            reactor_index = ReactorIndex(load_reactor(reactor or [], builder))
            resolver = ModuleResolver.for_context(context, builder, fetcher, reactor_index)
            module = resolver.resolve_coordinates(requested, scope or [], name=context.project.compact())

        console.print(build_module_table(module))
        if any(p.dependencies for p in module.projects):
            console.print(build_dependency_tree(module))
    except (JModError, ValueError) as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1) from None


@app.command()
def path(
    coordinate: Annotated[str, typer.Argument(help="groupId:artifactId[:extension[:classifier]]:version")],
    local_repo: Annotated[
        Optional[Path], typer.Option("--local-repo", help="Local repository folder.")
    ] = None,
) -> None:
    """Print where COORDINATE lives in the local repository."""
    try:
        config = _load_config(local_repo, None, False)
        target = LocalRepository(config.local_repository).path_for(Coordinate.parse(coordinate))
    except ValueError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1) from None
    console.print(str(target), soft_wrap=True, markup=False, highlight=False)


def main() -> None:
    """Console-script entry point."""
    app()
