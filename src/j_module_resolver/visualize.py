"""Rich rendering utilities for resolved modules."""

from __future__ import annotations

from rich.table import Table
from rich.tree import Tree

from j_module_resolver.models import Module


def build_module_table(module: Module) -> Table:
    """Build a Rich Table with one row per resolved project.

    Args:
        module: Resolved module.

    Returns:
        A Rich Table object for rendering.
    """
    table = Table(title=f"Module {module.declaration.label()}")
    table.add_column("#", style="dim", width=4)
    table.add_column("Requested")
    table.add_column("Resolved")
    table.add_column("Packaging")
    table.add_column("Artifact file")

    for i, (coordinate, project) in enumerate(zip(module.coordinates, module.projects), start=1):
        artifact = project.artifact_file
        if artifact is None:
            artifact_cell = "[dim]-[/dim]"
        elif artifact.exists():
            artifact_cell = str(artifact)
        else:
            artifact_cell = f"[yellow]{artifact} (missing)[/yellow]"
        table.add_row(str(i), str(coordinate), project.compact(), project.packaging, artifact_cell)
    return table


def build_dependency_tree(module: Module) -> Tree:
    """Build a Rich Tree with the in-scope direct dependencies of each project."""
    scopes = ", ".join(module.scopes) or "all scopes"
    root = Tree(f"[bold]{module.declaration.label()}[/bold] [dim]({scopes})[/dim]")
    for project in module.projects:
        branch = root.add(project.compact())
        deps = module.dependencies_in_scope(project)
        if not deps:
            branch.add("[dim]No direct dependencies in scope[/dim]")
            continue
        for dep in deps:
            branch.add(dep.label())
    return root
