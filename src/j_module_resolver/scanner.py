from __future__ import annotations

from pathlib import Path

# Build output and VCS folders never contain reactor modules.
_SKIPPED_DIRS = {"target", "node_modules", ".git", ".svn", ".idea"}


def find_pom_files(root: Path) -> list[Path]:
    """Find module descriptors (pom.xml) under root.

    Args:
        root: A directory to scan recursively, or a single pom file.

    Returns:
        Sorted unique list of POM files. Empty when root does not exist.
    """
    if root.is_file():
        return [root]
    if not root.is_dir():
        return []

    poms: list[Path] = []
    for p in root.rglob("pom.xml"):
        if not p.is_file():
            continue
        if any(part in _SKIPPED_DIRS for part in p.relative_to(root).parts[:-1]):
            continue
        poms.append(p)
    return sorted(set(poms))
