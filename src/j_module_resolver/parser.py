"""Parse Maven pom.xml files into projects using lxml."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Mapping

from lxml import etree

from j_module_resolver.exceptions import PomModelError, PomNotFoundError, PomParseError
from j_module_resolver.models import (
    DEFAULT_EXTENSION,
    UNKNOWN_VERSION,
    BuildInfo,
    Coordinate,
    Dependency,
    Project,
)


_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")

_PROJECT = "/*[local-name()='project']"
_PARENT = f"{_PROJECT}/*[local-name()='parent']"
_BUILD = f"{_PROJECT}/*[local-name()='build']"

DEFAULT_RELATIVE_PATH = "../pom.xml"
DEFAULT_BUILD_DIRECTORY = "${project.basedir}/target"
DEFAULT_FINAL_NAME = "${project.artifactId}-${project.version}"


def _text_first(node: etree._Element, xpath_expr: str) -> str | None:
    """Get text of the first matching element using namespace-agnostic XPath.

    Args:
        node: Root element to query under.
        xpath_expr: XPath expression (should use local-name()).

    Returns:
        Text content if found and non-empty, otherwise None.
    """
    found = node.xpath(xpath_expr)
    if not found:
        return None
    first = found[0]
    if isinstance(first, etree._Element):
        text = (first.text or "").strip()
        return text or None
    if isinstance(first, str):
        text = first.strip()
        return text or None
    return None


def _bool_text(value: str | None) -> bool | None:
    """Convert Maven boolean-ish text to bool.

    Args:
        value: String like 'true'/'false' or None.

    Returns:
        True/False for recognized values, otherwise None.
    """
    if value is None:
        return None
    v = value.strip().lower()
    if v == "true":
        return True
    if v == "false":
        return False
    return None


def _parse_xml(path: Path) -> etree._Element:
    """Parse an XML file and return its root element.

    Args:
        path: Path to the pom.xml file.

    Raises:
        PomNotFoundError: If the file does not exist.
        PomParseError: If XML cannot be parsed.

    Returns:
        Root XML element.
    """
    if not path.is_file():
        raise PomNotFoundError(f"pom.xml not found: {path}")
    try:
        parser = etree.XMLParser(resolve_entities=False, no_network=True, recover=False)
        tree = etree.parse(str(path), parser=parser)
        return tree.getroot()
    except (OSError, etree.XMLSyntaxError) as exc:
        raise PomParseError(f"Failed to parse pom.xml: {path}") from exc


def _resolve_placeholders(value: str, props: Mapping[str, str]) -> str:
    """Resolve ${...} placeholders using provided properties.

    Unknown placeholders are preserved as-is.
    """
    current = value
    for _ in range(5):
        changed = False

        def _sub(m: re.Match[str]) -> str:
            nonlocal changed
            key = m.group(1)
            replacement = props.get(key)
            if replacement:
                changed = True
                return replacement
            return m.group(0)

        nxt = _PLACEHOLDER_RE.sub(_sub, current)
        current = nxt
        if not changed:
            break
    return current


def _normalize_version(value: str | None, props: Mapping[str, str]) -> str:
    """Resolve and normalize a Maven version string.

    Rules:
      - Missing version => "Unknown"
      - If placeholders remain after resolution (e.g. "${x.y}"), treat as unresolved => "Unknown"
    """
    if value is None:
        return UNKNOWN_VERSION

    resolved = _resolve_placeholders(value, props).strip()
    if not resolved:
        return UNKNOWN_VERSION

    if _PLACEHOLDER_RE.search(resolved):
        return UNKNOWN_VERSION

    return resolved


def _parse_properties(root: etree._Element) -> dict[str, str]:
    props: dict[str, str] = {}
    nodes = root.xpath(f"{_PROJECT}/*[local-name()='properties']/*")
    for n in nodes:
        if not isinstance(n, etree._Element):
            continue
        key = etree.QName(n).localname
        val = (n.text or "").strip()
        if key and val:
            props[key] = val
    return props


def _parse_parent(root: etree._Element) -> tuple[Coordinate | None, str | None]:
    """Return the declared parent coordinate and its relative path.

    An empty `<relativePath/>` disables the filesystem lookup (returned as "").
    """
    group_id = _text_first(root, f"{_PARENT}/*[local-name()='groupId']")
    artifact_id = _text_first(root, f"{_PARENT}/*[local-name()='artifactId']")
    if group_id is None or artifact_id is None:
        return None, None

    version = _text_first(root, f"{_PARENT}/*[local-name()='version']") or ""
    coordinate = Coordinate(group_id=group_id, artifact_id=artifact_id, extension="pom", version=version)

    rel_nodes = root.xpath(f"{_PARENT}/*[local-name()='relativePath']")
    if not rel_nodes:
        return coordinate, DEFAULT_RELATIVE_PATH
    return coordinate, (rel_nodes[0].text or "").strip()


def _parse_build(root: etree._Element, basedir: Path, props: Mapping[str, str]) -> BuildInfo | None:
    raw_directory = _text_first(root, f"{_BUILD}/*[local-name()='directory']") or DEFAULT_BUILD_DIRECTORY
    raw_final_name = _text_first(root, f"{_BUILD}/*[local-name()='finalName']") or DEFAULT_FINAL_NAME

    directory = _resolve_placeholders(raw_directory, props).strip()
    final_name = _resolve_placeholders(raw_final_name, props).strip()
    if _PLACEHOLDER_RE.search(directory) or _PLACEHOLDER_RE.search(final_name) or not final_name:
        return None

    directory_path = Path(directory)
    if not directory_path.is_absolute():
        directory_path = basedir / directory_path
    return BuildInfo(directory=directory_path, final_name=final_name)


def _parse_dependencies(root: etree._Element, props: Mapping[str, str]) -> list[Dependency]:
    deps: list[Dependency] = []
    dep_nodes = root.xpath(
        f"{_PROJECT}"
        "/*[local-name()='dependencies']"
        "/*[local-name()='dependency']"
    )

    for dep in dep_nodes:
        dep_group_id = _text_first(dep, "./*[local-name()='groupId']")
        dep_artifact_id = _text_first(dep, "./*[local-name()='artifactId']")
        dep_version = _text_first(dep, "./*[local-name()='version']")
        dep_type = _text_first(dep, "./*[local-name()='type']")
        dep_classifier = _text_first(dep, "./*[local-name()='classifier']")
        dep_scope = _text_first(dep, "./*[local-name()='scope']")
        dep_optional = _bool_text(_text_first(dep, "./*[local-name()='optional']"))

        if dep_group_id is None or dep_artifact_id is None:
            continue

        deps.append(
            Dependency(
                coordinate=Coordinate(
                    group_id=_resolve_placeholders(dep_group_id, props),
                    artifact_id=dep_artifact_id,
                    extension=dep_type or DEFAULT_EXTENSION,
                    classifier=dep_classifier or "",
                    version=_normalize_version(dep_version, props),
                ),
                scope=dep_scope,
                optional=dep_optional,
            )
        )
    return deps


def parse_pom(path: str | Path, *, resolve_dependencies: bool = True) -> Project:
    """Parse a Maven pom.xml into a `Project`.

    Notes:
        - Namespace handling: uses `local-name()` XPath so it works with or without XML namespaces.
        - Property placeholders like `${...}` are resolved when possible.
          If a version cannot be resolved, it is stored as "Unknown".
        - groupId and version fall back to the `<parent>` values.
        - The build directory defaults to `<basedir>/target` and the final
          name to `<artifactId>-<version>`.

    Args:
        path: Path to a pom.xml.
        resolve_dependencies: Also read the direct `<dependencies>` entries.

    Raises:
        PomNotFoundError: If the file does not exist.
        PomParseError: If the XML is malformed.
        PomModelError: If required fields are missing.

    Returns:
        A `Project` without an artifact file bound.
    """
    pom_path = Path(os.path.normpath(Path(path).absolute()))
    root = _parse_xml(pom_path)
    if etree.QName(root).localname != "project":
        raise PomModelError(f"Root element is not <project> in {pom_path}")

    basedir = pom_path.parent

    raw_group_id = _text_first(root, f"{_PROJECT}/*[local-name()='groupId']")
    raw_artifact_id = _text_first(root, f"{_PROJECT}/*[local-name()='artifactId']")
    raw_version = _text_first(root, f"{_PROJECT}/*[local-name()='version']")
    raw_packaging = _text_first(root, f"{_PROJECT}/*[local-name()='packaging']")

    parent_coordinate, parent_relative_path = _parse_parent(root)

    if raw_artifact_id is None:
        raise PomModelError(f"Missing required <artifactId> in {pom_path}")

    if parent_coordinate is not None:
        raw_group_id = raw_group_id or parent_coordinate.group_id
        raw_version = raw_version or parent_coordinate.version or None

    if raw_group_id is None:
        raise PomModelError(f"Missing required <groupId> (or parent <groupId>) in {pom_path}")

    props = _parse_properties(root)
    effective_version = raw_version or UNKNOWN_VERSION
    builtins: dict[str, str] = {
        "project.groupId": raw_group_id,
        "project.artifactId": raw_artifact_id,
        "project.version": effective_version,
        "project.basedir": str(basedir),
        "pom.groupId": raw_group_id,
        "pom.artifactId": raw_artifact_id,
        "pom.version": effective_version,
        "groupId": raw_group_id,
        "artifactId": raw_artifact_id,
        "version": effective_version,
        "basedir": str(basedir),
    }
    if parent_coordinate is not None:
        builtins["project.parent.groupId"] = parent_coordinate.group_id
        builtins["project.parent.version"] = parent_coordinate.version
    merged_props = {**props, **builtins}

    group_id = _resolve_placeholders(raw_group_id, merged_props)
    version = _normalize_version(effective_version, merged_props)
    packaging = _resolve_placeholders(raw_packaging or DEFAULT_EXTENSION, merged_props)
    merged_props["project.version"] = version
    merged_props["project.packaging"] = packaging

    return Project(
        group_id=group_id,
        artifact_id=raw_artifact_id,
        version=version,
        packaging=packaging,
        basedir=basedir,
        pom_file=pom_path,
        build=_parse_build(root, basedir, merged_props),
        parent_coordinate=parent_coordinate,
        parent_relative_path=parent_relative_path,
        dependencies=_parse_dependencies(root, merged_props) if resolve_dependencies else [],
    )
