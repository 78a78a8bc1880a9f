from __future__ import annotations

from pathlib import Path

import pytest

from j_module_resolver.exceptions import PomModelError, PomNotFoundError, PomParseError
from j_module_resolver.models import Project
from j_module_resolver.parser import parse_pom


def _write(tmp_path: Path, name: str, content: str) -> Path:
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return path


def test_parse_pom_without_namespace(tmp_path: Path) -> None:
    pom = """<?xml version=\"1.0\" encoding=\"UTF-8\"?>
<project>
  <modelVersion>4.0.0</modelVersion>
  <groupId>com.acme</groupId>
  <artifactId>demo</artifactId>
  <version>1.0.0</version>

  <dependencies>
    <dependency>
      <groupId>org.slf4j</groupId>
      <artifactId>slf4j-api</artifactId>
      <version>2.0.12</version>
      <scope>compile</scope>
    </dependency>
  </dependencies>
</project>
"""
    path = _write(tmp_path, "pom.xml", pom)
    model = parse_pom(path)

    assert isinstance(model, Project)
    assert model.group_id == "com.acme"
    assert model.artifact_id == "demo"
    assert model.version == "1.0.0"
    assert model.packaging == "jar"
    assert model.basedir == tmp_path.absolute()
    assert model.artifact_file is None
    assert len(model.dependencies) == 1
    assert model.dependencies[0].coordinate.compact() == "org.slf4j:slf4j-api:2.0.12"
    assert model.dependencies[0].scope == "compile"


def test_parse_pom_with_namespace(tmp_path: Path) -> None:
    pom = """<?xml version=\"1.0\" encoding=\"UTF-8\"?>
<project xmlns=\"http://maven.apache.org/POM/4.0.0\">
  <modelVersion>4.0.0</modelVersion>
  <groupId>com.acme</groupId>
  <artifactId>demo</artifactId>
  <version>1.0.0</version>
  <packaging>war</packaging>

  <dependencies>
    <dependency>
      <groupId>junit</groupId>
      <artifactId>junit</artifactId>
      <version>4.13.2</version>
      <scope>test</scope>
      <optional>false</optional>
    </dependency>
  </dependencies>
</project>
"""
    path = _write(tmp_path, "pom.xml", pom)
    model = parse_pom(path)

    assert model.compact() == "com.acme:demo:1.0.0"
    assert model.packaging == "war"
    dep = model.dependencies[0]
    assert dep.coordinate.compact() == "junit:junit:4.13.2"
    assert dep.scope == "test"
    assert dep.optional is False


def test_default_build_output(tmp_path: Path) -> None:
    pom = """<project>
  <groupId>com.acme</groupId>
  <artifactId>demo</artifactId>
  <version>1.0.0</version>
</project>
"""
    model = parse_pom(_write(tmp_path, "pom.xml", pom))

    assert model.build is not None
    assert model.build.directory == tmp_path.absolute() / "target"
    assert model.build.final_name == "demo-1.0.0"
    assert model.final_artifact_path() == tmp_path.absolute() / "target" / "demo-1.0.0.jar"


def test_custom_build_output_resolves_properties(tmp_path: Path) -> None:
    pom = """<project>
  <groupId>com.acme</groupId>
  <artifactId>demo</artifactId>
  <version>1.0.0</version>
  <packaging>zip</packaging>
  <properties>
    <module.name>fsm-demo</module.name>
  </properties>
  <build>
    <directory>${project.basedir}/out</directory>
    <finalName>${module.name}-${project.version}</finalName>
  </build>
</project>
"""
    model = parse_pom(_write(tmp_path, "pom.xml", pom))

    assert model.final_artifact_path() == tmp_path.absolute() / "out" / "fsm-demo-1.0.0.zip"


def test_relative_build_directory_is_below_basedir(tmp_path: Path) -> None:
    pom = """<project>
  <groupId>com.acme</groupId>
  <artifactId>demo</artifactId>
  <version>1.0.0</version>
  <build><directory>build</directory></build>
</project>
"""
    model = parse_pom(_write(tmp_path, "pom.xml", pom))
    assert model.build is not None
    assert model.build.directory == tmp_path.absolute() / "build"


def test_unresolvable_final_name_drops_build_info(tmp_path: Path) -> None:
    pom = """<project>
  <groupId>com.acme</groupId>
  <artifactId>demo</artifactId>
  <version>1.0.0</version>
  <build><finalName>${missing.property}</finalName></build>
</project>
"""
    model = parse_pom(_write(tmp_path, "pom.xml", pom))
    assert model.build is None
    assert model.final_artifact_path() is None


def test_preserve_property_placeholders(tmp_path: Path) -> None:
    pom = """<?xml version=\"1.0\" encoding=\"UTF-8\"?>
<project>
  <modelVersion>4.0.0</modelVersion>
  <groupId>com.acme</groupId>
  <artifactId>demo</artifactId>

  <dependencies>
    <dependency>
      <groupId>org.example</groupId>
      <artifactId>lib</artifactId>
      <version>${lib.version}</version>
    </dependency>
  </dependencies>
</project>
"""
    path = _write(tmp_path, "pom.xml", pom)
    model = parse_pom(path)

    assert model.version == "Unknown"
    assert len(model.dependencies) == 1
    assert model.dependencies[0].coordinate.version == "Unknown"


def test_inherit_version_from_parent(tmp_path: Path) -> None:
    pom = """<?xml version=\"1.0\" encoding=\"UTF-8\"?>
<project xmlns=\"http://maven.apache.org/POM/4.0.0\">
  <modelVersion>4.0.0</modelVersion>

  <parent>
    <groupId>com.acme</groupId>
    <artifactId>parent</artifactId>
    <version>9.9.9</version>
  </parent>

  <artifactId>child</artifactId>
</project>
"""
    path = _write(tmp_path, "pom.xml", pom)
    model = parse_pom(path)
    assert model.compact() == "com.acme:child:9.9.9"
    assert model.final_artifact_path() == tmp_path.absolute() / "target" / "child-9.9.9.jar"


def test_parse_parent_coordinate(tmp_path: Path) -> None:
    pom = """<?xml version=\"1.0\" encoding=\"UTF-8\"?>
<project xmlns=\"http://maven.apache.org/POM/4.0.0\">
  <modelVersion>4.0.0</modelVersion>

  <parent>
    <groupId>com.acme</groupId>
    <artifactId>parent</artifactId>
    <version>9.9.9</version>
    <relativePath>../build/pom.xml</relativePath>
  </parent>

  <groupId>com.acme.child</groupId>
  <artifactId>child</artifactId>
  <version>1.0.0</version>
</project>
"""
    model = parse_pom(_write(tmp_path, "pom.xml", pom))

    assert model.parent_coordinate is not None
    assert model.parent_coordinate.compact() == "com.acme:parent:9.9.9"
    assert model.parent_coordinate.extension == "pom"
    assert model.parent_relative_path == "../build/pom.xml"
    assert model.parent is None


def test_parent_relative_path_defaults_and_empty(tmp_path: Path) -> None:
    default_pom = """<project>
  <parent><groupId>com.acme</groupId><artifactId>parent</artifactId><version>1</version></parent>
  <artifactId>a</artifactId>
</project>
"""
    empty_pom = """<project>
  <parent>
    <groupId>com.acme</groupId><artifactId>parent</artifactId><version>1</version>
    <relativePath/>
  </parent>
  <artifactId>b</artifactId>
</project>
"""
    (tmp_path / "a").mkdir()
    (tmp_path / "b").mkdir()
    assert parse_pom(_write(tmp_path, "a/pom.xml", default_pom)).parent_relative_path == "../pom.xml"
    assert parse_pom(_write(tmp_path, "b/pom.xml", empty_pom)).parent_relative_path == ""


def test_resolve_properties_for_dependency_version(tmp_path: Path) -> None:
    pom = """<?xml version=\"1.0\" encoding=\"UTF-8\"?>
<project>
  <modelVersion>4.0.0</modelVersion>
  <groupId>com.acme</groupId>
  <artifactId>demo</artifactId>
  <version>1.0.0</version>

  <properties>
    <lib.version>2.3.4</lib.version>
  </properties>

  <dependencies>
    <dependency>
      <groupId>org.example</groupId>
      <artifactId>lib</artifactId>
      <version>${lib.version}</version>
      <type>zip</type>
      <classifier>assembly</classifier>
    </dependency>
    <dependency>
      <groupId>${project.groupId}</groupId>
      <artifactId>sibling</artifactId>
      <version>${project.version}</version>
    </dependency>
  </dependencies>
</project>
"""
    path = _write(tmp_path, "pom.xml", pom)
    model = parse_pom(path)

    lib = model.dependencies[0].coordinate
    assert lib.compact() == "org.example:lib:2.3.4"
    assert (lib.extension, lib.classifier) == ("zip", "assembly")
    assert model.dependencies[1].coordinate.compact() == "com.acme:sibling:1.0.0"


def test_skip_dependencies_when_not_requested(tmp_path: Path) -> None:
    pom = """<project>
  <groupId>com.acme</groupId>
  <artifactId>demo</artifactId>
  <version>1.0.0</version>
  <dependencies>
    <dependency><groupId>junit</groupId><artifactId>junit</artifactId><version>4.13.2</version></dependency>
  </dependencies>
</project>
"""
    model = parse_pom(_write(tmp_path, "pom.xml", pom), resolve_dependencies=False)
    assert model.dependencies == []


def test_missing_file_raises_not_found(tmp_path: Path) -> None:
    with pytest.raises(PomNotFoundError):
        parse_pom(tmp_path / "pom.xml")


def test_malformed_xml_raises_parse_error(tmp_path: Path) -> None:
    path = _write(tmp_path, "pom.xml", "<project><artifactId>broken</project>")
    with pytest.raises(PomParseError):
        parse_pom(path)


def test_missing_group_raises_model_error(tmp_path: Path) -> None:
    path = _write(tmp_path, "pom.xml", "<project><artifactId>orphan</artifactId></project>")
    with pytest.raises(PomModelError):
        parse_pom(path)


def test_non_project_root_raises_model_error(tmp_path: Path) -> None:
    path = _write(tmp_path, "pom.xml", "<settings><artifactId>x</artifactId></settings>")
    with pytest.raises(PomModelError):
        parse_pom(path)
