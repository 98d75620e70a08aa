"""Shared test fixtures for the pom.xml generation test suite."""

import textwrap
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional

import pytest

from pomgen.pom_models import MavenBuild
from pomgen.pom_writer import PomWriter


class PomDocument:
    """Generated ``pom.xml`` parsed back for path-based assertions.

    Namespaces are stripped so paths read like the document
    (``dependencies/dependency/groupId``).
    """

    def __init__(self, xml: str):
        self.xml = xml
        self.root = ET.fromstring(xml)
        for el in self.root.iter():
            el.tag = el.tag.split("}")[-1]

    def node(self, path: str) -> Optional[ET.Element]:
        return self.root.find(path)

    def nodes(self, path: str) -> list[ET.Element]:
        return self.root.findall(path)

    def text(self, path: str) -> Optional[str]:
        return self.root.findtext(path)

    def texts(self, path: str) -> list[str]:
        return [el.text for el in self.root.findall(path)]


@pytest.fixture
def build():
    """An empty MavenBuild with ``com.example.demo:demo`` coordinates."""
    maven_build = MavenBuild()
    maven_build.settings.coordinates("com.example.demo", "demo")
    return maven_build


@pytest.fixture
def render():
    """Factory fixture that serializes a MavenBuild and returns a PomDocument."""
    def _render(maven_build: MavenBuild, **options) -> PomDocument:
        return PomDocument(PomWriter(**options).to_xml(maven_build))
    return _render


@pytest.fixture
def tmp_descriptor(tmp_path):
    """Factory fixture that writes a project descriptor to a temp directory and returns the path."""
    def _write(content: str, name: str = "project.toml") -> Path:
        descriptor = tmp_path / name
        descriptor.write_text(textwrap.dedent(content), encoding="utf-8")
        return descriptor
    return _write
