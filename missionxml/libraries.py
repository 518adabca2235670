#!/usr/bin/env python3
"""
libraries.py - Map <DEPLOYMENT>/<GRADERDEPLOYMENT> nodes to Library records.

    <DEPLOYMENT interpreter="2">
      <EXTERNAL name="RUNES">
        <SYMBOL>show</SYMBOL>
      </EXTERNAL>
      <GLOBAL>
        <IDENTIFIER>N</IDENTIFIER>
        <VALUE>2+2</VALUE>
      </GLOBAL>
    </DEPLOYMENT>

A missing deployment node maps to the "no deployment" library (chapter -1).
The external reference may be written as <IMPORT> or <EXTERNAL>; both mean
the same thing and export always writes <EXTERNAL>.
"""

from __future__ import annotations

from typing import Optional
from xml.etree import ElementTree as ET

from missionxml.errors import XMLParseError
from missionxml.expressions import evaluate_expression
from missionxml.models import (
    NO_CHAPTER,
    ExternalLibrary,
    ExternalLibraryName,
    GlobalBinding,
    Library,
)
from missionxml.xml_utils import (
    add_text_element,
    child_path,
    find_children,
    get_text,
    int_attr,
    require_attr,
    require_child,
)


DEPLOYMENT_TAG = "DEPLOYMENT"
GRADER_DEPLOYMENT_TAG = "GRADERDEPLOYMENT"

# Checked in order; the first one present is used
EXTERNAL_TAGS = ("IMPORT", "EXTERNAL")


def no_deployment() -> Library:
    """The library used when no deployment node is present."""
    return Library(
        chapter=NO_CHAPTER,
        external=ExternalLibrary(name=ExternalLibraryName.NONE, symbols=()),
        globals=(),
    )


def parse_library(node: Optional[ET.Element], path: str = "") -> Library:
    """Parse a deployment node, or return no_deployment() when it is absent."""
    if node is None:
        return no_deployment()

    path = path or node.tag
    chapter = int_attr(node, "interpreter", path)

    external = ExternalLibrary()
    for tag in EXTERNAL_TAGS:
        external_node = node.find(tag)
        if external_node is not None:
            external = _parse_external(external_node, child_path(path, tag))
            break

    globals_val = tuple(
        _parse_global(global_node, child_path(path, "GLOBAL", i))
        for i, global_node in enumerate(find_children(node, "GLOBAL"))
    )

    return Library(chapter=chapter, external=external, globals=globals_val)


def _parse_external(node: ET.Element, path: str) -> ExternalLibrary:
    name = require_attr(node, "name", path)
    try:
        name_val = ExternalLibraryName(name)
    except ValueError:
        raise XMLParseError(f"Unknown external library '{name}'", path)

    symbols = tuple(get_text(symbol) for symbol in find_children(node, "SYMBOL"))
    return ExternalLibrary(name=name_val, symbols=symbols)


def _parse_global(node: ET.Element, path: str) -> GlobalBinding:
    identifier = get_text(require_child(node, "IDENTIFIER", path))
    source = get_text(require_child(node, "VALUE", path))
    value = evaluate_expression(source, child_path(path, "VALUE"))
    return GlobalBinding(identifier=identifier, value=value, source=source)


def serialize_library(library: Library, tag: str = DEPLOYMENT_TAG) -> ET.Element:
    """
    Build a deployment node.

    The interpreter attribute and the EXTERNAL child are always written,
    even for a chapter -1 library; callers decide whether to emit it at all.
    """
    node = ET.Element(tag, interpreter=str(library.chapter))

    external = ET.SubElement(node, "EXTERNAL", name=library.external.name.value)
    for symbol in library.external.symbols:
        add_text_element(external, "SYMBOL", symbol)

    for binding in library.globals:
        global_node = ET.SubElement(node, "GLOBAL")
        add_text_element(global_node, "IDENTIFIER", binding.identifier)
        add_text_element(global_node, "VALUE", binding.source)

    return node
