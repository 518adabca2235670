#!/usr/bin/env python3
"""
xml_utils.py - Element lookups and builders shared by the mission mappers.

Lookups take the path of the element they are reading from so that any
XMLParseError names the offending node, e.g.
"CONTENT/TASK/PROBLEMS/PROBLEM[1]/SNIPPET".

Text is returned exactly as written. Trimming is the caller's decision,
because only some mission fields are trimmed on import.
"""

from __future__ import annotations

import re
from typing import List, Optional, Union
from xml.etree import ElementTree as ET

# SECURITY: Use defusedxml to protect against XXE attacks
from defusedxml import DefusedXmlException
from defusedxml import ElementTree as DefusedET

from missionxml.errors import XMLParseError


XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'

INTEGER_RE = re.compile(r"^\s*[+-]?\d+\s*$")

# Serializers turn stray carriage returns into character references
CARRIAGE_RETURN_RE = re.compile(r"(&#xD;|&#13;)+", re.IGNORECASE)


# ============================================================================
# Parsing
# ============================================================================

def parse_xml_string(text: Union[str, bytes]) -> ET.Element:
    """
    Parse XML text into an element tree root.

    SECURITY: Uses defusedxml so entity expansion and external references
    in author-supplied files are rejected.
    """
    try:
        return DefusedET.fromstring(text)
    except ET.ParseError as e:
        raise XMLParseError(f"Malformed XML: {e}")
    except DefusedXmlException as e:
        raise XMLParseError(f"Forbidden XML construct: {e}")


def child_path(path: str, tag: str, index: Optional[int] = None) -> str:
    """Extend a node path with a child tag and optional position."""
    step = tag if index is None else f"{tag}[{index}]"
    return f"{path}/{step}" if path else step


def get_text(elem: Optional[ET.Element], default: str = "") -> str:
    """Text content of an element, unmodified."""
    if elem is not None and elem.text is not None:
        return elem.text
    return default


def find_children(elem: ET.Element, tag: str) -> List[ET.Element]:
    """All direct children with the given tag, in document order."""
    return elem.findall(tag)


def require_child(elem: ET.Element, tag: str, path: str) -> ET.Element:
    """First direct child with the given tag, or XMLParseError."""
    child = elem.find(tag)
    if child is None:
        raise XMLParseError(f"Missing required <{tag}> element", path)
    return child


def require_attr(elem: ET.Element, name: str, path: str) -> str:
    """Attribute value, or XMLParseError when the attribute is missing."""
    value = elem.get(name)
    if value is None:
        raise XMLParseError(f"Missing required attribute '{name}'", path)
    return value


def parse_int(value: Optional[str], name: str, path: str) -> int:
    """
    Parse a base-10 integer attribute or text value.

    Unlike a lenient prefix parse, "10abc" and "" are rejected rather than
    turned into a number or a placeholder.
    """
    if value is None or not INTEGER_RE.match(value):
        raise XMLParseError(f"'{name}' must be an integer, got {value!r}", path)
    return int(value.strip(), 10)


def int_attr(
    elem: ET.Element,
    name: str,
    path: str,
    default: Optional[int] = None,
) -> int:
    """
    Integer attribute. With a default, a missing (or empty) attribute yields
    the default; without one it is an error.
    """
    value = elem.get(name)
    if default is not None and not value:
        return default
    if value is None:
        raise XMLParseError(f"Missing required attribute '{name}'", path)
    return parse_int(value, name, path)


# ============================================================================
# Building
# ============================================================================

def add_text_element(parent: ET.Element, tag: str, text: Optional[str], **attribs) -> ET.Element:
    """Add a text element to parent."""
    elem = ET.SubElement(parent, tag, **attribs)
    elem.text = text
    return elem


def prettify_xml(elem: ET.Element) -> str:
    """
    Return a pretty-printed XML string with an XML declaration.

    Only whitespace between elements is added; leaf text and attribute
    values are written exactly as stored.
    """
    ET.indent(elem, space="  ")
    body = ET.tostring(elem, encoding="unicode")
    return f"{XML_DECLARATION}\n{body}\n"


def strip_carriage_returns(xml_str: str) -> str:
    """Remove carriage-return character references left by serialization."""
    return CARRIAGE_RETURN_RE.sub("", xml_str)
