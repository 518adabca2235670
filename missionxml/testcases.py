#!/usr/bin/env python3
"""
testcases.py - Map <PUBLIC>/<PRIVATE> testcase nodes to Testcase records.

    <PUBLIC answer="1" score="5">x</PUBLIC>

The answer attribute is passed through as a string, score must be a base-10
integer, and the node text is the test program. The tag decides the
testcase type; hidden testcases have no tag of their own and are written as
PRIVATE.
"""

from __future__ import annotations

from typing import Optional
from xml.etree import ElementTree as ET

from missionxml.models import Testcase, TestcaseType
from missionxml.xml_utils import get_text, int_attr, require_attr


PUBLIC_TAG = "PUBLIC"
PRIVATE_TAG = "PRIVATE"

TAG_TYPES = {
    PUBLIC_TAG: TestcaseType.PUBLIC,
    PRIVATE_TAG: TestcaseType.PRIVATE,
}

TYPE_TAGS = {
    TestcaseType.PUBLIC: PUBLIC_TAG,
    TestcaseType.PRIVATE: PRIVATE_TAG,
    TestcaseType.HIDDEN: PRIVATE_TAG,
}


def parse_testcase(
    node: ET.Element,
    testcase_type: Optional[TestcaseType] = None,
    path: str = "",
) -> Testcase:
    """
    Parse one testcase node.

    Without an explicit testcase_type the node's tag decides; anything other
    than PRIVATE is public.
    """
    path = path or node.tag
    if testcase_type is None:
        testcase_type = TAG_TYPES.get(node.tag, TestcaseType.PUBLIC)

    return Testcase(
        answer=require_attr(node, "answer", path),
        score=int_attr(node, "score", path),
        program=get_text(node),
        type=testcase_type,
    )


def serialize_testcase(testcase: Testcase, tag: Optional[str] = None) -> ET.Element:
    """Build a testcase node, tagged by the testcase type unless tag is given."""
    node = ET.Element(
        tag or TYPE_TAGS[testcase.type],
        answer=testcase.answer,
        score=str(testcase.score),
    )
    node.text = testcase.program
    return node
