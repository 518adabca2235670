#!/usr/bin/env python3
"""
# MissionXML
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

questions.py

Map <PROBLEM> nodes to ProgrammingQuestion / MCQQuestion records and back.

Programming problem:

    <PROBLEM type="programming" maxgrade="10" maxxp="100">
      <TEXT>Write a function...</TEXT>
      <SNIPPET>
        <TEMPLATE>function f() {}</TEMPLATE>
        <PREPEND>...</PREPEND>          optional
        <POSTPEND>...</POSTPEND>        optional
        <GRADER>...</GRADER>            optional
        <SOLUTION>...</SOLUTION>        optional
        <TESTCASES>
          <PUBLIC answer="1" score="5">f()</PUBLIC>
          <PRIVATE answer="2" score="5">f(1)</PRIVATE>
        </TESTCASES>
      </SNIPPET>
    </PROBLEM>

Multiple-choice problem:

    <PROBLEM type="mcq" maxgrade="2">
      <TEXT>Pick one</TEXT>
      <CHOICE correct="false"><TEXT>A</TEXT></CHOICE>
      <CHOICE correct="true"><TEXT>B</TEXT></CHOICE>
      <SNIPPET><SOLUTION>1</SOLUTION></SNIPPET>   optional
    </PROBLEM>

Either kind may carry its own DEPLOYMENT and GRADERDEPLOYMENT.

Two fields do not survive export and re-import: an empty GRADER is not
written and reads back as None, and choice hints have no XML form at all.
"""

from __future__ import annotations

from typing import Any, Dict, Optional
from xml.etree import ElementTree as ET

from missionxml.libraries import (
    DEPLOYMENT_TAG,
    GRADER_DEPLOYMENT_TAG,
    parse_library,
    serialize_library,
)
from missionxml.models import (
    MCQChoice,
    MCQQuestion,
    ProgrammingQuestion,
    Question,
    TestcaseType,
)
from missionxml.testcases import (
    PRIVATE_TAG,
    PUBLIC_TAG,
    parse_testcase,
    serialize_testcase,
)
from missionxml.xml_utils import (
    add_text_element,
    child_path,
    find_children,
    get_text,
    int_attr,
    parse_int,
    require_attr,
    require_child,
)


PROBLEM_TAG = "PROBLEM"
SNIPPET_TAG = "SNIPPET"
TESTCASES_TAG = "TESTCASES"
CHOICE_TAG = "CHOICE"
TEXT_TAG = "TEXT"


# ============================================================================
# Import
# ============================================================================

def parse_question(problem: ET.Element, ordinal: int, path: str = "") -> Optional[Question]:
    """
    Parse one PROBLEM node.

    Args:
        problem: The PROBLEM element
        ordinal: Position of the problem in the document; becomes the question id
        path: Location of the node, used in error messages

    Returns:
        The question, or None when the type is neither programming nor mcq.
        Such problems are left for the caller to report.
    """
    path = path or child_path("", PROBLEM_TAG, ordinal)
    question_type = require_attr(problem, "type", path)
    if question_type not in (ProgrammingQuestion.type, MCQQuestion.type):
        return None

    common = {
        "id": ordinal,
        "content": get_text(require_child(problem, TEXT_TAG, path)),
        "library": parse_library(
            problem.find(DEPLOYMENT_TAG), child_path(path, DEPLOYMENT_TAG)
        ),
        "grader_library": parse_library(
            problem.find(GRADER_DEPLOYMENT_TAG), child_path(path, GRADER_DEPLOYMENT_TAG)
        ),
        "max_grade": int_attr(problem, "maxgrade", path),
        "max_xp": int_attr(problem, "maxxp", path, default=0),
        "grade": 0,
        "xp": 0,
    }

    if question_type == ProgrammingQuestion.type:
        return _parse_programming(problem, path, common)
    return _parse_mcq(problem, path, common)


def _parse_programming(
    problem: ET.Element,
    path: str,
    common: Dict[str, Any],
) -> ProgrammingQuestion:
    snippet_path = child_path(path, SNIPPET_TAG)
    snippet = require_child(problem, SNIPPET_TAG, path)

    template = get_text(require_child(snippet, "TEMPLATE", snippet_path))

    grader_template = get_text(snippet.find("GRADER")) or None

    public_nodes = []
    private_nodes = []
    testcases = snippet.find(TESTCASES_TAG)
    if testcases is not None:
        public_nodes = find_children(testcases, PUBLIC_TAG)
        private_nodes = find_children(testcases, PRIVATE_TAG)
    testcases_path = child_path(snippet_path, TESTCASES_TAG)

    return ProgrammingQuestion(
        answer=get_text(snippet.find("SOLUTION")).strip(),
        prepend=get_text(snippet.find("PREPEND")).strip(),
        postpend=get_text(snippet.find("POSTPEND")).strip(),
        solution_template=template.strip(),
        grader_template=grader_template,
        testcases=tuple(
            parse_testcase(node, TestcaseType.PUBLIC, child_path(testcases_path, PUBLIC_TAG, i))
            for i, node in enumerate(public_nodes)
        ),
        testcases_private=tuple(
            parse_testcase(node, TestcaseType.PRIVATE, child_path(testcases_path, PRIVATE_TAG, i))
            for i, node in enumerate(private_nodes)
        ),
        autograding_results=(),
        **common,
    )


def _parse_mcq(problem: ET.Element, path: str, common: Dict[str, Any]) -> MCQQuestion:
    choices = []
    solution = 0
    for i, choice in enumerate(find_children(problem, CHOICE_TAG)):
        choice_path = child_path(path, CHOICE_TAG, i)
        choices.append(MCQChoice(
            content=get_text(require_child(choice, TEXT_TAG, choice_path)),
            hint=None,
        ))
        # Later flagged choices override earlier ones
        if choice.get("correct") == "true":
            solution = i

    answer = 0
    snippet = problem.find(SNIPPET_TAG)
    if snippet is not None:
        marker = get_text(snippet.find("SOLUTION")).strip()
        if marker:
            answer = parse_int(marker, "SOLUTION", child_path(path, SNIPPET_TAG))

    return MCQQuestion(
        answer=answer,
        choices=tuple(choices),
        solution=solution,
        **common,
    )


# ============================================================================
# Export
# ============================================================================

def serialize_question(question: Question) -> ET.Element:
    """
    Build a PROBLEM node.

    Question-level deployments are written only when their chapter is not -1,
    and maxxp only when it is non-zero.
    """
    if not isinstance(question, (ProgrammingQuestion, MCQQuestion)):
        raise TypeError(f"Cannot serialize question of type {type(question).__name__}")

    problem = ET.Element(PROBLEM_TAG, type=question.type, maxgrade=str(question.max_grade))
    if question.max_xp:
        problem.set("maxxp", str(question.max_xp))

    add_text_element(problem, TEXT_TAG, question.content)

    if not question.library.is_absent:
        problem.append(serialize_library(question.library, DEPLOYMENT_TAG))
    if not question.grader_library.is_absent:
        problem.append(serialize_library(question.grader_library, GRADER_DEPLOYMENT_TAG))

    snippet = ET.SubElement(problem, SNIPPET_TAG)
    add_text_element(snippet, "SOLUTION", str(question.answer))

    if isinstance(question, ProgrammingQuestion):
        _serialize_programming(question, snippet)
    else:
        _serialize_mcq(question, problem)

    return problem


def _serialize_programming(question: ProgrammingQuestion, snippet: ET.Element) -> None:
    if question.grader_template:
        add_text_element(snippet, "GRADER", question.grader_template)
    add_text_element(snippet, "TEMPLATE", question.solution_template)
    add_text_element(snippet, "PREPEND", question.prepend)
    add_text_element(snippet, "POSTPEND", question.postpend)

    testcases = ET.SubElement(snippet, TESTCASES_TAG)
    for testcase in question.testcases:
        testcases.append(serialize_testcase(testcase, PUBLIC_TAG))
    for testcase in question.testcases_private:
        testcases.append(serialize_testcase(testcase, PRIVATE_TAG))


def _serialize_mcq(question: MCQQuestion, problem: ET.Element) -> None:
    for i, choice in enumerate(question.choices):
        choice_node = ET.SubElement(
            problem,
            CHOICE_TAG,
            correct="true" if question.solution == i else "false",
        )
        add_text_element(choice_node, TEXT_TAG, choice.content)
