#!/usr/bin/env python3
"""
# MissionXML
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

assessment.py

Convert a whole mission document to an (Assessment, AssessmentOverview) pair
and back.

    <CONTENT xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">
      <TASK kind="mission" title="..." number="M3" story="..."
            startdate="..." duedate="..." coverimage="...">
        <READING>...</READING>           optional
        <WEBSUMMARY>...</WEBSUMMARY>     optional
        <TEXT>...</TEXT>
        <PROBLEMS>
          <PROBLEM .../>
        </PROBLEMS>
        <DEPLOYMENT .../>                optional
        <GRADERDEPLOYMENT .../>          optional
      </TASK>
    </CONTENT>

Import recomputes the overview's maxGrade/maxXp from the questions every
time; nothing in the document is trusted for them. Problems of an unknown
type are skipped and reported in AssessmentBundle.skipped.

Usage:
    from missionxml.assessment import parse_mission_xml, render_mission_xml

    bundle = parse_mission_xml(xml_text)
    xml_text = render_mission_xml(bundle.assessment, bundle.overview)
"""

from __future__ import annotations

from typing import List, Tuple, Union
from xml.etree import ElementTree as ET

from missionxml.errors import XMLParseError
from missionxml.icons import WARNING
from missionxml.libraries import (
    DEPLOYMENT_TAG,
    GRADER_DEPLOYMENT_TAG,
    parse_library,
    serialize_library,
)
from missionxml.models import (
    Assessment,
    AssessmentBundle,
    AssessmentCategory,
    AssessmentOverview,
    AssessmentStatus,
    EDITING_ID,
    GradingStatus,
    Question,
    SkippedProblem,
)
from missionxml.questions import PROBLEM_TAG, TEXT_TAG, parse_question, serialize_question
from missionxml.xml_utils import (
    add_text_element,
    child_path,
    find_children,
    get_text,
    parse_xml_string,
    prettify_xml,
    require_attr,
    require_child,
    strip_carriage_returns,
)


CONTENT_TAG = "CONTENT"
TASK_TAG = "TASK"
PROBLEMS_TAG = "PROBLEMS"
READING_TAG = "READING"
WEBSUMMARY_TAG = "WEBSUMMARY"

XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"


# ============================================================================
# Import
# ============================================================================

def parse_mission_xml(text: Union[str, bytes]) -> AssessmentBundle:
    """Parse mission XML text into an AssessmentBundle."""
    return parse_assessment_bundle(parse_xml_string(text))


def parse_assessment_bundle(root: ET.Element) -> AssessmentBundle:
    """
    Map a parsed mission document to an AssessmentBundle.

    Question ids are source positions, so a skipped problem leaves a gap.
    Export writes only the kept questions; importing that output numbers
    them densely again, so ids are not stable across a round trip.

    Args:
        root: Either the CONTENT wrapper or the TASK element itself

    Raises:
        XMLParseError: if a required attribute or element is missing, or a
                       number is malformed
    """
    task, path = _find_task(root)

    kind = require_attr(task, "kind", path)
    try:
        category = AssessmentCategory.from_kind(kind)
    except ValueError:
        raise XMLParseError(f"Unknown assessment kind '{kind}'", path)

    title = require_attr(task, "title", path)

    questions, skipped = _parse_questions(task, path)
    max_grade = sum(q.max_grade for q in questions)
    max_xp = sum(q.max_xp for q in questions)

    assessment = Assessment(
        id=EDITING_ID,
        category=category,
        title=title,
        long_summary=get_text(require_child(task, TEXT_TAG, path)),
        global_deployment=parse_library(
            task.find(DEPLOYMENT_TAG), child_path(path, DEPLOYMENT_TAG)
        ),
        grader_deployment=parse_library(
            task.find(GRADER_DEPLOYMENT_TAG), child_path(path, GRADER_DEPLOYMENT_TAG)
        ),
        questions=questions,
    )

    overview = AssessmentOverview(
        id=EDITING_ID,
        category=category,
        open_at=require_attr(task, "startdate", path),
        close_at=require_attr(task, "duedate", path),
        title=title,
        story=require_attr(task, "story", path),
        cover_image=require_attr(task, "coverimage", path),
        max_grade=max_grade,
        max_xp=max_xp,
        number=task.get("number") or "",
        short_summary=get_text(task.find(WEBSUMMARY_TAG)),
        reading=get_text(task.find(READING_TAG)),
        status=AssessmentStatus.ATTEMPTING,
        grade=0,
        xp=0,
        grading_status=GradingStatus.NONE,
    )

    return AssessmentBundle(assessment=assessment, overview=overview, skipped=skipped)


def _find_task(root: ET.Element) -> Tuple[ET.Element, str]:
    if root.tag == TASK_TAG:
        return root, TASK_TAG

    task = root.find(TASK_TAG)
    if task is None:
        raise XMLParseError(f"Missing required <{TASK_TAG}> element", root.tag)
    return task, child_path(root.tag, TASK_TAG)


def _parse_questions(
    task: ET.Element,
    path: str,
) -> Tuple[Tuple[Question, ...], Tuple[SkippedProblem, ...]]:
    problems_path = child_path(path, PROBLEMS_TAG)
    problems = require_child(task, PROBLEMS_TAG, path)

    questions: List[Question] = []
    skipped: List[SkippedProblem] = []
    for ordinal, problem in enumerate(find_children(problems, PROBLEM_TAG)):
        question = parse_question(problem, ordinal, child_path(problems_path, PROBLEM_TAG, ordinal))
        if question is None:
            problem_type = problem.get("type", "")
            print(f"[import:warn] {WARNING} Skipping problem {ordinal}: unsupported type '{problem_type}'")
            skipped.append(SkippedProblem(ordinal=ordinal, type=problem_type))
            continue
        questions.append(question)

    return tuple(questions), tuple(skipped)


# ============================================================================
# Export
# ============================================================================

def serialize_assessment_bundle(
    assessment: Assessment,
    overview: AssessmentOverview,
) -> ET.Element:
    """
    Build the CONTENT document for an assessment and its overview.

    READING is written only when non-empty; WEBSUMMARY and TEXT always. The
    global DEPLOYMENT is always written, GRADERDEPLOYMENT only when its
    chapter is not -1.
    """
    content = ET.Element(CONTENT_TAG, {"xmlns:xsi": XSI_NAMESPACE})

    task = ET.SubElement(
        content,
        TASK_TAG,
        coverimage=overview.cover_image,
        duedate=overview.close_at,
        kind=overview.category.to_kind(),
        number=overview.number or "",
        startdate=overview.open_at,
        story=overview.story,
        title=overview.title,
    )

    if overview.reading:
        add_text_element(task, READING_TAG, overview.reading)
    add_text_element(task, WEBSUMMARY_TAG, overview.short_summary)
    add_text_element(task, TEXT_TAG, assessment.long_summary)

    problems = ET.SubElement(task, PROBLEMS_TAG)
    for question in assessment.questions:
        problems.append(serialize_question(question))

    task.append(serialize_library(assessment.global_deployment, DEPLOYMENT_TAG))
    if not assessment.grader_deployment.is_absent:
        task.append(serialize_library(assessment.grader_deployment, GRADER_DEPLOYMENT_TAG))

    return content


def render_mission_xml(assessment: Assessment, overview: AssessmentOverview) -> str:
    """Serialize an assessment and its overview to mission XML text."""
    xml_str = prettify_xml(serialize_assessment_bundle(assessment, overview))
    return strip_carriage_returns(xml_str)
