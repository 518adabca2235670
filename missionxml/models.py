#!/usr/bin/env python3
"""
# MissionXML
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

models.py

Assessment object model shared by the XML mappers and the editing store.

All records are frozen dataclasses holding tuples, rebuilt wholesale on every
conversion. Each record has to_dict()/from_dict() so staged editor state can
be written to the key-value store as JSON.

Questions are a tagged union: QuestionBase carries the fields both variants
share, ProgrammingQuestion and MCQQuestion add their own. The `type` class
attribute is the XML discriminator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Union


# Questions and assessments being edited have no server-side id yet
EDITING_ID = -1

# Chapter value of a library with no deployment
NO_CHAPTER = -1


# ============================================================================
# Enumerations
# ============================================================================

class AssessmentCategory(str, Enum):
    CONTEST = "Contest"
    MISSION = "Mission"
    PATH = "Path"
    PRACTICAL = "Practical"
    SIDEQUEST = "Sidequest"

    @classmethod
    def from_kind(cls, kind: str) -> "AssessmentCategory":
        """Map an XML kind ("mission") to its category ("Mission")."""
        return cls(kind[:1].upper() + kind[1:])

    def to_kind(self) -> str:
        return self.value.lower()


class AssessmentStatus(str, Enum):
    ATTEMPTING = "attempting"
    ATTEMPTED = "attempted"
    NOT_ATTEMPTED = "not_attempted"
    SUBMITTED = "submitted"


class GradingStatus(str, Enum):
    NONE = "none"
    GRADING = "grading"
    GRADED = "graded"
    EXCLUDED = "excluded"


class TestcaseType(str, Enum):
    __test__ = False

    PUBLIC = "public"
    PRIVATE = "private"
    HIDDEN = "hidden"


class ExternalLibraryName(str, Enum):
    NONE = "NONE"
    RUNES = "RUNES"
    CURVES = "CURVES"
    SOUNDS = "SOUNDS"
    BINARYTREES = "BINARYTREES"
    PIXNFLIX = "PIX&FLIX"
    MACHINELEARNING = "MACHINELEARNING"


# ============================================================================
# Deployment records
# ============================================================================

@dataclass(frozen=True)
class ExternalLibrary:
    """External module imported into a deployment."""
    name: ExternalLibraryName = ExternalLibraryName.NONE
    symbols: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name.value, "symbols": list(self.symbols)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExternalLibrary":
        return cls(
            name=ExternalLibraryName(data.get("name", "NONE")),
            symbols=tuple(data.get("symbols", ())),
        )


@dataclass(frozen=True)
class GlobalBinding:
    """
    A global variable preloaded into a deployment.

    `value` is the evaluated form of `source`. Export always writes `source`
    so the author's formatting ("1+1" rather than "2") survives.
    """
    identifier: str
    value: Any
    source: str

    def to_dict(self) -> List[Any]:
        return [self.identifier, self.value, self.source]

    @classmethod
    def from_dict(cls, data: List[Any]) -> "GlobalBinding":
        identifier, value, source = data
        return cls(identifier=identifier, value=value, source=source)


@dataclass(frozen=True)
class Library:
    """Runtime environment for an assessment or a single question."""
    chapter: int = NO_CHAPTER
    external: ExternalLibrary = field(default_factory=ExternalLibrary)
    globals: Tuple[GlobalBinding, ...] = ()

    @property
    def is_absent(self) -> bool:
        return self.chapter == NO_CHAPTER

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chapter": self.chapter,
            "external": self.external.to_dict(),
            "globals": [g.to_dict() for g in self.globals],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Library":
        return cls(
            chapter=int(data["chapter"]),
            external=ExternalLibrary.from_dict(data.get("external", {})),
            globals=tuple(GlobalBinding.from_dict(g) for g in data.get("globals", ())),
        )


# ============================================================================
# Question records
# ============================================================================

@dataclass(frozen=True)
class Testcase:
    __test__ = False

    answer: str
    score: int
    program: str
    type: TestcaseType = TestcaseType.PUBLIC

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "answer": self.answer,
            "score": self.score,
            "program": self.program,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Testcase":
        return cls(
            answer=data["answer"],
            score=int(data["score"]),
            program=data["program"],
            type=TestcaseType(data.get("type", TestcaseType.PUBLIC.value)),
        )


@dataclass(frozen=True)
class MCQChoice:
    content: str
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"content": self.content, "hint": self.hint}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MCQChoice":
        return cls(content=data["content"], hint=data.get("hint"))


@dataclass(frozen=True)
class QuestionBase:
    """Fields shared by every question variant."""
    type: ClassVar[str] = ""

    id: int
    content: str
    library: Library
    grader_library: Library
    max_grade: int
    max_xp: int = 0
    grade: int = 0
    xp: int = 0

    def _base_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "id": self.id,
            "content": self.content,
            "library": self.library.to_dict(),
            "grader_library": self.grader_library.to_dict(),
            "max_grade": self.max_grade,
            "max_xp": self.max_xp,
            "grade": self.grade,
            "xp": self.xp,
        }

    @staticmethod
    def _base_kwargs(data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "id": int(data["id"]),
            "content": data["content"],
            "library": Library.from_dict(data["library"]),
            "grader_library": Library.from_dict(data["grader_library"]),
            "max_grade": int(data["max_grade"]),
            "max_xp": int(data.get("max_xp", 0)),
            "grade": int(data.get("grade", 0)),
            "xp": int(data.get("xp", 0)),
        }


@dataclass(frozen=True)
class ProgrammingQuestion(QuestionBase):
    """
    A question answered by writing code.

    `answer` holds the reference solution from the SNIPPET, which is what the
    editor shows in the answer pane.
    """
    type: ClassVar[str] = "programming"

    answer: str = ""
    prepend: str = ""
    postpend: str = ""
    solution_template: str = ""
    grader_template: Optional[str] = None
    testcases: Tuple[Testcase, ...] = ()
    testcases_private: Tuple[Testcase, ...] = ()
    autograding_results: Tuple[Any, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        data = self._base_dict()
        data.update({
            "answer": self.answer,
            "prepend": self.prepend,
            "postpend": self.postpend,
            "solution_template": self.solution_template,
            "grader_template": self.grader_template,
            "testcases": [t.to_dict() for t in self.testcases],
            "testcases_private": [t.to_dict() for t in self.testcases_private],
            "autograding_results": list(self.autograding_results),
        })
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProgrammingQuestion":
        return cls(
            answer=data.get("answer") or "",
            prepend=data.get("prepend", ""),
            postpend=data.get("postpend", ""),
            solution_template=data.get("solution_template", ""),
            grader_template=data.get("grader_template"),
            testcases=tuple(Testcase.from_dict(t) for t in data.get("testcases", ())),
            testcases_private=tuple(
                Testcase.from_dict(t) for t in data.get("testcases_private", ())
            ),
            autograding_results=tuple(data.get("autograding_results", ())),
            **cls._base_kwargs(data),
        )


@dataclass(frozen=True)
class MCQQuestion(QuestionBase):
    """A multiple-choice question; `solution` is the index of the correct choice."""
    type: ClassVar[str] = "mcq"

    answer: int = 0
    choices: Tuple[MCQChoice, ...] = ()
    solution: int = 0

    def to_dict(self) -> Dict[str, Any]:
        data = self._base_dict()
        data.update({
            "answer": self.answer,
            "choices": [c.to_dict() for c in self.choices],
            "solution": self.solution,
        })
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MCQQuestion":
        return cls(
            answer=int(data.get("answer") or 0),
            choices=tuple(MCQChoice.from_dict(c) for c in data.get("choices", ())),
            solution=int(data.get("solution", 0)),
            **cls._base_kwargs(data),
        )


Question = Union[ProgrammingQuestion, MCQQuestion]

QUESTION_TYPES: Dict[str, type] = {
    ProgrammingQuestion.type: ProgrammingQuestion,
    MCQQuestion.type: MCQQuestion,
}


def question_from_dict(data: Dict[str, Any]) -> Question:
    """Rebuild a question from its to_dict() form, dispatching on "type"."""
    question_cls = QUESTION_TYPES.get(data.get("type"))
    if question_cls is None:
        raise ValueError(f"Unknown question type: {data.get('type')!r}")
    return question_cls.from_dict(data)


# ============================================================================
# Assessment records
# ============================================================================

@dataclass(frozen=True)
class Assessment:
    category: AssessmentCategory
    title: str
    long_summary: str
    global_deployment: Library
    grader_deployment: Library
    questions: Tuple[Question, ...] = ()
    id: int = EDITING_ID

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "category": self.category.value,
            "title": self.title,
            "long_summary": self.long_summary,
            "global_deployment": self.global_deployment.to_dict(),
            "grader_deployment": self.grader_deployment.to_dict(),
            "questions": [q.to_dict() for q in self.questions],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Assessment":
        return cls(
            id=int(data.get("id", EDITING_ID)),
            category=AssessmentCategory(data["category"]),
            title=data["title"],
            long_summary=data.get("long_summary", ""),
            global_deployment=Library.from_dict(data["global_deployment"]),
            grader_deployment=Library.from_dict(data["grader_deployment"]),
            questions=tuple(question_from_dict(q) for q in data.get("questions", ())),
        )


@dataclass(frozen=True)
class AssessmentOverview:
    """
    Summary metadata for an assessment.

    status, grade, xp and grading_status are editor state; the XML never
    carries them, so import always resets them to their defaults.
    """
    category: AssessmentCategory
    open_at: str
    close_at: str
    title: str
    story: str
    cover_image: str
    max_grade: int = 0
    max_xp: int = 0
    number: str = ""
    short_summary: str = ""
    reading: str = ""
    status: AssessmentStatus = AssessmentStatus.ATTEMPTING
    grade: int = 0
    xp: int = 0
    grading_status: GradingStatus = GradingStatus.NONE
    id: int = EDITING_ID
    file_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "category": self.category.value,
            "open_at": self.open_at,
            "close_at": self.close_at,
            "title": self.title,
            "story": self.story,
            "cover_image": self.cover_image,
            "max_grade": self.max_grade,
            "max_xp": self.max_xp,
            "number": self.number,
            "short_summary": self.short_summary,
            "reading": self.reading,
            "status": self.status.value,
            "grade": self.grade,
            "xp": self.xp,
            "grading_status": self.grading_status.value,
            "file_name": self.file_name,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AssessmentOverview":
        return cls(
            id=int(data.get("id", EDITING_ID)),
            category=AssessmentCategory(data["category"]),
            open_at=data["open_at"],
            close_at=data["close_at"],
            title=data["title"],
            story=data.get("story", ""),
            cover_image=data.get("cover_image", ""),
            max_grade=int(data.get("max_grade", 0)),
            max_xp=int(data.get("max_xp", 0)),
            number=data.get("number") or "",
            short_summary=data.get("short_summary", ""),
            reading=data.get("reading") or "",
            status=AssessmentStatus(data.get("status", AssessmentStatus.ATTEMPTING.value)),
            grade=int(data.get("grade", 0)),
            xp=int(data.get("xp", 0)),
            grading_status=GradingStatus(data.get("grading_status", GradingStatus.NONE.value)),
            file_name=data.get("file_name"),
        )


@dataclass(frozen=True)
class SkippedProblem:
    """A PROBLEM whose type is neither programming nor mcq."""
    ordinal: int
    type: str


@dataclass(frozen=True)
class AssessmentBundle:
    """Result of importing one mission document."""
    assessment: Assessment
    overview: AssessmentOverview
    skipped: Tuple[SkippedProblem, ...] = ()
