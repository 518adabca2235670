#!/usr/bin/env python3
"""
Tests for questions.py - PROBLEM node mapping.
"""

from dataclasses import replace
from xml.etree import ElementTree as ET

import pytest

from missionxml.errors import XMLParseError
from missionxml.models import (
    ExternalLibraryName,
    MCQChoice,
    MCQQuestion,
    ProgrammingQuestion,
    Testcase,
    TestcaseType,
)
from missionxml.questions import parse_question, serialize_question


PROGRAMMING = """<PROBLEM type="programming" maxgrade="10" maxxp="100">
  <TEXT>Write f.</TEXT>
  <SNIPPET>
    <TEMPLATE>  x = 1;  </TEMPLATE>
    <PREPEND>
      const y = 2;
    </PREPEND>
    <GRADER>  grade();</GRADER>
    <SOLUTION> function f() {} </SOLUTION>
    <TESTCASES>
      <PUBLIC answer="1" score="5">f();</PUBLIC>
      <PUBLIC answer="2" score="1">f(1);</PUBLIC>
      <PRIVATE answer="3" score="4">f(2);</PRIVATE>
    </TESTCASES>
  </SNIPPET>
</PROBLEM>"""


def mcq(*flags, solution=None):
    choices = "".join(
        f'<CHOICE correct="{flag}"><TEXT>c{i}</TEXT></CHOICE>' for i, flag in enumerate(flags)
    )
    snippet = f"<SNIPPET><SOLUTION>{solution}</SOLUTION></SNIPPET>" if solution is not None else ""
    return f'<PROBLEM type="mcq" maxgrade="2"><TEXT>Pick</TEXT>{choices}{snippet}</PROBLEM>'


class TestParseProgramming:
    def test_fields(self, element):
        question = parse_question(element(PROGRAMMING), 0)

        assert isinstance(question, ProgrammingQuestion)
        assert question.id == 0
        assert question.content == "Write f."
        assert question.max_grade == 10
        assert question.max_xp == 100
        assert question.grade == 0
        assert question.xp == 0

    def test_snippet_fields_trimmed(self, element):
        question = parse_question(element(PROGRAMMING), 0)

        assert question.solution_template == "x = 1;"
        assert question.prepend == "const y = 2;"
        assert question.postpend == ""
        assert question.answer == "function f() {}"

    def test_grader_kept_verbatim(self, element):
        assert parse_question(element(PROGRAMMING), 0).grader_template == "  grade();"

    def test_testcases_split_by_visibility(self, element):
        question = parse_question(element(PROGRAMMING), 0)

        assert question.testcases == (
            Testcase(answer="1", score=5, program="f();", type=TestcaseType.PUBLIC),
            Testcase(answer="2", score=1, program="f(1);", type=TestcaseType.PUBLIC),
        )
        assert question.testcases_private == (
            Testcase(answer="3", score=4, program="f(2);", type=TestcaseType.PRIVATE),
        )

    def test_no_question_libraries(self, element):
        question = parse_question(element(PROGRAMMING), 0)

        assert question.library.is_absent
        assert question.grader_library.is_absent

    def test_question_deployment(self, element):
        question = parse_question(element(
            '<PROBLEM type="programming" maxgrade="1"><TEXT>t</TEXT>'
            '<DEPLOYMENT interpreter="3"><EXTERNAL name="SOUNDS"/></DEPLOYMENT>'
            "<SNIPPET><TEMPLATE/></SNIPPET></PROBLEM>"
        ), 4)

        assert question.id == 4
        assert question.library.chapter == 3
        assert question.library.external.name == ExternalLibraryName.SOUNDS
        assert question.testcases == ()
        assert question.grader_template is None

    def test_missing_maxxp_defaults_to_zero(self, element):
        question = parse_question(element(
            '<PROBLEM type="programming" maxgrade="1"><TEXT>t</TEXT><SNIPPET><TEMPLATE/></SNIPPET></PROBLEM>'
        ), 0)
        assert question.max_xp == 0

    def test_missing_template(self, element):
        with pytest.raises(XMLParseError) as exc_info:
            parse_question(element(
                '<PROBLEM type="programming" maxgrade="1"><TEXT>t</TEXT><SNIPPET/></PROBLEM>'
            ), 2, "PROBLEMS/PROBLEM[2]")
        assert exc_info.value.path == "PROBLEMS/PROBLEM[2]/SNIPPET"

    def test_missing_snippet(self, element):
        with pytest.raises(XMLParseError, match="SNIPPET"):
            parse_question(element('<PROBLEM type="programming" maxgrade="1"><TEXT>t</TEXT></PROBLEM>'), 0)

    def test_missing_maxgrade(self, element):
        with pytest.raises(XMLParseError, match="maxgrade"):
            parse_question(element(
                '<PROBLEM type="programming"><TEXT>t</TEXT><SNIPPET><TEMPLATE/></SNIPPET></PROBLEM>'
            ), 0)

    def test_bad_testcase_score_names_node(self, element):
        with pytest.raises(XMLParseError) as exc_info:
            parse_question(element(
                '<PROBLEM type="programming" maxgrade="1"><TEXT>t</TEXT><SNIPPET><TEMPLATE/>'
                '<TESTCASES><PUBLIC answer="1" score="1"/><PRIVATE answer="1" score="x"/></TESTCASES>'
                "</SNIPPET></PROBLEM>"
            ), 0, "PROBLEM[0]")
        assert exc_info.value.path == "PROBLEM[0]/SNIPPET/TESTCASES/PRIVATE[0]"


class TestParseMCQ:
    def test_fields(self, element):
        question = parse_question(element(mcq("false", "true", "false")), 1)

        assert isinstance(question, MCQQuestion)
        assert question.id == 1
        assert question.choices == (MCQChoice("c0"), MCQChoice("c1"), MCQChoice("c2"))
        assert all(choice.hint is None for choice in question.choices)
        assert question.solution == 1

    def test_last_flagged_choice_wins(self, element):
        question = parse_question(element(mcq("true", "false", "true")), 0)
        assert question.solution == 2

    def test_no_flagged_choice(self, element):
        question = parse_question(element(mcq("false", "false")), 0)
        assert question.solution == 0

    def test_only_exact_true_counts(self, element):
        question = parse_question(element(mcq("false", "TRUE", "yes")), 0)
        assert question.solution == 0

    def test_answer_from_snippet(self, element):
        assert parse_question(element(mcq("false", "true", solution="1")), 0).answer == 1

    def test_answer_defaults_to_zero(self, element):
        assert parse_question(element(mcq("true")), 0).answer == 0
        assert parse_question(element(mcq("true", solution="")), 0).answer == 0

    def test_non_numeric_answer(self, element):
        with pytest.raises(XMLParseError):
            parse_question(element(mcq("true", solution="one")), 0)

    def test_choice_without_text(self, element):
        with pytest.raises(XMLParseError) as exc_info:
            parse_question(element(
                '<PROBLEM type="mcq" maxgrade="1"><TEXT>t</TEXT><CHOICE correct="true"/></PROBLEM>'
            ), 0, "PROBLEM[0]")
        assert exc_info.value.path == "PROBLEM[0]/CHOICE[0]"


class TestUnsupportedType:
    def test_unknown_type_returns_none(self, element):
        assert parse_question(element('<PROBLEM type="voting" maxgrade="1"/>'), 0) is None

    def test_unknown_type_not_validated(self, element):
        assert parse_question(element('<PROBLEM type="contest"/>'), 0) is None

    def test_missing_type(self, element):
        with pytest.raises(XMLParseError, match="type"):
            parse_question(element('<PROBLEM maxgrade="1"><TEXT>t</TEXT></PROBLEM>'), 0)


class TestSerializeQuestion:
    def test_programming(self, element):
        node = serialize_question(parse_question(element(PROGRAMMING), 0))

        assert node.tag == "PROBLEM"
        assert node.get("type") == "programming"
        assert node.get("maxgrade") == "10"
        assert node.get("maxxp") == "100"
        assert node.find("TEXT").text == "Write f."

        snippet = node.find("SNIPPET")
        assert snippet.find("SOLUTION").text == "function f() {}"
        assert snippet.find("TEMPLATE").text == "x = 1;"
        assert snippet.find("GRADER").text == "  grade();"
        assert [t.tag for t in snippet.find("TESTCASES")] == ["PUBLIC", "PUBLIC", "PRIVATE"]

    def test_absent_libraries_omitted(self, element):
        node = serialize_question(parse_question(element(PROGRAMMING), 0))

        assert node.find("DEPLOYMENT") is None
        assert node.find("GRADERDEPLOYMENT") is None

    def test_question_deployment_written_as_child(self, element):
        question = parse_question(element(
            '<PROBLEM type="mcq" maxgrade="1"><TEXT>t</TEXT>'
            '<GRADERDEPLOYMENT interpreter="2"/><CHOICE correct="true"><TEXT>a</TEXT></CHOICE></PROBLEM>'
        ), 0)
        node = serialize_question(question)

        assert node.find("GRADERDEPLOYMENT").get("interpreter") == "2"
        assert node.get("interpreter") is None

    def test_zero_maxxp_omitted(self, element):
        node = serialize_question(parse_question(element(mcq("true")), 0))
        assert node.get("maxxp") is None

    def test_mcq_flags(self, element):
        node = serialize_question(parse_question(element(mcq("false", "true", solution="1")), 0))

        assert [c.get("correct") for c in node.findall("CHOICE")] == ["false", "true"]
        assert [c.find("TEXT").text for c in node.findall("CHOICE")] == ["c0", "c1"]
        assert node.find("SNIPPET/SOLUTION").text == "1"

    def test_empty_grader_reads_back_as_none(self, element):
        question = replace(parse_question(element(PROGRAMMING), 0), grader_template="")
        again = parse_question(serialize_question(question), 0)

        assert again.grader_template is None

    def test_choice_hint_not_written(self, element):
        question = replace(
            parse_question(element(mcq("true")), 0),
            choices=(MCQChoice("c0", hint="think about runes"),),
        )
        node = serialize_question(question)

        assert "think about runes" not in ET.tostring(node, encoding="unicode")
        assert parse_question(node, 0).choices == (MCQChoice("c0", hint=None),)

    def test_unknown_question_class(self):
        with pytest.raises(TypeError):
            serialize_question(object())

    @pytest.mark.parametrize("xml", [PROGRAMMING, mcq("false", "true", "false", solution="2")])
    def test_round_trip(self, element, xml):
        question = parse_question(element(xml), 3)
        assert parse_question(serialize_question(question), 3) == question
