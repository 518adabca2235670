#!/usr/bin/env python3
"""
Shared fixtures for the MissionXML tests.
"""

from pathlib import Path

import pytest

from missionxml.config_utils import MissionConfig
from missionxml.storage import MemoryStore
from missionxml.xml_utils import parse_xml_string


MISSION_XML = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<CONTENT xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">
  <TASK kind="mission" title="Rune Trials" number="M3" story="mission-3"
        startdate="2026-01-10T00:00:00Z" duedate="2026-01-24T23:59:59Z"
        coverimage="https://example.com/cover.png">
    <READING>Textbook pages 1-20</READING>
    <WEBSUMMARY>Draw runes with the library</WEBSUMMARY>
    <TEXT>Welcome to the rune trials.</TEXT>
    <PROBLEMS>
      <PROBLEM type="programming" maxgrade="10" maxxp="100">
        <TEXT>Write a function that returns one.</TEXT>
        <SNIPPET>
          <TEMPLATE>  x = 1;  </TEMPLATE>
          <PREPEND>const y = 2;</PREPEND>
          <POSTPEND></POSTPEND>
          <GRADER>grade(x);</GRADER>
          <SOLUTION>function f() { return 1; }</SOLUTION>
          <TESTCASES>
            <PUBLIC answer="1" score="5">f();</PUBLIC>
            <PRIVATE answer="2" score="5">f() + 1;</PRIVATE>
          </TESTCASES>
        </SNIPPET>
      </PROBLEM>
      <PROBLEM type="mcq" maxgrade="2" maxxp="20">
        <TEXT>Which is a rune?</TEXT>
        <CHOICE correct="false"><TEXT>heart</TEXT></CHOICE>
        <CHOICE correct="true"><TEXT>rcross</TEXT></CHOICE>
        <CHOICE correct="false"><TEXT>sail</TEXT></CHOICE>
        <SNIPPET><SOLUTION>1</SOLUTION></SNIPPET>
      </PROBLEM>
    </PROBLEMS>
    <DEPLOYMENT interpreter="2">
      <EXTERNAL name="RUNES">
        <SYMBOL>show</SYMBOL>
        <SYMBOL>heart</SYMBOL>
      </EXTERNAL>
      <GLOBAL>
        <IDENTIFIER>N</IDENTIFIER>
        <VALUE>2+2</VALUE>
      </GLOBAL>
    </DEPLOYMENT>
    <GRADERDEPLOYMENT interpreter="3">
      <EXTERNAL name="NONE"/>
    </GRADERDEPLOYMENT>
  </TASK>
</CONTENT>
"""

MINIMAL_TASK_XML = """<TASK kind="path" title="Warmup" story="" startdate="s" duedate="d" coverimage="">
  <TEXT>Short one</TEXT>
  <PROBLEMS/>
</TASK>
"""


@pytest.fixture
def mission_xml():
    return MISSION_XML


@pytest.fixture
def minimal_task_xml():
    return MINIMAL_TASK_XML


@pytest.fixture
def element():
    """Parse an XML snippet into an element."""
    return parse_xml_string


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def config(tmp_path: Path):
    return MissionConfig(
        store_path=tmp_path / "state.json",
        export_dir=tmp_path / "exports",
    )
