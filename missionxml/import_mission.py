#!/usr/bin/env python3
"""
# MissionXML
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

import_mission.py

Stage a mission XML file for editing.

The file is parsed into an assessment and its overview, which replace
whatever is currently staged. Problems of an unsupported type are skipped
and listed in the summary.

Usage:
    missionxml-import <mission.xml> [--clear] [--dry-run]

Options:
    --clear     Drop the staged mission before importing
    --dry-run   Parse and report without staging anything
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import Optional

from missionxml.assessment import parse_mission_xml
from missionxml.config_utils import MissionConfig, load_config
from missionxml.errors import MissionXMLError
from missionxml.icons import (
    DEPLOYMENT,
    ERROR,
    INFO,
    MISSION,
    QUESTION,
    SUCCESS,
    WARNING,
    fence,
)
from missionxml.models import AssessmentBundle
from missionxml.storage import (
    JsonFileStore,
    KeyValueStore,
    clear_local_state,
    store_local_assessment,
    store_local_assessment_overview,
)


def import_mission(
    xml_path: Path,
    store: KeyValueStore,
    clear: bool = False,
    dry_run: bool = False,
    config: Optional[MissionConfig] = None,
) -> AssessmentBundle:
    """
    Parse xml_path and stage the result in store.

    The overview's file_name is set to the file's stem so a later export
    writes back to the same name.

    Raises:
        XMLParseError: if the document is malformed; nothing is staged
        OSError: if the file cannot be read
    """
    config = config or load_config()
    xml_path = Path(xml_path)

    print(f"[import] Reading {xml_path}")
    bundle = parse_mission_xml(xml_path.read_bytes())
    overview = replace(bundle.overview, file_name=xml_path.stem)
    bundle = replace(bundle, overview=overview)

    if dry_run:
        print(f"[import] {INFO} Dry run; nothing staged")
        return bundle

    if clear:
        clear_local_state(store, config.assessment_key, config.overview_key)
        print(f"[import] Cleared staged mission")

    store_local_assessment(store, bundle.assessment, config.assessment_key)
    store_local_assessment_overview(store, bundle.overview, config.overview_key)
    print(f"[import] {SUCCESS} Staged '{overview.title}'")

    return bundle


def print_summary(bundle: AssessmentBundle) -> None:
    assessment = bundle.assessment
    overview = bundle.overview

    fence("Import Summary")
    print(f"{MISSION} {overview.category.value}: {overview.title}")
    if overview.number:
        print(f"   Number:    {overview.number}")
    print(f"   Opens:     {overview.open_at}")
    print(f"   Due:       {overview.close_at}")
    print(f"   Max grade: {overview.max_grade}")
    print(f"   Max XP:    {overview.max_xp}")

    print(f"\n{QUESTION} Questions: {len(assessment.questions)}")
    for question in assessment.questions:
        print(f"   [{question.id}] {question.type:<12} grade {question.max_grade:>4}  xp {question.max_xp:>5}")

    if not assessment.global_deployment.is_absent:
        print(f"\n{DEPLOYMENT} Deployment: chapter {assessment.global_deployment.chapter}, "
              f"external {assessment.global_deployment.external.name.value}")

    if bundle.skipped:
        print(f"\n{WARNING} Skipped {len(bundle.skipped)} problem(s):")
        for skipped in bundle.skipped:
            print(f"   [{skipped.ordinal}] unsupported type '{skipped.type}'")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Stage a mission XML file for editing"
    )
    parser.add_argument(
        "mission",
        type=Path,
        help="Path to mission .xml file"
    )
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Drop the staged mission before importing"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Parse and report without staging anything"
    )

    args = parser.parse_args(argv)

    if not args.mission.is_file():
        print(f"{ERROR} Mission file not found: {args.mission}")
        return 1

    if not args.mission.suffix.lower() == ".xml":
        print(f"{WARNING} Warning: File does not have .xml extension")

    try:
        config = load_config()
        store = JsonFileStore(config.store_path)

        fence("Mission Import")
        bundle = import_mission(
            args.mission,
            store,
            clear=args.clear,
            dry_run=args.dry_run,
            config=config,
        )
        print_summary(bundle)
        return 0

    except (MissionXMLError, OSError) as e:
        print(f"\n{ERROR} Import failed: {e}")
        return 1


if __name__ == "__main__":
    exit(main())
