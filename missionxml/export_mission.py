#!/usr/bin/env python3
"""
# MissionXML
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

export_mission.py

Write the staged mission back out as mission XML.

The file name is, in order of preference: --filename, the overview's
file_name, the overview's title. ".xml" is always appended.

Usage:
    missionxml-export [--filename NAME] [--output DIR]

Options:
    --filename  Base name of the exported file (default: from the overview)
    --output    Directory to write to (default: export_dir from config)
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Callable, Optional

from missionxml.assessment import render_mission_xml
from missionxml.config_utils import MissionConfig, load_config
from missionxml.errors import MissionXMLError
from missionxml.icons import DOWNLOAD, ERROR, INFO, SUCCESS, fence
from missionxml.storage import (
    JsonFileStore,
    KeyValueStore,
    retrieve_local_assessment,
    retrieve_local_assessment_overview,
)


Download = Callable[[str, str], Path]


def write_download(filename: str, text: str, output_dir: Path = Path("exports")) -> Path:
    """
    Save exported XML as a UTF-8 file in output_dir.

    Only the final component of filename is used, so a title such as
    "../Mission" cannot escape output_dir.
    """
    safe_name = Path(filename).name
    if not safe_name or safe_name == ".xml":
        raise MissionXMLError(f"Cannot derive a file name from {filename!r}")

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    target = output_dir / safe_name
    target.write_text(text, encoding="utf-8")
    return target


def export_filename(overview_file_name: Optional[str], title: str, override: Optional[str] = None) -> str:
    """Pick the export file name and append the .xml extension."""
    return f"{override or overview_file_name or title}.xml"


def export_xml(
    store: KeyValueStore,
    download: Optional[Download] = None,
    filename: Optional[str] = None,
    config: Optional[MissionConfig] = None,
) -> Optional[Path]:
    """
    Render the staged assessment and hand it to download.

    Args:
        store: Key-value store holding the staged mission
        download: Called with (filename, xml_text); defaults to writing into
                  the configured export directory
        filename: Base file name overriding the overview's
        config: Settings; loaded from the environment when omitted

    Returns:
        Whatever download returned, or None when either record is not staged.
    """
    config = config or load_config()

    assessment = retrieve_local_assessment(store, config.assessment_key)
    overview = retrieve_local_assessment_overview(store, config.overview_key)
    if assessment is None or overview is None:
        print(f"[export] {INFO} No staged mission to export")
        return None

    text = render_mission_xml(assessment, overview)
    name = export_filename(overview.file_name, overview.title, filename)

    if download is None:
        return write_download(name, text, config.export_dir)
    return download(name, text)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Export the staged mission to mission XML"
    )
    parser.add_argument(
        "--filename", "-f",
        help="Base name of the exported file (default: from the overview)"
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output directory (default: export_dir from missionxml.yaml)"
    )

    args = parser.parse_args(argv)

    try:
        config = load_config()
        store = JsonFileStore(config.store_path)

        fence("Mission Export")
        print(f"[export] Store: {config.store_path}")

        output_dir = args.output or config.export_dir
        path = export_xml(
            store,
            download=lambda name, text: write_download(name, text, output_dir),
            filename=args.filename,
            config=config,
        )

        if path is None:
            print(f"{ERROR} Nothing to export; import a mission first")
            return 1

        print(f"[export] {DOWNLOAD} Wrote {path}")
        print(f"\n{SUCCESS} Export complete")
        return 0

    except (MissionXMLError, OSError) as e:
        print(f"\n{ERROR} Export failed: {e}")
        return 1


if __name__ == "__main__":
    exit(main())
