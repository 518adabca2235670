#!/usr/bin/env python3
"""
errors.py - MissionXML exception hierarchy

Every error raised on purpose by MissionXML derives from MissionXMLError, so
command-line entry points can report them without a traceback.
"""

from __future__ import annotations

from typing import Optional


class MissionXMLError(Exception):
    """Base class for all MissionXML errors."""
    pass


class XMLParseError(MissionXMLError):
    """
    Malformed mission XML.

    Raised when a required attribute or child is missing, or when a value
    that must be a number is not. The whole conversion is aborted.

    Attributes:
        path: Slash-joined location of the offending node, e.g.
              "CONTENT/TASK/PROBLEMS/PROBLEM[1]/SNIPPET"
    """

    def __init__(self, message: str, path: Optional[str] = None):
        self.message = message
        self.path = path
        if path:
            super().__init__(f"{message} (at {path})")
        else:
            super().__init__(message)


class ExpressionError(XMLParseError):
    """A deployment global whose value is not an allowed literal expression."""
    pass


class ConfigurationError(MissionXMLError):
    """Invalid missionxml.yaml or environment configuration."""
    pass


class StorageError(MissionXMLError):
    """Staged editor state exists but cannot be decoded."""
    pass
