"""Parsing of log level names given on the command line."""

from __future__ import annotations

import logging
import re

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}

_OFFSET_RE = re.compile(r"[+-]\d+")


class LogLevelError(ValueError):
    """A log level string could not be understood."""


def parse_log_level(text: str) -> int:
    """Return the logging level named by text.

    Accepts DEBUG, INFO, WARN or ERROR in any case, optionally followed by a
    signed offset such as "info+2", which is added to the level.
    """
    name, offset = text, 0
    sign = re.search(r"[+-]", text)
    if sign is not None:
        name, raw_offset = text[: sign.start()], text[sign.start():]
        if not _OFFSET_RE.fullmatch(raw_offset):
            raise LogLevelError(f"unable to parse log level: level string {text!r}: invalid offset")
        offset = int(raw_offset)
    try:
        level = _LEVELS[name.upper()]
    except KeyError:
        raise LogLevelError(f"unable to parse log level: level string {text!r}: unknown name") from None
    return level + offset