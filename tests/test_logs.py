import logging

import pytest

from sbombastic.logs import LogLevelError, parse_log_level


@pytest.mark.parametrize(
    "text, expected",
    [
        ("debug", logging.DEBUG),
        ("DEBUG", logging.DEBUG),
        ("info", logging.INFO),
        ("Warn", logging.WARNING),
        ("error", logging.ERROR),
    ],
)
def test_known_names(text, expected):
    assert parse_log_level(text) == expected


def test_positive_offset_is_added():
    assert parse_log_level("info+2") == logging.INFO + 2


def test_negative_offset_is_subtracted():
    assert parse_log_level("ERROR-3") == logging.ERROR - 3


def test_levels_keep_their_order():
    names = ["debug", "info", "warn", "error"]
    levels = [parse_log_level(name) for name in names]
    assert levels == sorted(levels)


@pytest.mark.parametrize("text", ["", "verbose", "warning", "info+", "info+x", "info+ 1", "+1"])
def test_rejects_bad_levels(text):
    with pytest.raises(LogLevelError):
        parse_log_level(text)


def test_error_is_a_value_error():
    with pytest.raises(ValueError, match="unable to parse log level"):
        parse_log_level("loud")