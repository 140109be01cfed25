import logging
import re
from datetime import datetime, timezone

import pytest

from logpeek.core.app_config import DEFAULT_PARSER
from logpeek.models.entry import LogLevel
from logpeek.services.parser import (
    DEFAULT_MODULE,
    InvalidMessage,
    InvalidTimestamp,
    NoCaptureGroupsFound,
    TimeFormat,
    TimeFormatKind,
    parse_entry,
    parse_timestamp,
)

PATTERN = re.compile(DEFAULT_PARSER)
ISO = TimeFormat(TimeFormatKind.ISO8601)


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


class TestParseEntry:
    def test_parses_example_lines(self):
        first = parse_entry("2024-01-01T00:00:00Z INFO mod1 - hello", PATTERN, ISO, 0)
        second = parse_entry("2024-01-01T00:00:01Z ERROR mod2 - oops", PATTERN, ISO, 0)

        assert first.timestamp == utc(2024, 1, 1, 0, 0, 0)
        assert first.level is LogLevel.INFO
        assert first.module == "mod1"
        assert first.message == "hello"
        assert first.application == 0
        assert second.timestamp == utc(2024, 1, 1, 0, 0, 1)
        assert second.level is LogLevel.ERROR
        assert (second.module, second.message) == ("mod2", "oops")

    def test_unmatched_line_raises(self):
        with pytest.raises(NoCaptureGroupsFound):
            parse_entry("not a log line", PATTERN, ISO, 0)

    def test_missing_message_group_raises(self):
        pattern = re.compile(r"^(?P<level>\w+)(?: (?P<message>.+))?$")
        with pytest.raises(InvalidMessage):
            parse_entry("INFO", pattern, ISO, 0)

    def test_pattern_without_message_group_raises(self):
        with pytest.raises(InvalidMessage):
            parse_entry("INFO something", re.compile(r"^(?P<level>\w+) .*$"), ISO, 0)

    def test_malformed_timestamp_fails_line(self):
        with pytest.raises(InvalidTimestamp):
            parse_entry("yesterday INFO mod - hi", PATTERN, ISO, 0)

    def test_missing_timestamp_uses_now(self):
        now = utc(2024, 5, 5, 5, 5, 5)
        entry = parse_entry("WARN - careful", re.compile(r"^(?P<level>\w+) - (?P<message>.+)$"), ISO, 3, now=now)
        assert entry.timestamp == now
        assert entry.level is LogLevel.WARN
        assert entry.module == DEFAULT_MODULE
        assert entry.application == 3

    def test_missing_level_defaults_to_info(self):
        entry = parse_entry("just text", re.compile(r"^(?P<message>.+)$"), ISO, 0)
        assert entry.level is LogLevel.INFO

    def test_level_names_are_case_insensitive(self):
        entry = parse_entry("2024-01-01T00:00:00Z debug mod - hi", PATTERN, ISO, 0)
        assert entry.level is LogLevel.DEBUG

    def test_level_map_takes_precedence(self):
        entry = parse_entry(
            "2024-01-01T00:00:00Z WARNING mod - hi", PATTERN, ISO, 0, level_map={"WARNING": "WARN"}
        )
        assert entry.level is LogLevel.WARN

    def test_level_map_keys_are_case_sensitive(self, caplog):
        with caplog.at_level(logging.WARNING):
            entry = parse_entry(
                "2024-01-01T00:00:00Z warning mod - hi", PATTERN, ISO, 0, level_map={"WARNING": "WARN"}
            )
        assert entry.level is LogLevel.INFO
        assert "Invalid log level: warning" in caplog.text

    def test_invalid_level_mapping_falls_back_to_info(self, caplog):
        with caplog.at_level(logging.WARNING):
            entry = parse_entry(
                "2024-01-01T00:00:00Z CRIT mod - hi", PATTERN, ISO, 0, level_map={"CRIT": "FATAL"}
            )
        assert entry.level is LogLevel.INFO
        assert "Invalid log level mapping: FATAL" in caplog.text


class TestTimeFormats:
    def test_from_config_named_formats(self):
        assert TimeFormat.from_config("iso8601").kind is TimeFormatKind.ISO8601
        assert TimeFormat.from_config("RFC3339").kind is TimeFormatKind.RFC3339
        assert TimeFormat.from_config("rfc2822").kind is TimeFormatKind.RFC2822

    def test_from_config_custom_format(self):
        fmt = TimeFormat.from_config("%Y-%m-%d %H:%M:%S")
        assert fmt.kind is TimeFormatKind.CUSTOM
        assert fmt.pattern == "%Y-%m-%d %H:%M:%S"

    @pytest.mark.parametrize("value", ["[year]-[month]-[day]", "%Y-%Q", "%Y-%m-%"])
    def test_from_config_rejects_invalid_custom_format(self, value):
        with pytest.raises(ValueError):
            TimeFormat.from_config(value)

    def test_iso8601_offset_is_normalised_to_utc(self):
        assert parse_timestamp("2024-01-01T02:00:00+02:00", ISO) == utc(2024, 1, 1, 0, 0)

    def test_iso8601_keeps_sub_second_precision(self):
        parsed = parse_timestamp("2024-01-01T00:00:00.123456Z", ISO)
        assert parsed.microsecond == 123456

    def test_rfc3339(self):
        fmt = TimeFormat(TimeFormatKind.RFC3339)
        assert parse_timestamp("2024-01-01T00:00:00.5z", fmt) == utc(2024, 1, 1, 0, 0, 0, 500000)
        with pytest.raises(InvalidTimestamp):
            parse_timestamp("2024-01-01", fmt)

    def test_rfc2822(self):
        fmt = TimeFormat(TimeFormatKind.RFC2822)
        assert parse_timestamp("Mon, 01 Jan 2024 00:00:00 +0100", fmt) == utc(2023, 12, 31, 23, 0)
        with pytest.raises(InvalidTimestamp):
            parse_timestamp("2024-01-01T00:00:00Z", fmt)

    def test_custom_format_without_offset_is_utc(self):
        fmt = TimeFormat.from_config("%Y/%m/%d %H:%M:%S")
        assert parse_timestamp("2024/03/04 05:06:07", fmt) == utc(2024, 3, 4, 5, 6, 7)
        with pytest.raises(InvalidTimestamp):
            parse_timestamp("04.03.2024", fmt)

    @pytest.mark.parametrize("value", ["2024-01-01", "2024-01-01 00:00:00", "20240101"])
    def test_iso8601_requires_full_date_time(self, value):
        with pytest.raises(InvalidTimestamp):
            parse_timestamp(value, ISO)

    def test_iso8601_basic_format_is_accepted(self):
        assert parse_timestamp("20240101T120000Z", ISO) == utc(2024, 1, 1, 12, 0)
