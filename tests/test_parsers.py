"""Tests pour les fonctions de parsing."""

from datetime import datetime, timezone

import pytest

from lycans.data.parsers import (
    coerce_float,
    coerce_int,
    coerce_str,
    duration_seconds,
    format_display_date,
    parse_end_timing_day,
    parse_iso_utc,
    parse_timing_code,
    try_parse_iso_utc,
)


class TestParseIsoUtc:
    """Tests pour parse_iso_utc."""

    def test_zulu_with_millis(self):
        assert parse_iso_utc("2024-10-05T20:18:01.293Z") == datetime(
            2024, 10, 5, 20, 18, 1, 293000, tzinfo=timezone.utc
        )

    def test_offset_converted_to_utc(self):
        assert parse_iso_utc("2024-10-05T22:00:00+02:00") == datetime(2024, 10, 5, 20, 0, tzinfo=timezone.utc)

    def test_naive_assumed_utc(self):
        assert parse_iso_utc("2024-10-05T20:00:00").tzinfo == timezone.utc

    def test_invalid_raises(self):
        with pytest.raises(ValueError):
            parse_iso_utc("pas une date")

    def test_tolerant_variant(self):
        assert try_parse_iso_utc("pas une date") is None
        assert try_parse_iso_utc(None) is None
        assert try_parse_iso_utc("") is None


class TestTimingCodes:
    """Tests pour les codes de timing."""

    @pytest.mark.parametrize("code, expected", [
        ("N2", ("N", 2)),
        ("j3", ("J", 3)),
        ("M1", ("M", 1)),
        ("U4", ("U", 4)),
        ("Nuit 2 --> N2", ("N", 2)),
        ("Jour 6", ("J", 6)),
    ])
    def test_parse(self, code, expected):
        assert parse_timing_code(code) == expected

    @pytest.mark.parametrize("code", [None, "", "Matin", "X7"])
    def test_unparseable(self, code):
        assert parse_timing_code(code) is None

    @pytest.mark.parametrize("end_timing, expected", [
        ("Nuit 5", 5),
        ("Jour 6", 6),
        ("N5", 5),
        ("M3", 3),
        ("C2", 2),
        (None, None),
        ("fin", None),
    ])
    def test_end_timing_day(self, end_timing, expected):
        assert parse_end_timing_day(end_timing) == expected


class TestDisplayDate:
    def test_paris_summer(self):
        assert format_display_date("2024-07-14T22:30:00Z") == "15/07/2024"

    def test_paris_winter(self):
        assert format_display_date("2024-01-10T22:30:00Z") == "10/01/2024"

    def test_explicit_timezone(self):
        assert format_display_date("2024-07-14T22:30:00Z", "UTC") == "14/07/2024"

    def test_unreadable(self):
        assert format_display_date("demain") is None

    def test_duration(self):
        assert duration_seconds("2024-10-05T18:30:00Z", "2024-10-05T19:00:30Z") == 1830
        assert duration_seconds("2024-10-05T18:30:00Z", None) is None


class TestCoercion:
    def test_int(self):
        assert coerce_int("12") == 12
        assert coerce_int(3.9) == 3
        assert coerce_int("abc") is None
        assert coerce_int(True) is None

    def test_float(self):
        assert coerce_float("1.5") == pytest.approx(1.5)
        assert coerce_float(None) is None

    def test_str(self):
        assert coerce_str("  Ponce ") == "Ponce"
        assert coerce_str("   ") is None
        assert coerce_str(5) == "5"
