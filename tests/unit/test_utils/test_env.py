"""Unit tests for the environment variable readers."""

import logging
from datetime import date, timedelta

import pytest

from dqkit.utils import env


def test_get_str(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DQKIT_TEST_STR", "value")
    monkeypatch.delenv("DQKIT_TEST_MISSING", raising=False)

    assert env.get_str("DQKIT_TEST_STR", "fallback") == "value"
    assert env.get_str("DQKIT_TEST_MISSING", "fallback") == "fallback"


@pytest.mark.parametrize(("raw", "expected"), [("42", 42), ("-3", -3), ("abc", 7), ("", 7), ("1.5", 7)])
def test_get_int(monkeypatch: pytest.MonkeyPatch, raw: str, expected: int) -> None:
    monkeypatch.setenv("DQKIT_TEST_INT", raw)
    assert env.get_int("DQKIT_TEST_INT", 7) == expected


def test_get_int_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DQKIT_TEST_INT", raising=False)
    assert env.get_int("DQKIT_TEST_INT", 7) == 7


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("1", True),
        ("true", True),
        ("TRUE", True),
        ("yes", True),
        ("on", True),
        ("t", True),
        ("0", False),
        ("false", False),
        ("No", False),
        ("off", False),
        ("maybe", None),
    ],
)
def test_get_bool(monkeypatch: pytest.MonkeyPatch, raw: str, expected: "bool | None") -> None:
    monkeypatch.setenv("DQKIT_TEST_BOOL", raw)
    for fallback in (True, False):
        assert env.get_bool("DQKIT_TEST_BOOL", fallback) is (fallback if expected is None else expected)


def test_invalid_value_logs_warning(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
    monkeypatch.setenv("DQKIT_TEST_INT", "not-a-number")

    with caplog.at_level(logging.WARNING, logger="dqkit"):
        env.get_int("DQKIT_TEST_INT", 1)

    assert "DQKIT_TEST_INT" in caplog.text


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("0", timedelta(0)),
        ("90s", timedelta(seconds=90)),
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("2h45m10s", timedelta(hours=2, minutes=45, seconds=10)),
        ("1.5h", timedelta(hours=1, minutes=30)),
        ("300ms", timedelta(milliseconds=300)),
        ("250us", timedelta(microseconds=250)),
        ("2000ns", timedelta(microseconds=2)),
        ("-1m30s", -timedelta(minutes=1, seconds=30)),
        ("+5m", timedelta(minutes=5)),
    ],
)
def test_parse_duration(raw: str, expected: timedelta) -> None:
    assert env.parse_duration(raw) == expected


@pytest.mark.parametrize("raw", ["", "10", "h", "5 m", "1x", "1h-5m", "-"])
def test_parse_duration_invalid(raw: str) -> None:
    assert env.parse_duration(raw) is None


def test_get_duration(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DQKIT_TEST_TTL", "5m")
    assert env.get_duration("DQKIT_TEST_TTL", timedelta(seconds=1)) == timedelta(minutes=5)

    monkeypatch.setenv("DQKIT_TEST_TTL", "five minutes")
    assert env.get_duration("DQKIT_TEST_TTL", timedelta(seconds=1)) == timedelta(seconds=1)


def test_get_date(monkeypatch: pytest.MonkeyPatch) -> None:
    fallback = date(2000, 1, 1)

    monkeypatch.setenv("DQKIT_TEST_DATE", "2024-02-29")
    assert env.get_date("DQKIT_TEST_DATE", fallback) == date(2024, 2, 29)

    monkeypatch.setenv("DQKIT_TEST_DATE", "2023-02-29")
    assert env.get_date("DQKIT_TEST_DATE", fallback) == fallback

    monkeypatch.delenv("DQKIT_TEST_DATE")
    assert env.get_date("DQKIT_TEST_DATE", fallback) == fallback
