"""Tests for CLI date filter helpers."""

from datetime import date, datetime

import click
import pytest

from spendlens.cli.date_filters import (
    resolve_as_of_date,
    resolve_as_of_datetime,
    resolve_cli_date_range,
)

TODAY = date(2026, 2, 10)


def _ctx() -> click.Context:
    return click.Context(click.Command("test"))


def test_resolve_cli_date_range_rejects_period_with_start_end(capsys):
    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(
            _ctx(),
            start_date="2026-01-01",
            end_date=None,
            period="this-month",
        )

    assert excinfo.value.exit_code == 1
    err = capsys.readouterr().err
    assert "cannot be combined" in err


def test_resolve_cli_date_range_rejects_unknown_period(capsys):
    with pytest.raises(click.exceptions.Exit):
        resolve_cli_date_range(_ctx(), start_date=None, end_date=None, period="someday")

    assert "Unknown period" in capsys.readouterr().err


def test_resolve_cli_date_range_returns_period_range():
    start, end = resolve_cli_date_range(
        _ctx(), start_date=None, end_date=None, period="last-month", today=TODAY
    )

    assert start == date(2026, 1, 1)
    assert end == date(2026, 1, 31)


def test_resolve_cli_date_range_parses_start_and_end():
    start, end = resolve_cli_date_range(
        _ctx(),
        start_date="2026-01-05",
        end_date="yesterday",
        period=None,
        today=TODAY,
    )

    assert start == date(2026, 1, 5)
    assert end == date(2026, 2, 9)


def test_resolve_cli_date_range_open_ended():
    assert resolve_cli_date_range(_ctx(), start_date=None, end_date=None, period=None) == (
        None,
        None,
    )


def test_resolve_cli_date_range_invalid_end_date(capsys):
    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(_ctx(), start_date=None, end_date="nope", period=None)

    assert excinfo.value.exit_code == 1
    assert "Invalid end date" in capsys.readouterr().err


def test_resolve_as_of_date():
    assert resolve_as_of_date(_ctx(), "2026-02-10") == TODAY
    assert resolve_as_of_date(_ctx(), None) == date.today()


def test_resolve_as_of_date_invalid(capsys):
    with pytest.raises(click.exceptions.Exit):
        resolve_as_of_date(_ctx(), "whenever")

    assert "Invalid --as-of date" in capsys.readouterr().err


def test_resolve_as_of_datetime():
    assert resolve_as_of_datetime(_ctx(), None) is None
    assert resolve_as_of_datetime(_ctx(), "2026-02-10T08:00") == datetime(2026, 2, 10, 8, 0)
