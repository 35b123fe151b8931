from __future__ import annotations

from province_race.engine.tween import (
    LabelTween,
    LabelTweener,
    format_number,
    parse_displayed_number,
)


def test_format_number_groups_thousands_and_rounds_half_away_from_zero() -> None:
    assert format_number(12345.6) == "12,346"
    assert format_number(0.5) == "1"
    assert format_number(-2.5) == "-3"
    assert format_number(0) == "0"
    assert format_number(1_000_000) == "1,000,000"


def test_parse_displayed_number_reads_formatted_text() -> None:
    assert parse_displayed_number("12,346") == 12346.0
    assert parse_displayed_number(" 40 ") == 40.0
    assert parse_displayed_number("") == 0.0
    assert parse_displayed_number(None) == 0.0
    assert parse_displayed_number("n/a") == 0.0
    assert parse_displayed_number("nan") == 0.0


def test_label_tween_interpolates_and_formats() -> None:
    tween = LabelTween(start=5.0, target=40.0)

    assert tween.text_at(0.0) == "5"
    assert tween.text_at(0.5) == "23"
    assert tween.text_at(1.0) == "40"


def test_tweener_starts_from_the_displayed_text() -> None:
    tweener = LabelTweener()

    assert tweener.begin("1,000", 2000).value_at(0.5) == 1500.0
    assert tweener.begin("garbage", 10).start == 0.0
