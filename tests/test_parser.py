from __future__ import annotations

import pytest

from croncore import (
    DAY_OF_MONTH,
    DAY_OF_WEEK,
    HOUR,
    MINUTE,
    MONTH,
    SECOND,
    CronError,
    FieldKind,
    parse,
    parse_field,
)

# ===========================================================================
# Field grammar
# ===========================================================================


class TestParseField:
    def test_single_value(self) -> None:
        c = parse_field("5", MINUTE)
        assert c.values == {5}
        assert not c.wildcard

    def test_list_is_unioned(self) -> None:
        assert parse_field("1,5,1,3", HOUR).sorted_values == (1, 3, 5)

    def test_range(self) -> None:
        assert parse_field("9-17", HOUR).sorted_values == tuple(range(9, 18))

    def test_stepped_range(self) -> None:
        assert parse_field("1-10/3", DAY_OF_MONTH).sorted_values == (1, 4, 7, 10)

    def test_start_with_step_runs_to_maximum(self) -> None:
        assert parse_field("50/5", SECOND).sorted_values == (50, 55)

    def test_star_is_wildcard(self) -> None:
        c = parse_field("*", MINUTE)
        assert c.wildcard
        assert len(c.values) == 60

    def test_star_step_one_is_wildcard(self) -> None:
        assert parse_field("*/1", HOUR).wildcard

    def test_star_step_two_is_restricted(self) -> None:
        c = parse_field("*/2", HOUR)
        assert not c.wildcard
        assert c.sorted_values == tuple(range(0, 24, 2))

    def test_full_range_is_restricted(self) -> None:
        c = parse_field("1-31", DAY_OF_MONTH)
        assert not c.wildcard
        assert len(c.values) == 31

    def test_question_mark_in_day_fields(self) -> None:
        assert parse_field("?", DAY_OF_MONTH).wildcard
        assert parse_field("?", DAY_OF_WEEK).wildcard

    def test_question_mark_elsewhere(self) -> None:
        with pytest.raises(CronError) as excinfo:
            parse_field("?", MINUTE)
        assert excinfo.value.kind == "malformed_token"

    def test_month_aliases(self) -> None:
        assert parse_field("jan,MAR,December", MONTH).sorted_values == (1, 3, 12)
        assert parse_field("JAN-MAR", MONTH).sorted_values == (1, 2, 3)

    def test_weekday_aliases(self) -> None:
        assert parse_field("MON-FRI", DAY_OF_WEEK).sorted_values == (1, 2, 3, 4, 5)
        assert parse_field("sunday", DAY_OF_WEEK).values == {0}

    def test_weekday_seven_is_sunday(self) -> None:
        assert parse_field("7", DAY_OF_WEEK).values == {0}
        assert parse_field("5-7", DAY_OF_WEEK).sorted_values == (0, 5, 6)

    def test_star_weekday_has_no_seven(self) -> None:
        assert parse_field("*", DAY_OF_WEEK).sorted_values == tuple(range(7))

    def test_field_index(self) -> None:
        assert FieldKind.SECOND.index == 0
        assert FieldKind.DAY_OF_WEEK.index == 5
        assert MONTH.index == 4


# ===========================================================================
# Calendar markers
# ===========================================================================


class TestMarkers:
    def test_last_day(self) -> None:
        c = parse_field("L", DAY_OF_MONTH)
        assert c.last_day
        assert not c.values
        assert c.has_markers

    def test_last_weekday(self) -> None:
        assert parse_field("LW", DAY_OF_MONTH).last_weekday

    def test_nearest_weekday(self) -> None:
        assert parse_field("15W", DAY_OF_MONTH).nearest_weekday == {15}

    def test_markers_mix_with_values(self) -> None:
        c = parse_field("1,L", DAY_OF_MONTH)
        assert c.values == {1}
        assert c.last_day
        assert not c.wildcard

    def test_last_of_month_weekday(self) -> None:
        assert parse_field("5L", DAY_OF_WEEK).last_of_month == {5}
        assert parse_field("FRIL", DAY_OF_WEEK).last_of_month == {5}

    def test_nth_weekday(self) -> None:
        assert parse_field("5#3", DAY_OF_WEEK).nth_of_month == {(5, 3)}
        assert parse_field("7#1", DAY_OF_WEEK).nth_of_month == {(0, 1)}

    def test_nth_out_of_range(self) -> None:
        with pytest.raises(CronError) as excinfo:
            parse_field("5#6", DAY_OF_WEEK)
        assert excinfo.value.kind == "out_of_domain"

    def test_marker_outside_day_fields(self) -> None:
        with pytest.raises(CronError) as excinfo:
            parse_field("L", MINUTE)
        assert excinfo.value.kind == "unknown_alias"

    def test_nearest_weekday_out_of_domain(self) -> None:
        with pytest.raises(CronError) as excinfo:
            parse_field("32W", DAY_OF_MONTH)
        assert excinfo.value.kind == "out_of_domain"


# ===========================================================================
# Field errors
# ===========================================================================


class TestFieldErrors:
    @pytest.mark.parametrize(
        "text,domain,kind",
        [
            ("60", MINUTE, "out_of_domain"),
            ("24", HOUR, "out_of_domain"),
            ("0", DAY_OF_MONTH, "out_of_domain"),
            ("13", MONTH, "out_of_domain"),
            ("8", DAY_OF_WEEK, "out_of_domain"),
            ("5-1", HOUR, "inverted_range"),
            ("*/0", MINUTE, "non_positive_step"),
            ("*/-2", MINUTE, "non_positive_step"),
            ("*/x", MINUTE, "malformed_token"),
            ("1/2/3", MINUTE, "malformed_token"),
            ("1,,2", MINUTE, "malformed_token"),
            ("", MINUTE, "malformed_token"),
            ("1.5", MINUTE, "malformed_token"),
            ("FOO", MONTH, "unknown_alias"),
            ("MON", MONTH, "unknown_alias"),
            ("JAN", MINUTE, "unknown_alias"),
        ],
    )
    def test_rejected(self, text: str, domain: object, kind: str) -> None:
        with pytest.raises(CronError) as excinfo:
            parse_field(text, domain)  # type: ignore[arg-type]
        assert excinfo.value.kind == kind
        assert excinfo.value.field_index == domain.index  # type: ignore[attr-defined]


# ===========================================================================
# Whole patterns
# ===========================================================================


class TestParse:
    def test_five_fields_get_zero_seconds(self) -> None:
        p = parse("* * * * *")
        assert not p.has_seconds
        assert p.seconds.values == {0}

    def test_six_fields(self) -> None:
        p = parse("*/20 * * * * *")
        assert p.has_seconds
        assert p.seconds.sorted_values == (0, 20, 40)

    def test_surrounding_whitespace(self) -> None:
        assert parse("  0  12 *  * *\t").canonical == "0 12 * * *"

    def test_shortcuts(self) -> None:
        assert parse("@yearly").canonical == "0 0 1 1 *"
        assert parse("@ANNUALLY").canonical == "0 0 1 1 *"
        assert parse("@weekly").canonical == "0 0 * * 0"
        assert parse("@midnight").canonical == "0 0 * * *"

    def test_unknown_shortcut(self) -> None:
        with pytest.raises(CronError) as excinfo:
            parse("@fortnightly")
        assert excinfo.value.kind == "field_count"

    @pytest.mark.parametrize("text", ["", "* * * *", "* * * * * * *"])
    def test_wrong_field_count(self, text: str) -> None:
        with pytest.raises(CronError) as excinfo:
            parse(text)
        assert excinfo.value.kind == "field_count"
        assert excinfo.value.field_index is None

    def test_error_carries_input(self) -> None:
        with pytest.raises(CronError) as excinfo:
            parse("0 25 * * *")
        assert excinfo.value.input_text == "0 25 * * *"
        assert excinfo.value.field_index == 2

    def test_dom_and_dow_flag(self) -> None:
        assert parse("0 0 13 * 5", dom_and_dow=True).dom_and_dow
        assert not parse("0 0 13 * 5").dom_and_dow

    def test_source_does_not_affect_equality(self) -> None:
        assert parse("0 0 * * SUN") == parse("0 0 * * 0")
