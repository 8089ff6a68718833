import pytest

from structgantt.columns import MissingColumnError, classify_columns, row_color
from structgantt.table_models import ColorField, Column, ColumnRefs, DateField, TextField


def _text(name):
    return Column(name, TextField())


def _date(name, with_time=False):
    return Column(name, DateField(with_time=with_time))


def _color(name, default="#ffffff"):
    return Column(name, ColorField(default=default))


def test_first_date_is_start_second_is_end():
    refs = classify_columns([_text("Task"), _date("Start"), _text("Owner"), _date("End", with_time=True)])

    assert refs == ColumnRefs(start="Start", end="End", label="Task", title="Owner")


def test_extra_date_columns_are_ignored():
    refs = classify_columns([_date("Start"), _date("End"), _date("Reviewed"), _text("Task")])

    assert refs.start == "Start"
    assert refs.end == "End"


def test_title_falls_back_to_label():
    refs = classify_columns([_date("Start"), _date("End"), _text("Task")])

    assert refs.label == "Task"
    assert refs.title == "Task"


def test_third_text_column_is_neither_label_nor_title():
    refs = classify_columns([_text("Task"), _text("Summary"), _text("Notes"), _date("Start"), _date("End")])

    assert (refs.label, refs.title) == ("Task", "Summary")


def test_last_color_column_wins():
    refs = classify_columns([_color("Status"), _text("Task"), _date("Start"), _date("End"), _color("Team")])

    assert refs.color == "Team"


@pytest.mark.parametrize(
    "columns",
    [
        [_text("Task")],
        [_text("Task"), _date("Start")],
        [_text("Task"), _color("Team"), _date("Start")],
    ],
)
def test_missing_date_columns_raise(columns):
    with pytest.raises(MissingColumnError, match="Not enough Date columns"):
        classify_columns(columns)


def test_missing_label_raises():
    with pytest.raises(MissingColumnError, match="No label column"):
        classify_columns([_date("Start"), _date("End"), _color("Team")])


def test_row_color_ignores_default_and_empty_values():
    team = _color("Team", default="#eeeeee")

    assert row_color(team, "#ff0000") == "#ff0000"
    assert row_color(team, "#eeeeee") is None
    assert row_color(team, None) is None
    assert row_color(None, "#ff0000") is None
    assert row_color(_text("Task"), "#ff0000") is None
