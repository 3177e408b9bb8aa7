"""Tests for document statistics."""

from json_form_builder.services.stats import compute_stats, count_keys
from json_form_builder.services.validator import validate


def stats_for(text):
    return compute_stats(text, validate(text))


def test_nested_keys_are_counted():
    stats = stats_for('{"a": 1, "b": {"c": 2, "d": 3}}')
    assert stats.key_count == 4


def test_keys_inside_arrays_are_counted():
    assert count_keys([{"a": 1}, {"b": {"c": None}}]) == 3


def test_scalars_have_no_keys():
    assert count_keys("text") == 0
    assert count_keys(None) == 0


def test_line_count_counts_newline_segments():
    text = '{\n  "a": 1\n}'
    assert stats_for(text).line_count == 3


def test_trailing_newline_adds_a_segment():
    assert stats_for('{"a": 1}\n').line_count == 2


def test_char_count_uses_compact_form():
    stats = stats_for('{\n  "a": 1\n}')
    assert stats.char_count == len('{"a":1}')


def test_null_document():
    stats = stats_for("null")
    assert stats.line_count == 1
    assert stats.char_count == 4
    assert stats.key_count == 0


def test_invalid_and_empty_documents_have_no_stats():
    assert stats_for('{"a":') is None
    assert stats_for("") is None


def test_char_count_prints_integral_floats_as_integers():
    assert stats_for('{"a": 1.0, "b": 1e2}').char_count == 15
