import pytest
from hypothesis import given
from hypothesis import strategies as st

from scpikit.expression import (
    ChannelEntry,
    ExpressionError,
    NumericEntry,
    channel_list,
    channel_list_entry,
    numeric_list,
    numeric_list_entry,
)

ints = st.integers(min_value=0, max_value=10_000)


def test_channel_list_example_from_parser_demo():
    entries = list(channel_list("(@9!2:3!4,5!6)"))
    assert entries == [
        ChannelEntry(True, (9, 2), (3, 4)),
        ChannelEntry(False, (5, 6), (5, 6)),
    ]
    assert [e.dimensions for e in entries] == [2, 2]


def test_channel_entry_past_end_is_none():
    assert channel_list_entry("(@1)", 1) is None


def test_single_channel_one_dimension():
    assert channel_list_entry("(@7)", 0) == ChannelEntry(False, (7,), (7,))


def test_channel_without_at_sign_fails():
    with pytest.raises(ExpressionError) as info:
        channel_list_entry("(1!2)", 0)
    assert info.value.code == -170


def test_channel_empty_list_fails():
    with pytest.raises(ExpressionError):
        channel_list_entry("(@)", 0)


def test_channel_dimension_mismatch_fails():
    with pytest.raises(ExpressionError):
        channel_list_entry("(@1!2:3)", 0)


def test_channel_dangling_bang_fails():
    with pytest.raises(ExpressionError):
        channel_list_entry("(@1!)", 0)


def test_channel_garbage_between_entries_fails():
    with pytest.raises(ExpressionError):
        channel_list_entry("(@1x2)", 1)


def test_not_an_expression_is_data_type_error():
    with pytest.raises(ExpressionError) as info:
        numeric_list_entry("1,2", 0)
    assert info.value.code == -104
    with pytest.raises(ExpressionError) as info:
        channel_list_entry("@1", 0)
    assert info.value.code == -104


def test_numeric_empty_list_has_no_entries():
    assert numeric_list_entry("()", 0) is None
    assert list(numeric_list("()")) == []


def test_numeric_range_and_values():
    assert list(numeric_list("(1,3:5)")) == [
        NumericEntry(False, 1, 1),
        NumericEntry(True, 3, 5),
    ]


def test_numeric_floats():
    assert numeric_list_entry("(1.5:2.5)", 0) == NumericEntry(True, 1.5, 2.5)


def test_numeric_exponent_parses_as_float():
    entry = numeric_list_entry("(2e3)", 0)
    assert entry.start == 2000.0
    assert isinstance(entry.start, float)


def test_numeric_missing_range_end_fails():
    with pytest.raises(ExpressionError) as info:
        numeric_list_entry("(1:)", 0)
    assert info.value.code == -170


def test_numeric_index_past_end_is_none():
    assert numeric_list_entry("(1,2)", 2) is None


def test_numeric_garbage_after_entry_fails_for_next_index():
    with pytest.raises(ExpressionError):
        numeric_list_entry("(1x)", 1)


@given(st.lists(st.integers(min_value=-10_000, max_value=10_000), max_size=10))
def test_numeric_values_round_trip(values):
    text = "(" + ",".join(str(v) for v in values) + ")"
    entries = list(numeric_list(text))
    assert [e.start for e in entries] == values
    assert not any(e.is_range for e in entries)


@given(st.lists(st.tuples(ints, ints), min_size=1, max_size=8))
def test_numeric_ranges_round_trip(pairs):
    text = "(" + ",".join(f"{a}:{b}" for a, b in pairs) + ")"
    assert list(numeric_list(text)) == [NumericEntry(True, a, b) for a, b in pairs]


@given(
    st.integers(min_value=1, max_value=4).flatmap(
        lambda dims: st.lists(
            st.tuples(
                st.tuples(*[ints] * dims),
                st.one_of(st.none(), st.tuples(*[ints] * dims)),
            ),
            min_size=1,
            max_size=6,
        )
    )
)
def test_channel_list_round_trip(items):
    parts = []
    expected = []
    for start, stop in items:
        spec = "!".join(str(v) for v in start)
        if stop is None:
            parts.append(spec)
            expected.append(ChannelEntry(False, start, start))
        else:
            parts.append(spec + ":" + "!".join(str(v) for v in stop))
            expected.append(ChannelEntry(True, start, stop))
    text = "(@" + ",".join(parts) + ")"
    assert list(channel_list(text)) == expected
    assert channel_list_entry(text, len(items)) is None


def test_expression_error_is_value_error():
    with pytest.raises(ValueError, match="Expression error"):
        channel_list_entry("(@,)", 0)