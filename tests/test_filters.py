import pytest

from textlines.core.filters import LineFilter, parse_range


@pytest.mark.parametrize(
    "value, expected",
    [("4:16", (4, 16)), ("4:", (4, 0)), (":16", (0, 16)), ("7", (7, 0)), (":", (0, 0))],
)
def test_parse_range(value, expected):
    assert parse_range(value) == expected


def test_parse_range_rejects_garbage():
    with pytest.raises(ValueError):
        parse_range("four:16")


def test_range_and_search_combine():
    f = LineFilter.from_range("2:3", search="dog")
    assert not f.accepts(1, "dog")
    assert f.accepts(2, "hot dog")
    assert not f.accepts(3, "cat")
    assert not f.accepts(4, "dog")
    assert f.past_range(4)
    assert not f.past_range(3)


def test_open_filter_accepts_everything():
    f = LineFilter.from_range(None)
    assert f.accepts(1, "")
    assert f.accepts(10_000, "anything")
    assert not f.past_range(10_000)
