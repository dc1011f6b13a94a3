"""Unit tests for the interval table presets."""

import pytest

from justin.errors import ConfigErrorKind, InvalidLimitError
from justin.interval_table import (
    FIVE_LIMIT,
    TABLES,
    THIRTEEN_LIMIT,
    IntervalEntry,
    IntervalTable,
    available_limits,
    select_table,
)


def test_available_limits() -> None:
    assert available_limits() == [5, 7, 11, 13]


@pytest.mark.parametrize("limit", [5, 7, 11, 13])
def test_ranks_are_a_permutation(limit: int) -> None:
    table = select_table(limit)
    assert len(table) == 12
    assert sorted(entry.rank for entry in table.entries) == list(range(12))


@pytest.mark.parametrize("limit", [5, 7, 11, 13])
def test_unison_is_untouched_and_most_consonant(limit: int) -> None:
    unison = select_table(limit)[0]
    assert unison.just_deviation == 0
    assert unison.rank == 11


def test_five_limit_major_third() -> None:
    third = FIVE_LIMIT[4]
    assert third.just_deviation == pytest.approx(3.86)
    assert third.rank == 2
    assert third.cents_offset == pytest.approx(-14.0)


def test_thirteen_limit_minor_sixth_differs_from_five_limit() -> None:
    assert FIVE_LIMIT[8].just_deviation == pytest.approx(8.14)
    assert THIRTEEN_LIMIT[8].just_deviation == pytest.approx(8.40)


def test_entry_for_folds_compound_intervals() -> None:
    assert FIVE_LIMIT.entry_for(16) is FIVE_LIMIT[4]
    assert FIVE_LIMIT.entry_for(24) is FIVE_LIMIT[0]


@pytest.mark.parametrize("limit", [9, 0, -5, "5", 5.0, None])
def test_select_table_rejects_unknown_limits(limit: object) -> None:
    with pytest.raises(InvalidLimitError) as excinfo:
        select_table(limit)
    assert excinfo.value.kind is ConfigErrorKind.INVALID_LIMIT
    assert "5, 7, 11, 13" in str(excinfo.value)


def test_select_table_returns_presets() -> None:
    for limit, table in TABLES.items():
        assert select_table(limit) is table
        assert table.limit == limit


def test_table_rejects_duplicate_ranks() -> None:
    entries = tuple(IntervalEntry(i, float(i), 0) for i in range(12))
    with pytest.raises(ValueError):
        IntervalTable(limit=3, entries=entries)


def test_table_rejects_missing_classes() -> None:
    entries = tuple(IntervalEntry(i, float(i), i) for i in range(11))
    with pytest.raises(ValueError):
        IntervalTable(limit=3, entries=entries)
