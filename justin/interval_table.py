"""IntervalTable: Just-intonation interval presets keyed by prime limit."""

from dataclasses import dataclass

from justin.errors import InvalidLimitError

SEMITONES_PER_OCTAVE = 12
UNISON_RANK = SEMITONES_PER_OCTAVE - 1


@dataclass(frozen=True)
class IntervalEntry:
    """
    Just tuning of one chromatic interval class.

    Attributes:
        chromatic_class: Equal-tempered interval size in semitones (0-11).
        just_deviation:  Size of the justly tuned interval in semitones.
        rank:            Consonance rank (0-11). Higher ranks win when two
                         intervals compete to correct the same note.
    """

    chromatic_class: int
    just_deviation: float
    rank: int

    @property
    def cents_offset(self) -> float:
        """Distance of the just interval from equal temperament, in cents."""
        return (self.just_deviation - self.chromatic_class) * 100


@dataclass(frozen=True)
class IntervalTable:
    """
    The twelve interval entries of one tuning limit, indexed by chromatic class.

    Raises:
        ValueError: If the entries do not cover each class exactly once, or
                    the ranks are not a permutation of 0-11.
    """

    limit: int
    entries: tuple[IntervalEntry, ...]

    def __post_init__(self) -> None:
        classes = [entry.chromatic_class for entry in self.entries]
        if classes != list(range(SEMITONES_PER_OCTAVE)):
            raise ValueError(f"{self.limit}-limit table must list classes 0-11 in order.")
        ranks = sorted(entry.rank for entry in self.entries)
        if ranks != list(range(SEMITONES_PER_OCTAVE)):
            raise ValueError(f"{self.limit}-limit table ranks must be a permutation of 0-11.")

    def __getitem__(self, chromatic_class: int) -> IntervalEntry:
        return self.entries[chromatic_class]

    def __len__(self) -> int:
        return len(self.entries)

    def entry_for(self, interval: int) -> IntervalEntry:
        """Return the entry for any (possibly compound) interval in semitones."""
        return self.entries[interval % SEMITONES_PER_OCTAVE]


def _build_table(limit: int, pairs: list[tuple[float, int]]) -> IntervalTable:
    entries = tuple(
        IntervalEntry(chromatic_class=i, just_deviation=deviation, rank=rank)
        for i, (deviation, rank) in enumerate(pairs)
    )
    return IntervalTable(limit=limit, entries=entries)


# ── Presets ──────────────────────────────────────────────────────────────────
# (just size in semitones, rank) for classes 0..11. Ranks roughly follow the
# harmonic series and were tuned by ear rather than derived.

FIVE_LIMIT = _build_table(5, [
    (0.0, 11), (1.12, 1), (2.04, 6), (3.16, 10), (3.86, 2), (4.98, 9),
    (5.9, 3), (7.02, 8), (8.14, 4), (8.84, 5), (9.96, 7), (10.88, 0),
])

SEVEN_LIMIT = _build_table(7, [
    (0.0, 11), (1.12, 1), (2.04, 6), (3.16, 9), (3.86, 3), (4.98, 2),
    (5.9, 10), (7.02, 8), (8.14, 4), (8.84, 5), (9.69, 7), (10.88, 0),
])

ELEVEN_LIMIT = _build_table(11, [
    (0.0, 11), (1.12, 1), (2.04, 9), (3.16, 3), (3.86, 2), (4.98, 6),
    (5.51, 10), (7.02, 8), (8.14, 4), (8.84, 5), (9.69, 7), (10.88, 0),
])

THIRTEEN_LIMIT = _build_table(13, [
    (0.0, 11), (1.12, 1), (2.04, 9), (3.16, 3), (3.86, 2), (4.98, 6),
    (5.51, 10), (7.02, 8), (8.40, 4), (8.84, 5), (9.69, 7), (10.88, 0),
])

TABLES: dict[int, IntervalTable] = {
    table.limit: table
    for table in (FIVE_LIMIT, SEVEN_LIMIT, ELEVEN_LIMIT, THIRTEEN_LIMIT)
}


def available_limits() -> list[int]:
    """Return the supported prime limits in ascending order."""
    return sorted(TABLES)


def select_table(limit: object) -> IntervalTable:
    """
    Look up the preset table for a prime limit.

    Args:
        limit: One of 5, 7, 11 or 13.

    Returns:
        The matching IntervalTable.

    Raises:
        InvalidLimitError: For any other value, including non-integers.
    """
    if not isinstance(limit, int) or limit not in TABLES:
        raise InvalidLimitError(limit, available_limits())
    return TABLES[limit]
