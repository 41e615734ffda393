from __future__ import annotations

from dataclasses import dataclass, field

"""Sheet and Workbook domain models.

A Sheet is one named table of a decoded file after normalization: an ordered
header list and header-keyed records. A Workbook is the ordered collection of
Sheets of one file. Both are created once per parse and never changed
afterwards; preview filtering always builds new lists.
"""

__all__ = [
    "Record",
    "Sheet",
    "Workbook",
]

Record = dict[str, str]


@dataclass(frozen=True)
class Sheet:
    """One normalized sheet.

    ``headers`` keeps every header cell in column order (duplicates included),
    so ``column_count`` always equals ``len(headers)``. Records hold each
    distinct header once; with duplicate headers the right-most column wins.
    """
    name: str
    headers: tuple[str, ...] = ()
    records: tuple[Record, ...] = ()

    @property
    def row_count(self) -> int:
        return len(self.records)

    @property
    def column_count(self) -> int:
        return len(self.headers)

    @property
    def field_names(self) -> list[str]:
        """Distinct headers in first-appearance order (record key order)."""
        return list(dict.fromkeys(self.headers))

    @property
    def is_empty(self) -> bool:
        return not self.records


@dataclass(frozen=True)
class Workbook:
    """Ordered, non-empty collection of sheets decoded from one file."""
    sheets: tuple[Sheet, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.sheets)

    @property
    def sheet_names(self) -> list[str]:
        return [s.name for s in self.sheets]

    @property
    def total_rows(self) -> int:
        return sum(s.row_count for s in self.sheets)

    def sheet(self, index: int) -> Sheet:
        return self.sheets[index]

    def index_of(self, name: str) -> int:
        """Return position of sheet ``name``; raises KeyError if absent."""
        for i, s in enumerate(self.sheets):
            if s.name == name:
                return i
        raise KeyError(name)
