from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple


def parse_range(value: str) -> Tuple[int, int]:
    """Parse ``"first:last"`` where either side may be left out.

    ``"4:16"`` -> (4, 16), ``"4:"`` -> (4, 0), ``":16"`` -> (0, 16) and a bare
    ``"7"`` -> (7, 0). Zero means the range is open on that side.
    """
    first_text, _, last_text = value.strip().partition(":")
    try:
        first = int(first_text) if first_text.strip() else 0
        last = int(last_text) if last_text.strip() else 0
    except ValueError as exc:
        raise ValueError(f"invalid line range {value!r}, expected <first>:<last>") from exc
    return first, last


@dataclass
class LineFilter:
    first: int = 0
    last: int = 0
    search: Optional[str] = None

    @classmethod
    def from_range(cls, value: Optional[str], search: Optional[str] = None) -> "LineFilter":
        if not value:
            return cls(search=search)
        first, last = parse_range(value)
        return cls(first=first, last=last, search=search)

    def accepts(self, line_num: int, text: str) -> bool:
        if self.first > 0 and line_num < self.first:
            return False
        if self.last > 0 and line_num > self.last:
            return False
        return self.search is None or self.search in text

    def past_range(self, line_num: int) -> bool:
        return self.last > 0 and line_num > self.last
