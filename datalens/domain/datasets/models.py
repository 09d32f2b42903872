from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


RawRow = Dict[str, Any]


@dataclass(frozen=True)
class Dataset:
    """Fully parsed upload: rows in file order plus the column vocabulary."""
    rows: List[RawRow]
    columns: List[str]
    source_name: Optional[str] = field(default=None, compare=False)

    @property
    def total_rows(self) -> int:
        return len(self.rows)

    @property
    def is_empty(self) -> bool:
        return not self.rows


def collect_columns(rows: List[RawRow]) -> List[str]:
    """Union of row keys in first-seen order."""
    seen: Dict[str, None] = {}
    for row in rows:
        for key in row:
            seen.setdefault(key, None)
    return list(seen)
