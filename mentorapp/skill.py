"""
Skill entity and the row mapping shared by every read path.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Optional


@dataclass
class Skill:
    id: Optional[str] = None
    name: str = ""
    authorized: bool = False
    added: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Skill":
        """Build a Skill from a result row, parsing added and coercing authorized."""
        return cls(
            id=row["id"],
            name=row["name"],
            authorized=int(row["authorized"] or 0) == 1,
            added=parse_timestamp(row["added"]),
        )

    def to_row(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "authorized": 1 if self.authorized else 0,
            "added": self.added,
        }


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Accept a driver-returned datetime or an ISO-8601 string."""
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))
