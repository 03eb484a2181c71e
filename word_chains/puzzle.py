"""A generated puzzle: the minimal chain plus its endpoints."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Puzzle:
    chain: tuple[str, ...]
    start: str
    end: str

    @classmethod
    def from_chain(cls, chain: list[str] | tuple[str, ...]) -> "Puzzle":
        if not chain:
            raise ValueError("chain must not be empty")
        return cls(tuple(chain), chain[0], chain[-1])

    @property
    def steps(self) -> int:
        """Minimum number of letter changes needed."""
        return len(self.chain) - 1

    @property
    def word_length(self) -> int:
        return len(self.start)

    def to_dict(self) -> dict[str, Any]:
        return {"chain": list(self.chain), "start": self.start, "end": self.end}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Puzzle":
        chain = tuple(data.get("chain") or ())
        return cls(chain, data.get("start") or (chain[0] if chain else ""), data.get("end") or (chain[-1] if chain else ""))
