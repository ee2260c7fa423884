from __future__ import annotations

from dataclasses import dataclass, field

PROMO_HUNTER_STATUS = "Promo hunter"


@dataclass(frozen=True)
class Match:
    row_number: int
    reason: str
    source: str  # "customer" or "companion"
    branch: str = ""
    appointment_text: str = ""


@dataclass(frozen=True)
class MatchResult:
    status: str
    match_reason: str = ""
    matched_source: str = ""
    matched_row: str = ""
    matches: tuple[Match, ...] = field(default_factory=tuple)

    @property
    def match_count(self) -> int:
        return len(self.matches)
