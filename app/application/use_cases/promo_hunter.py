from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from app.application.utils.record_parser import (
    normalize_companion_name,
    normalize_email,
    normalize_name,
    normalize_phone,
    normalize_social,
)
from app.application.utils.status import DEFAULT_STATUS
from app.domain.entities.booking import Booking
from app.domain.entities.match_result import PROMO_HUNTER_STATUS, Match, MatchResult

REPORT_ALL = "all"
REPORT_FIRST = "first"

NAME_MATCH = "Customer Name Match"
EMAIL_MATCH = "Email Match"
PHONE_MATCH = "Phone Match"
SOCIAL_MATCH = "Social Media Match"
COMPANION_WAS_CUSTOMER = "Companion Match (was customer)"
PREVIOUSLY_COMPANION = "Previously Companion"


@dataclass(frozen=True)
class MatchCandidate:
    first_name: str
    last_name: str
    email: str = ""
    phone: str = ""
    social_media: str = ""
    companion_first_name: str = ""
    companion_last_name: str = ""


class PromoHunterMatcher:
    """Flags a new booking whose customer already appears in the booking history."""

    def __init__(self, reporting: str = REPORT_ALL) -> None:
        if reporting not in (REPORT_ALL, REPORT_FIRST):
            raise ValueError(f"Unknown match reporting mode: {reporting!r}")
        self._reporting = reporting
        self._logger = logging.getLogger(__name__)

    def match(
        self,
        candidate: MatchCandidate,
        history: Iterable[Booking],
        default_status: str = DEFAULT_STATUS,
    ) -> MatchResult:
        name = normalize_name(candidate.first_name, candidate.last_name)
        email = normalize_email(candidate.email)
        phone = normalize_phone(candidate.phone)
        social = normalize_social(candidate.social_media)
        companion = normalize_companion_name(candidate.companion_first_name, candidate.companion_last_name)

        matches: list[Match] = []
        for booking in history:
            found = self._first_predicate(booking, name, email, phone, social, companion)
            if found is None:
                continue
            reason, source = found
            matches.append(
                Match(
                    row_number=booking.row_number,
                    reason=reason,
                    source=source,
                    branch=booking.branch,
                    appointment_text=booking.appointment_text,
                )
            )

        if not matches:
            return MatchResult(status=default_status or DEFAULT_STATUS)

        reported = matches if self._reporting == REPORT_ALL else matches[:1]
        self._logger.info(
            "Promo hunter match",
            extra={"reason": reported[0].reason, "row_number": reported[0].row_number, "matches": len(matches)},
        )
        return MatchResult(
            status=PROMO_HUNTER_STATUS,
            match_reason=", ".join(m.reason for m in reported),
            matched_source=", ".join(f"{m.source} ({m.branch})" for m in reported),
            matched_row=", ".join(f"Row {m.row_number}" for m in reported),
            matches=tuple(matches),
        )

    @staticmethod
    def _first_predicate(
        booking: Booking,
        name: str,
        email: str,
        phone: str,
        social: str,
        companion: str,
    ) -> tuple[str, str] | None:
        # priority order; empty never equals empty
        existing_name = normalize_name(booking.first_name, booking.last_name)
        if name and existing_name and name == existing_name:
            return NAME_MATCH, "customer"
        existing_email = normalize_email(booking.email)
        if email and existing_email and email == existing_email:
            return EMAIL_MATCH, "customer"
        existing_phone = normalize_phone(booking.phone)
        if phone and existing_phone and phone == existing_phone:
            return PHONE_MATCH, "customer"
        existing_social = normalize_social(booking.social_media)
        if social and existing_social and social == existing_social:
            return SOCIAL_MATCH, "customer"
        if companion and existing_name and companion == existing_name:
            return COMPANION_WAS_CUSTOMER, "companion"
        existing_companion = normalize_companion_name(booking.companion_first_name, booking.companion_last_name)
        if name and existing_companion and name == existing_companion:
            return PREVIOUSLY_COMPANION, "companion"
        return None
