"""
Tests for the duplicate-customer (promo hunter) check run on new bookings.
"""

from __future__ import annotations

import pytest

from app.application.use_cases.promo_hunter import (
    COMPANION_WAS_CUSTOMER,
    EMAIL_MATCH,
    NAME_MATCH,
    PHONE_MATCH,
    PREVIOUSLY_COMPANION,
    REPORT_FIRST,
    SOCIAL_MATCH,
    MatchCandidate,
    PromoHunterMatcher,
)


def test_email_only_match(make_booking):
    history = [make_booking(2, first_name="Maria", last_name="Santos", email="m@x.com")]
    candidate = MatchCandidate(first_name="Ana", last_name="Cruz", email=" M@X.com ")

    result = PromoHunterMatcher().match(candidate, history)

    assert result.status == "Promo hunter"
    assert result.match_reason == EMAIL_MATCH
    assert result.matched_source == "customer (FELIZ)"
    assert result.matched_row == "Row 2"
    assert result.match_count == 1


def test_no_overlap_keeps_requested_status(make_booking):
    history = [make_booking(2, first_name="Maria", last_name="Santos", email="m@x.com", phone="0917 111 2222")]
    candidate = MatchCandidate(first_name="Ana", last_name="Cruz", email="ana@x.com", phone="0918 333 4444")

    result = PromoHunterMatcher().match(candidate, history)
    assert result.status == "Scheduled"
    assert result.match_count == 0
    assert result.match_reason == ""

    result = PromoHunterMatcher().match(candidate, history, default_status="Arrived & bought")
    assert result.status == "Arrived & bought"


def test_blank_fields_never_match(make_booking):
    """Two empty emails or phones are not a match."""
    history = [make_booking(2, first_name="Maria", last_name="Santos", email="", phone="", social_media="")]
    candidate = MatchCandidate(first_name="Ana", last_name="Cruz")

    assert PromoHunterMatcher().match(candidate, history).match_count == 0


def test_phone_match_ignores_formatting(make_booking):
    history = [make_booking(3, first_name="Maria", last_name="Santos", phone="0917-555-0101")]
    candidate = MatchCandidate(first_name="Ana", last_name="Cruz", phone="0917 555 0101")

    assert PromoHunterMatcher().match(candidate, history).matched_row == "Row 3"


def test_companion_was_customer(make_booking):
    history = [make_booking(2, first_name="Maria", last_name="Santos", branch="ESTANCIA")]
    candidate = MatchCandidate(
        first_name="Ana",
        last_name="Cruz",
        companion_first_name="maria",
        companion_last_name="SANTOS",
    )

    result = PromoHunterMatcher().match(candidate, history)
    assert result.match_reason == COMPANION_WAS_CUSTOMER
    assert result.matched_source == "companion (ESTANCIA)"


def test_previously_companion(make_booking):
    history = [
        make_booking(2, first_name="Ana", last_name="Reyes", companion_first_name="Lia", companion_last_name="Gomez")
    ]
    candidate = MatchCandidate(first_name="Lia", last_name="Gomez")

    assert PromoHunterMatcher().match(candidate, history).match_reason == PREVIOUSLY_COMPANION


def test_one_reason_per_historical_row(make_booking):
    """Name is checked first; a row matching on several fields reports only the name."""
    history = [make_booking(2, first_name="Maria", last_name="Santos", email="m@x.com")]
    candidate = MatchCandidate(first_name="Maria", last_name="Santos", email="m@x.com")

    result = PromoHunterMatcher().match(candidate, history)
    assert result.match_reason == NAME_MATCH
    assert result.match_count == 1


def test_reporting_all_versus_first(make_booking):
    history = [
        make_booking(2, first_name="Maria", last_name="Santos", email="ana@x.com"),
        make_booking(3, first_name="Lia", last_name="Gomez", phone="09175550101", branch="ESTANCIA"),
        make_booking(4, first_name="Joy", last_name="Tan"),
    ]
    candidate = MatchCandidate(first_name="Ana", last_name="Cruz", email="ana@x.com", phone="0917 555 0101")

    everything = PromoHunterMatcher().match(candidate, history)
    assert everything.match_reason == "Email Match, Phone Match"
    assert everything.matched_source == "customer (FELIZ), customer (ESTANCIA)"
    assert everything.matched_row == "Row 2, Row 3"
    assert everything.match_count == 2

    first = PromoHunterMatcher(reporting=REPORT_FIRST).match(candidate, history)
    assert first.match_reason == "Email Match"
    assert first.matched_row == "Row 2"
    assert first.match_count == 2


def test_unknown_reporting_mode():
    with pytest.raises(ValueError):
        PromoHunterMatcher(reporting="some")


def test_social_media_match(make_booking):
    history = [make_booking(2, first_name="Maria", last_name="Santos", social_media="@Ana.R")]
    candidate = MatchCandidate(first_name="Ana", last_name="Cruz", social_media=" @ana.r ")

    result = PromoHunterMatcher().match(candidate, history)
    assert result.match_reason == SOCIAL_MATCH
    assert result.matched_source == "customer (FELIZ)"


def test_phone_checked_before_social_media(make_booking):
    history = [
        make_booking(
            2,
            first_name="Maria",
            last_name="Santos",
            phone="0917 555 0101",
            social_media="@ana.r",
            companion_first_name="Ana",
            companion_last_name="Cruz",
        )
    ]
    candidate = MatchCandidate(first_name="Ana", last_name="Cruz", phone="09175550101", social_media="@ana.r")

    result = PromoHunterMatcher().match(candidate, history)
    assert result.match_reason == PHONE_MATCH
    assert result.match_count == 1

    social_first = MatchCandidate(first_name="Ana", last_name="Cruz", social_media="@ana.r")
    assert PromoHunterMatcher().match(social_first, history).match_reason == SOCIAL_MATCH


@pytest.mark.parametrize("stored, given", [("", "@ana.r"), ("@ana.r", ""), ("", "")])
def test_blank_social_handle_never_matches(make_booking, stored, given):
    history = [make_booking(2, first_name="Maria", last_name="Santos", social_media=stored)]
    candidate = MatchCandidate(first_name="Ana", last_name="Cruz", social_media=given)

    assert PromoHunterMatcher().match(candidate, history).match_count == 0
