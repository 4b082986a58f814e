"""Tests for message template rendering"""

from datetime import date

from app.sms.templates import render_template, reservation_fields


def test_render_basic():
    body = render_template("Hi {manager_name}, {use_date}", {"manager_name": "Kim", "use_date": "2025-06-10"})
    assert body == "Hi Kim, 2025-06-10"


def test_company_name_falls_back_to_manager_name():
    assert render_template("{company_name}", {"manager_name": "Kim"}) == "Kim"
    assert render_template("{company_name}", {"company_name": None, "manager_name": "Kim"}) == "Kim"


def test_missing_fields_render_empty():
    assert render_template("[{phone}][{people_count}][{use_date}]", {}) == "[][][]"


def test_zero_people_count_renders_empty():
    assert render_template("{people_count}", {"people_count": 0}) == ""


def test_every_occurrence_replaced():
    assert render_template("{phone} / {phone}", {"phone": "010"}) == "010 / 010"


def test_unknown_tokens_pass_through():
    assert render_template("{address} {manager_name}", {"manager_name": "Kim"}) == "{address} Kim"


def test_values_are_not_substituted_again():
    body = render_template("{manager_name}", {"manager_name": "{phone}", "phone": "010"})
    assert body == "{phone}"


def test_second_pass_is_idempotent():
    once = render_template("Hi {manager_name}", {"manager_name": "Kim"})
    assert render_template(once, {"manager_name": "Lee"}) == once


class _Reservation:
    company_name = None
    manager_name = "Park"
    phone = "010-9999-0000"
    use_date = date(2025, 6, 10)
    people_count = 12


def test_reservation_fields():
    body = render_template(
        "{company_name}/{manager_name}/{phone}/{use_date}/{people_count}",
        reservation_fields(_Reservation()),
    )
    assert body == "Park/Park/010-9999-0000/2025-06-10/12"
