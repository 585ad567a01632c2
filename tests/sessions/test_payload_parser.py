from __future__ import annotations

import pytest

from src.qr_checkin.qr_checkin.core.enums import CheckInMode
from src.qr_checkin.qr_checkin.core.exceptions import ParseError
from src.qr_checkin.qr_checkin.sessions.parser import INVALID_STRUCTURED, INVALID_TOKEN, parse_payload


def test_legacy_json_payload_becomes_single_employee_session():
    session = parse_payload('{"session_token":"abc1234567","employee_id":"E1","employee_name":"Jane"}')

    assert session.session_token == "abc1234567"
    assert session.employee_ids == ("E1",)
    assert session.employee_names == ("Jane",)
    assert session.mode == CheckInMode.AUTO


def test_bare_token_is_trimmed():
    session = parse_payload("  abcdef1234  ")

    assert session.session_token == "abcdef1234"
    assert session.employee_ids == ()


def test_short_token_is_rejected():
    with pytest.raises(ParseError) as exc:
        parse_payload("short")

    assert exc.value.reason == INVALID_TOKEN
    assert str(exc.value) == "Token invalide"


def test_group_payload_keeps_order():
    session = parse_payload(
        '{"session_token":"grp1234567","employee_ids":["E1","E2","E3"],'
        '"employee_names":["Ana","Ben","Chloé"],"employee_count":3,"mode":"check_out"}'
    )

    assert session.employee_ids == ("E1", "E2", "E3")
    assert session.employee_names == ("Ana", "Ben", "Chloé")
    assert session.is_group
    assert session.mode == CheckInMode.CHECK_OUT


def test_numeric_employee_ids_are_strings():
    session = parse_payload('{"session_token":"abc1234567","employee_id":42}')

    assert session.employee_ids == ("42",)
    assert session.employee_names == ("",)


def test_structured_token_has_no_length_rule():
    assert parse_payload('{"session_token":"abc"}').session_token == "abc"


def test_unknown_mode_falls_back_to_auto():
    assert parse_payload('{"session_token":"abc1234567","mode":"lunch"}').mode == CheckInMode.AUTO


@pytest.mark.parametrize(
    "payload",
    [
        "{not json",
        '{"employee_id":"E1"}',
        '{"session_token":""}',
        '{"session_token":"   "}',
        '{"session_token":123}',
        '{"session_token":"abc1234567","employee_ids":["E1","E2"],"employee_names":["Ana"]}',
        '{"session_token":"abc1234567","employee_ids":"E1"}',
    ],
)
def test_invalid_structured_payloads(payload):
    with pytest.raises(ParseError) as exc:
        parse_payload(payload)

    assert exc.value.reason == INVALID_STRUCTURED
    assert str(exc.value) == "QR code JSON invalide"


def test_payload_with_leading_spaces_before_json():
    session = parse_payload('   {"session_token":"abc1234567"}')

    assert session.session_token == "abc1234567"


def test_deeply_nested_json_is_invalid_structured_payload():
    depth = 100_000
    payload = '{"session_token":"abc1234567","x":' + "[" * depth + "]" * depth + "}"

    with pytest.raises(ParseError) as exc:
        parse_payload(payload)

    assert exc.value.reason == INVALID_STRUCTURED
