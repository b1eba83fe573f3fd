import pytest

from vortex.routers.whatsapp import extract_message_text
from vortex.services.purchase_verification import extract_verification_id


@pytest.mark.parametrize(
    "message",
    ["OK abc123", "  ok   abc123 thanks", "Ok abc123!", "ok\tabc123", "gracias, ok abc123", "ok\nabc123"],
)
def test_extracts_identifier(message):
    assert extract_verification_id(message) == "abc123"


def test_first_command_wins():
    assert extract_verification_id("ok first1 and ok second2") == "first1"


def test_identifier_stops_at_non_alphanumeric():
    assert extract_verification_id("ok ab-c123") == "ab"


@pytest.mark.parametrize("message", [None, "", "okabc123", "book abc123", "ok", "ok -abc"])
def test_no_identifier(message):
    assert extract_verification_id(message) is None


def test_message_text_from_plain_payload():
    assert extract_message_text({"message": "ok abc123"}) == "ok abc123"


def test_message_text_from_cloud_api_envelope():
    body = {
        "object": "whatsapp_business_account",
        "entry": [{"changes": [{"value": {"messages": [{"type": "text", "text": {"body": "ok xyz9"}}]}}]}],
    }
    assert extract_message_text(body) == "ok xyz9"


@pytest.mark.parametrize(
    "body",
    [None, [], "ok abc", {}, {"message": ""}, {"message": 12}, {"entry": []}, {"entry": [{"changes": "x"}]}],
)
def test_message_text_missing(body):
    assert extract_message_text(body) is None
