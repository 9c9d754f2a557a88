from config import ReguflowConfig
from models import Attachment, Tier
from prompt_composer import HISTORY_HEADER, QUERY_HEADER, compose_prompt
from tier_policy import resolve_policy


def test_empty_history_emits_no_history_block():
    payload = compose_prompt("Opening a tea stall in Chennai", [], resolve_policy(Tier.FREE))
    assert HISTORY_HEADER not in payload.user_text
    assert payload.history_count == 0
    assert payload.user_text.startswith(QUERY_HEADER)
    assert "Opening a tea stall in Chennai" in payload.user_text


def test_history_is_numbered_most_recent_first_before_query():
    history = ["Running a bakery in Madurai", "Exporting spices from Kochi"]
    payload = compose_prompt("Opening a tea stall in Chennai", history, resolve_policy(Tier.PREMIUM))
    text = payload.user_text
    assert HISTORY_HEADER in text
    assert "1. Running a bakery in Madurai" in text
    assert "2. Exporting spices from Kochi" in text
    assert text.index("1. Running") < text.index("2. Exporting") < text.index(QUERY_HEADER)
    assert payload.history_count == 2


def test_history_is_bounded_and_blank_entries_skipped():
    history = ["a", "  ", "b", "c", "d", "e"]
    payload = compose_prompt("scenario", history, resolve_policy(Tier.FREE))
    assert payload.history_count == ReguflowConfig.HISTORY_LIMIT
    assert "3. c" in payload.user_text
    assert "4. d" not in payload.user_text


def test_system_instruction_declares_shape_and_no_extra_text():
    payload = compose_prompt("scenario", [], resolve_policy(Tier.FREE))
    for key in ReguflowConfig.REQUIRED_FIELDS:
        assert key in payload.system_instruction
    assert "outside the JSON object" in payload.system_instruction
    assert "statutory citation-level" not in payload.system_instruction
    assert "web search" not in payload.system_instruction


def test_premium_requests_statutory_detail_and_official_sources():
    payload = compose_prompt("scenario", [], resolve_policy(Tier.PREMIUM))
    assert "statutory citation-level" in payload.system_instruction
    assert "web search" in payload.system_instruction


def test_attachments_travel_as_separate_parts():
    photo = Attachment(data=b"\x89PNG", mime_type="image/png", filename="licence.png")
    payload = compose_prompt("", [], resolve_policy(Tier.FREE), attachments=[photo])
    assert payload.attachments == [photo]
    assert "PNG" not in payload.user_text
    assert "Derive the business scenario" in payload.user_text


def test_history_limit_is_read_at_call_time(monkeypatch):
    history = ["a", "b", "c", "d"]
    monkeypatch.setattr(ReguflowConfig, "HISTORY_LIMIT", 1)
    payload = compose_prompt("scenario", history, resolve_policy(Tier.FREE))
    assert payload.history_count == 1
    assert "2. b" not in payload.user_text


def test_negative_history_limit_emits_no_history(monkeypatch):
    monkeypatch.setattr(ReguflowConfig, "HISTORY_LIMIT", -1)
    payload = compose_prompt("scenario", ["a", "b", "c"], resolve_policy(Tier.FREE))
    assert payload.history_count == 0
    assert HISTORY_HEADER not in payload.user_text
    assert compose_prompt("scenario", ["a", "b"], resolve_policy(Tier.FREE), history_limit=-2).history_count == 0
