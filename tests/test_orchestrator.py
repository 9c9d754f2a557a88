import json

import pytest

from errors import GenerationServiceError, InvalidRequest, MalformedResponse
from generation_client import RawResponse
from models import Attachment, RoadmapRequest, Tier
from prompt_composer import HISTORY_HEADER
from roadmap_orchestrator import RequestStatus, RoadmapOrchestrator


class StubClient:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def invoke(self, payload, policy):
        self.calls.append((payload, policy))
        if self.error:
            raise self.error
        return self.response


def test_free_tier_end_to_end(roadmap_json):
    client = StubClient(RawResponse(text=roadmap_json, model="standard"))
    orchestrator = RoadmapOrchestrator(client)
    result = orchestrator.generate_roadmap(
        RoadmapRequest(scenario="Opening a tea stall in Chennai", tier=Tier.FREE)
    )
    payload, policy = client.calls[0]
    assert policy.use_live_augmentation is False
    assert HISTORY_HEADER not in payload.user_text
    assert result.is_grounded is None
    assert len(result.actionable_task_checklist) == 3
    assert orchestrator.last_status == RequestStatus.SUCCEEDED


def test_premium_tier_end_to_end(roadmap_json):
    citations = [
        {"type": "url_citation", "url": "https://foscos.fssai.gov.in", "title": "FoSCoS"},
        {"type": "url_citation", "title": "Unlinked note"},
        {"type": "url_citation", "url": "https://tnlabour.gov.in", "title": "TN Labour"},
    ]
    client = StubClient(RawResponse(text="```json\n" + roadmap_json + "\n```", model="advanced", citations=citations))
    result = RoadmapOrchestrator(client).generate_roadmap(
        RoadmapRequest(
            scenario="Opening a tea stall in Chennai",
            tier=Tier.PREMIUM,
            recent_history=["Running a bakery in Madurai", "Exporting spices from Kochi"],
        )
    )
    payload, policy = client.calls[0]
    assert policy.use_live_augmentation is True
    assert policy.amplified_detail is True
    assert "1. Running a bakery in Madurai" in payload.user_text
    assert "2. Exporting spices from Kochi" in payload.user_text
    assert result.is_grounded is True
    assert len(result.grounding_sources) == 2


def test_free_tier_never_grounded_even_with_citations(roadmap_payload):
    roadmap_payload["isGrounded"] = True
    citations = [{"url": "https://mca.gov.in", "title": "MCA"}]
    client = StubClient(RawResponse(text=json.dumps(roadmap_payload), model="standard", citations=citations))
    result = RoadmapOrchestrator(client).generate_roadmap(RoadmapRequest(scenario="x", tier=Tier.FREE))
    assert result.is_grounded is not True


def test_empty_request_is_rejected_before_any_call():
    client = StubClient()
    orchestrator = RoadmapOrchestrator(client)
    with pytest.raises(InvalidRequest):
        orchestrator.generate_roadmap(RoadmapRequest(scenario="   ", tier=Tier.PRO))
    assert client.calls == []
    assert orchestrator.last_status == RequestStatus.IDLE


def test_attachment_only_request_is_accepted(roadmap_json):
    client = StubClient(RawResponse(text=roadmap_json, model="standard"))
    request = RoadmapRequest(attachments=[Attachment(data=b"img", mime_type="image/png")])
    RoadmapOrchestrator(client).generate_roadmap(request)
    assert len(client.calls[0][0].attachments) == 1


@pytest.mark.parametrize("error", [TimeoutError("read timed out"), ConnectionError("reset"), RuntimeError("500")])
def test_adapter_failures_become_service_errors(error):
    orchestrator = RoadmapOrchestrator(StubClient(error=error))
    with pytest.raises(GenerationServiceError) as excinfo:
        orchestrator.generate_roadmap(RoadmapRequest(scenario="x"))
    assert excinfo.value.__cause__ is error
    assert orchestrator.last_status == RequestStatus.FAILED


def test_service_error_from_adapter_passes_through():
    error = GenerationServiceError("Empty response from AI engine.")
    with pytest.raises(GenerationServiceError) as excinfo:
        RoadmapOrchestrator(StubClient(error=error)).generate_roadmap(RoadmapRequest(scenario="x"))
    assert excinfo.value is error


def test_malformed_text_is_classified_separately(roadmap_payload):
    roadmap_payload.pop("riskFlags")
    orchestrator = RoadmapOrchestrator(StubClient(RawResponse(text=json.dumps(roadmap_payload), model="m")))
    with pytest.raises(MalformedResponse) as excinfo:
        orchestrator.generate_roadmap(RoadmapRequest(scenario="x"))
    assert not isinstance(excinfo.value, GenerationServiceError)
    assert "simplifying" in excinfo.value.user_message
    assert orchestrator.last_status == RequestStatus.FAILED


def test_deeply_nested_output_is_classified_as_malformed():
    client = StubClient(RawResponse(text="[" * 100000 + "]" * 100000, model="standard"))
    orchestrator = RoadmapOrchestrator(client)
    with pytest.raises(MalformedResponse):
        orchestrator.generate_roadmap(RoadmapRequest(scenario="Tea stall", tier=Tier.FREE))
    assert orchestrator.last_status == RequestStatus.FAILED
