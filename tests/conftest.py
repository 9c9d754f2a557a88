import json

import pytest


def _roadmap_payload():
    return {
        "applicableRegulations": [
            {"name": "FSSAI Registration", "description": "Basic food business registration for small vendors."},
            {"name": "Tamil Nadu Shops and Establishments Act", "description": "Registration of the stall as an establishment."},
        ],
        "complianceObligations": ["Display the FSSAI registration number at the stall."],
        "actionableTaskChecklist": [
            {"task": "Apply for FSSAI basic registration", "description": "File Form A on the FoSCoS portal."},
            {"task": "Obtain trade licence", "description": "Apply to Greater Chennai Corporation."},
            {"task": "Open a current account", "description": "Keep business receipts separate."},
        ],
        "requiredDocuments": ["Aadhaar card", "Proof of premises"],
        "deadlinesFrequency": ["FSSAI registration renewal every 1 to 5 years"],
        "riskFlags": ["Operating without a trade licence invites closure notices."],
        "monitoringSuggestions": ["Track licence renewal dates in a calendar."],
    }


@pytest.fixture
def roadmap_payload():
    return _roadmap_payload()


@pytest.fixture
def roadmap_json(roadmap_payload):
    return json.dumps(roadmap_payload, ensure_ascii=False)
