"""
Test configuration and fixtures for the claim orchestrator tests.

The claims platform and iHub are replaced by FakePlatform, an
httpx.MockTransport handler that serves canned JSON per (method, path) and
records every call.
"""

import copy
import json
from typing import Any, AsyncGenerator, Callable, Dict, Generator, List, Tuple, Union

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from main import app
from claim_orch.api.deps import get_app_settings, get_claims_client, get_notification_client
from claim_orch.core.config import Settings
from claim_orch.services.upstream.client import (
    UpstreamClient,
    build_claims_client,
    build_notification_client,
)


CLAIMS_URL = "https://claims.test/aw/1.0/general-claim"
IHUB_URL = "https://ihub.test/travelers/v1/claim/payment/notification"

CASE_ID = 9001
REGISTRATION_TASK_ID = 7001
SETTLEMENT_TASK_ID = 7002
INSURED_ID = 801
SETTLE_ID = 3001
PRODUCT_CODE = "GCP001"


Handler = Callable[[Any], Tuple[int, Any]]
Route = Union[Tuple[int, Any], Handler]


class FakePlatform:
    """Canned upstream keyed by (method, path relative to the base URL)."""

    def __init__(self, base_url: str):
        self.base_path = httpx.URL(base_url).path.rstrip("/")
        self.routes: Dict[Tuple[str, str], List[Route]] = {}
        self.requests: List[Tuple[str, str, Any, httpx.Request]] = []

    def on(self, method: str, path: str, *responses: Route) -> "FakePlatform":
        """
        Register responses for a route.

        Each response is ``(status, body)`` or a callable taking the decoded
        request body and returning ``(status, body)``. Successive calls walk
        the list; the last response repeats.
        """
        self.routes[(method, path)] = list(responses)
        return self

    def ok(self, method: str, path: str, *bodies: Any) -> "FakePlatform":
        return self.on(method, path, *[(200, body) for body in bodies])

    def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path[len(self.base_path):].lstrip("/")
        body = json.loads(request.content) if request.content else None
        self.requests.append((request.method, path, body, request))

        responses = self.routes.get((request.method, path))
        if not responses:
            return httpx.Response(404, json={"Status": "ERROR", "Message": f"no route {path}"})
        route = responses.pop(0) if len(responses) > 1 else responses[0]
        status, payload = route(body) if callable(route) else route

        if isinstance(payload, str):
            return httpx.Response(status, text=payload)
        return httpx.Response(status, json=payload)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    @property
    def calls(self) -> List[Tuple[str, str]]:
        return [(method, path) for method, path, _, _ in self.requests]

    @property
    def paths(self) -> List[str]:
        return [path for _, path, _, _ in self.requests]

    def bodies_for(self, path: str) -> List[Any]:
        return [body for _, p, body, _ in self.requests if p == path]


# ============================================================================
# Canned upstream documents
# ============================================================================

def make_claim_case() -> Dict[str, Any]:
    return {
        "ClaimEntity": {
            "@pk": CASE_ID,
            "ClaimNo": "CLM-2024-0001",
            "PolicyNo": "P1",
            "ProductCode": PRODUCT_CODE,
            "ExtClaimNo": None,
            "AddressVo": {
                "AddressLine1": "1 Main St",
                "City": "Austin",
                "State": "TX",
                "PostCode": "78701",
            },
            "ClaimPartyList": [
                {"@pk": 501, "PartyName": "Jane Doe", "PartyRole": "01"},
            ],
            "OwnerList": [
                {"RealName": "Adjuster One", "UserId": 42},
                {"RealName": "Adjuster Two", "UserId": 43},
            ],
            "PolicyHolderParty": {"PtyPartyId": 601, "PartyName": "Jane Doe"},
        },
        "ClaimData": {"ObjectDatas": []},
    }


def empty_search() -> Dict[str, Any]:
    return {"Results": [{"SolrDocs": []}]}


def found_search(ext_claim_no: str = "NE:NE123;CH:CH456") -> Dict[str, Any]:
    return {
        "Results": [
            {"SolrDocs": [{"CaseId": CASE_ID, "ClaimNo": "CLM-2024-0001", "ExtClaimNo": ext_claim_no}]}
        ]
    }


def echo_model(body: Any) -> Tuple[int, Any]:
    return 200, {"Status": "OK", "Model": body}


def retrieve_policy_response(body: Any) -> Tuple[int, Any]:
    entity = copy.deepcopy(body["ClaimEntity"])
    entity["PolicyEntity"] = {
        **entity["PolicyEntity"],
        "InsuredList": [{"@pk": INSURED_ID, "InsuredName": "Jane Doe"}],
    }
    return 200, {"Status": "OK", "Model": entity}


def tasks(task_id: int) -> Dict[str, Any]:
    return {"Status": "OK", "Model": {"loadClaimTasks": [{"id": task_id, "TaskCode": "Task"}]}}


def settlement_load() -> Dict[str, Any]:
    return {
        "Status": "OK",
        "Model": {
            "ReserveStructure": [
                {
                    "OutstandingAmount": 4000,
                    "ReserveType": "RT_INDEMNITY",
                    "ReserveId": 11,
                    "ItemId": 12,
                    "CoverageName": "Dwelling",
                    "ReserveSign": 1,
                    "OurShareAmount": 4000,
                    "SubclaimType": "ST01",
                    "CoverageTypeCode": "CT1",
                    "SeqNo": "001",
                    "CurrencyCode": "USD",
                    "ReserveStatus": "OPEN",
                },
            ],
            "PaymentTypeCodeTable": [
                {"id": "PT_EXP", "text": "Expense"},
                {"id": "PT_IND", "text": "Indemnity"},
            ],
            "SettlementInfo": {"ClaimType": "CLAIM_TYPE_1"},
        },
    }


def install_fnol_routes(platform: FakePlatform) -> FakePlatform:
    return (
        platform
        .ok("POST", "public/ap00/query/entity", empty_search())
        .ok("GET", "productTree/productLineTree", {
            "Status": "OK",
            "Model": [{"id": "AUTO01"}, {"id": "MARINE01"}, {"id": PRODUCT_CODE}, {"id": "LIAB01"}],
        })
        .ok("GET", f"product/productDetailByProductCode/{PRODUCT_CODE}", {
            "Status": "OK",
            "Model": {"ProductTypeCode": "HO", "ProductDescription": "Homeowners"},
        })
        .ok("GET", "public/codetable/data/list/1026", [
            {"Description": "Claimant", "Code": "1"},
            {"Description": "Insured", "Code": "2"},
        ])
        .ok("POST", "notice/creation", {
            "Status": "OK",
            "Model": {"CaseIds": [CASE_ID], "NoticeNo": "FNOL-0001"},
        })
        .ok("GET", f"workflow/claimTasks/{CASE_ID}/false", tasks(REGISTRATION_TASK_ID))
        .ok("POST", "workflow/workOnAssignForPool", {"Status": "OK"})
        .ok("GET", f"claimhandling/caseForm/{REGISTRATION_TASK_ID}/0", make_claim_case())
        .on("POST", "registration/saveClaim", echo_model)
    )


def install_payment_routes(platform: FakePlatform) -> FakePlatform:
    return (
        platform
        .ok("POST", "public/ap00/query/entity", found_search())
        .ok(
            "GET",
            f"workflow/claimTasks/{CASE_ID}/false",
            tasks(REGISTRATION_TASK_ID),
            tasks(SETTLEMENT_TASK_ID),
        )
        .ok("POST", "workflow/workOnAssignForPool", {"Status": "OK"})
        .ok("GET", f"claimhandling/caseForm/{REGISTRATION_TASK_ID}/0", make_claim_case())
        .on("POST", "claimhandling/retrievePolicy/", retrieve_policy_response)
        .ok("POST", "public/codetable/data/condition/1006", [
            {"Description": "Fire", "Code": "CL01"},
            {"Description": "Water", "Code": "CL02"},
        ])
        .ok("POST", "public/codetable/data/condition/1007", [
            {"Description": "Property Damage", "Code": "ST01"},
        ])
        .ok("POST", "public/codetable/data/condition/1027", [
            {"Description": "Building", "Code": "DT01"},
        ])
        .ok("POST", "public/codetable/data/condition/1050", [
            {"Description": "Small", "Code": "S"},
            {"Description": "Medium", "Code": "M"},
            {"Description": "High", "Code": "H"},
        ])
        .ok("POST", "public/codetable/data/condition/74915434", [
            {"Description": "MediumLoss", "Code": "5000"},
            {"Description": "HighLoss", "Code": "20000"},
        ])
        .ok("GET", f"claimhandling/subclaim/coverageList/ST01/{PRODUCT_CODE}/{INSURED_ID}", {
            "Status": "OK",
            "Model": [
                {"CoverageName": "Dwelling", "CoverageCode": "C1"},
                {"CoverageName": "Contents", "CoverageCode": "C2"},
            ],
        })
        .on("POST", "registration/submitClaim", echo_model)
        .ok("GET", f"claimhandling/caseForm/{SETTLEMENT_TASK_ID}/0", make_claim_case())
        .ok("GET", f"settlement/load/{SETTLEMENT_TASK_ID}", settlement_load())
        .ok("GET", "public/codetable/data/list/75283381", [
            {"Description": "Check", "Code": "PM_CHECK"},
            {"Description": "EFT", "Code": "PM_EFT"},
        ])
        .ok("GET", "public/codetable/data/list/1000", [
            {"Description": "Partial", "Code": "0"},
            {"Description": "Final", "Code": "1"},
        ])
        .ok("POST", "settlement/submit/", {"Status": "OK", "Model": {"SettleId": SETTLE_ID}})
        .ok("GET", "settlement/history", {"Status": "OK", "Model": [{"SettleId": SETTLE_ID}]})
        .ok("GET", f"settlement/load/bySettlementId/{SETTLE_ID}", {
            "Status": "OK",
            "Model": {"SettlementInfo": {"SettleId": SETTLE_ID, "ClaimType": "CLAIM_TYPE_1"}},
        })
        .ok("GET", f"claimhandling/caseForm/0/{CASE_ID}", make_claim_case())
    )


# ============================================================================
# Request bodies
# ============================================================================

def fnol_payload(**overrides: Any) -> Dict[str, Any]:
    payload = {
        "newEcoFnolId": "NE123",
        "currHouseClaimId": "CH456",
        "policyNo": "P1",
        "dateOfLoss": "2024-01-01",
        "dateOfNotification": "2024-01-02",
        "policyholderName": "Jane Doe",
        "contact": {"name": "Jane Doe", "telephone": "555-1234"},
        "accidentDescription": "Fire damage",
        "accidentAddress": {
            "city": "Austin",
            "state": "TX",
            "addressLine1": "1 Main St",
            "postCode": "78701",
        },
    }
    payload.update(overrides)
    return payload


def payment_payload(**overrides: Any) -> Dict[str, Any]:
    payload = {
        "newEcoFnolId": "NE123",
        "causeOfLoss": "Fire",
        "damageType": "Building",
        "subclaimType": "Property Damage",
        "estimatedLoss": 5000,
        "damageParty": "Insured",
        "damageObject": "House",
        "claimOwner": "Adjuster One",
        "coverageName": "Dwelling",
        "initLossIndemnity": 4000,
        "paymentMethod": "Check",
        "paymentType": "Indemnity",
        "settleAmount": 3500,
    }
    payload.update(overrides)
    return payload


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        TRAVELERS_CLAIM_SERVER_URL=CLAIMS_URL,
        TRAVELERS_CLAIM_SERVER_TOKEN="claims-test-token",
        TRAVELERS_IHUB_NOTIFICATION_URL=IHUB_URL,
        TRAVELERS_IHUB_TOKEN="ihub-test-token",
    )


@pytest.fixture
def platform() -> FakePlatform:
    """Bare fake claims platform; tests install the routes they need."""
    return FakePlatform(CLAIMS_URL)


@pytest.fixture
def fnol_platform(platform: FakePlatform) -> FakePlatform:
    return install_fnol_routes(platform)


@pytest.fixture
def payment_platform(platform: FakePlatform) -> FakePlatform:
    return install_payment_routes(platform)


@pytest.fixture
def ihub() -> FakePlatform:
    return FakePlatform(IHUB_URL).ok("POST", "", "accepted")


@pytest_asyncio.fixture
async def claims_client(
    platform: FakePlatform, test_settings: Settings
) -> AsyncGenerator[UpstreamClient, None]:
    async with build_claims_client(test_settings, transport=platform.transport()) as c:
        yield c


@pytest_asyncio.fixture
async def notification_client(
    ihub: FakePlatform, test_settings: Settings
) -> AsyncGenerator[UpstreamClient, None]:
    async with build_notification_client(test_settings, transport=ihub.transport()) as c:
        yield c


@pytest.fixture
def client(
    platform: FakePlatform,
    ihub: FakePlatform,
    test_settings: Settings,
) -> Generator[TestClient, None, None]:
    """API test client wired to the fake platforms."""

    async def override_claims_client():
        async with build_claims_client(test_settings, transport=platform.transport()) as c:
            yield c

    async def override_notification_client():
        async with build_notification_client(test_settings, transport=ihub.transport()) as c:
            yield c

    app.dependency_overrides[get_app_settings] = lambda: test_settings
    app.dependency_overrides[get_claims_client] = override_claims_client
    app.dependency_overrides[get_notification_client] = override_notification_client
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
