"""
Settlement calls on the claims platform and settlement item composition.
"""
from typing import Any, Dict, List, Optional

from claim_orch.core.logging import get_logger
from claim_orch.services.upstream.client import UpstreamClient
from claim_orch.services.upstream.errors import CodeLookupError
from claim_orch.services.upstream.models import (
    Code,
    PaymentTypeOption,
    ReserveEntry,
    SettlementDetailResponse,
    SettlementHistoryResponse,
    SettlementLoad,
    SettlementLoadResponse,
    decode,
)

logger = get_logger(__name__)


SETTLEMENT_TASK_CODE = "ClaimSettlementTask"
SETTLE_CURRENCY = "USD"

# Copied as-is from the first reserve structure entry into a settlement item
RESERVE_FIELDS = (
    "OutstandingAmount",
    "ReserveType",
    "ReserveId",
    "ItemId",
    "CoverageName",
    "ReserveSign",
    "OurShareAmount",
    "SubclaimType",
    "CoverageTypeCode",
    "SeqNo",
)


async def load_settlement(client: UpstreamClient, task_id: Code) -> SettlementLoad:
    """Settlement structure for a worked-on settlement task."""
    data = await client.get(f"settlement/load/{task_id}")
    settlement = decode(SettlementLoadResponse, data, "settlement load").model
    logger.info(f"Claim Settlement loaded for task {task_id}")
    return settlement


def resolve_payment_type(description: str, options: List[PaymentTypeOption]) -> Code:
    """Payment type id for its display text."""
    for option in options:
        if option.text == description:
            return option.id
    raise CodeLookupError("PaymentTypeCodeTable", description)


def build_settlement_item(
    reserve: ReserveEntry,
    settle_amount: float,
    payment_type: Code,
    pay_final: Code,
) -> Dict[str, Any]:
    """
    Compose a settlement item from a reserve structure entry.

    Copies RESERVE_FIELDS that are present on the reserve, then overlays the
    settlement amount, payment type and partial/final code. The item pays
    the first payee and does not take our share.
    """
    source = reserve.to_upstream()
    item = {key: source[key] for key in RESERVE_FIELDS if key in source}
    item.update({
        "ReserveCurrency": reserve.currency_code,
        "SettleAmount": settle_amount,
        "@type": "ClaimSettlementItem-ClaimSettlementItem",
        "Index": 0,
        "PayeeIndex": 0,
        "OurShareAmount": 0,
        "PayFinal": pay_final,
        "PaymentType": payment_type,
    })
    return item


def build_settlement_submission(
    case_id: Code,
    task_id: Code,
    claim_type: Optional[Code],
    payee: Dict[str, Any],
    pay_mode: Code,
    item: Dict[str, Any],
    policy_no: Optional[str],
) -> Dict[str, Any]:
    return {
        "SettlementEntity": {
            "@type": "ClaimSettlement-ClaimSettlement",
            "CaseId": case_id,
            "ClaimType": claim_type,
            "SettlementPayee": [
                {
                    "@pk": None,
                    "@type": "ClaimSettlementPayee-ClaimSettlementPayee",
                    "SettlementItem": [item],
                    "PayeeId": payee.get("@pk"),
                    "PayeeName": payee.get("PartyName"),
                    "PayMode": pay_mode,
                    "SettleCurrency": SETTLE_CURRENCY,
                    "ReserveExchangeRate": 1,
                },
            ],
        },
        "TaskInstanceId": task_id,
        "PolicyNo": policy_no,
    }


async def submit_settlement(client: UpstreamClient, submission: Dict[str, Any]) -> Dict[str, Any]:
    """Submit a settlement; returns the platform's response body."""
    data = await client.post("settlement/submit/", submission)
    logger.info(f"Settlement submitted for case {submission['SettlementEntity']['CaseId']}")
    return data


async def query_settlement_info(client: UpstreamClient, case_id: Code) -> Dict[str, Any]:
    """Canonical SettlementInfo of the latest settlement on a case."""
    logger.info(f"Querying Claim Settlement History for case {case_id}")
    data = await client.get(
        "settlement/history",
        params={"caseId": case_id, "taskCode": SETTLEMENT_TASK_CODE},
    )
    settle_id = decode(SettlementHistoryResponse, data, "settlement history").model[0].settle_id
    logger.info(f"Claim Settlement ID: {settle_id}")

    data = await client.get(f"settlement/load/bySettlementId/{settle_id}")
    info = decode(SettlementDetailResponse, data, "settlement detail").model.settlement_info
    logger.info(f"Claim Settlement ID in settlement info: {info.settle_id}")
    return info.to_upstream()
