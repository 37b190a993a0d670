"""
Payment Workflow

Registers a subclaim on a claim filed through FNOL, settles it, and tells
iHub the payment is done.

The claim is found by the caller's correlation id, its registration task is
taken from the pool, a policy and a subclaim (codes resolved from the
platform's code tables, severity bucketed from the estimated loss, the
caller's coverage selected) are attached and the claim is submitted. The
settlement task that registration opens is then taken, loaded, filled with a
single settlement item and submitted. Finally the canonical settlement info
and claim are read back and posted to iHub.

Steps run strictly in order and the first failure ends the workflow. There
is no guard against re-running after a late failure: a second run can submit
a second settlement.
"""
from dataclasses import dataclass
from typing import Any, Dict, List

from claim_orch.core.config import Settings
from claim_orch.core.logging import get_logger
from claim_orch.orchestration.schemas import PaymentRequest
from claim_orch.orchestration.sequencer import WorkflowRun
from claim_orch.services.claim_case import CLAIMANT_ROLE, ClaimCase
from claim_orch.services.claim_handling import (
    attach_policy,
    fetch_coverage_list,
    query_first_task,
    retrieve_case_form,
    retrieve_claim_by_case_id,
    submit_claim,
    work_on_task,
)
from claim_orch.services.claim_lookup import search_claims
from claim_orch.services.reference_data import (
    CodeTable,
    SeverityThresholds,
    fetch_code_table,
    resolve_code,
    resolve_severity,
)
from claim_orch.services.settlement import (
    build_settlement_item,
    build_settlement_submission,
    load_settlement,
    query_settlement_info,
    resolve_payment_type,
    submit_settlement,
)
from claim_orch.services.upstream.client import UpstreamClient
from claim_orch.services.upstream.errors import CodeLookupError, NotificationError, OrchestrationError
from claim_orch.services.upstream.models import Code, CodeTableEntry, CoverageItem, SettlementLoad

logger = get_logger(__name__)


CURRENCY = "USD"
SUBCLAIM_SEQ_NO = "001"


@dataclass(frozen=True)
class LossCodes:
    cause_of_loss: Code
    subclaim_type: Code
    damage_type: Code


@dataclass(frozen=True)
class PaymentCodeTables:
    payment_methods: List[CodeTableEntry]
    partial_final_options: List[CodeTableEntry]


# ============================================================================
# Steps
# ============================================================================

async def resolve_loss_codes(
    client: UpstreamClient,
    request: PaymentRequest,
    product_line_code: str,
) -> LossCodes:
    """Cause of loss, subclaim type and damage type codes for the request."""
    codes = {}
    for table, description in (
        (CodeTable.CAUSE_OF_LOSS, request.cause_of_loss),
        (CodeTable.SUBCLAIM_TYPE, request.subclaim_type),
        (CodeTable.DAMAGE_TYPE, request.damage_type),
    ):
        entries = await fetch_code_table(client, table, product_line_code=product_line_code)
        codes[table] = resolve_code(description, entries, table.name)
        logger.info(f"{table.name}: {description} -> {codes[table]}")

    return LossCodes(
        cause_of_loss=codes[CodeTable.CAUSE_OF_LOSS],
        subclaim_type=codes[CodeTable.SUBCLAIM_TYPE],
        damage_type=codes[CodeTable.DAMAGE_TYPE],
    )


async def resolve_damage_severity(
    client: UpstreamClient,
    estimated_loss: float,
    product_line_code: str,
) -> Code:
    severities = await fetch_code_table(
        client, CodeTable.DAMAGE_SEVERITY, product_line_code=product_line_code
    )
    threshold_entries = await fetch_code_table(
        client, CodeTable.SEVERITY_THRESHOLD, product_line_code=product_line_code
    )
    thresholds = SeverityThresholds.from_entries(threshold_entries)
    severity = resolve_severity(estimated_loss, severities, thresholds)
    logger.info(f"Damage Severity: {severity}")
    return severity


def select_coverage(
    coverages: List[CoverageItem],
    coverage_name: str,
    init_loss_indemnity: float,
) -> List[Dict[str, Any]]:
    """
    Coverage list with the named coverage selected and given its reserve.

    Raises:
        CodeLookupError: If no coverage carries ``coverage_name``
    """
    selected = False
    result = []
    for coverage in coverages:
        item = coverage.to_upstream()
        if not selected and coverage.coverage_name == coverage_name:
            item.update({
                "Selected": "1",
                "InitLossIndemnity": init_loss_indemnity,
                "ItemCurrencyCode": CURRENCY,
            })
            selected = True
        result.append(item)

    if not selected:
        logger.error(f"Coverage {coverage_name!r} not in {[c.coverage_name for c in coverages]}")
        raise CodeLookupError("PolicyCoverageList", coverage_name)
    return result


def compose_subclaim(
    request: PaymentRequest,
    claim_case: ClaimCase,
    codes: LossCodes,
    damage_severity: Code,
    coverages: List[CoverageItem],
) -> Dict[str, Any]:
    """Subclaim record for claim registration."""
    subclaim = {
        "@type": "ClaimObject-ClaimObject",
        "SeqNo": SUBCLAIM_SEQ_NO,
        "LitigationFlag": request.litigation,
        "TotalLossFlag": request.total_loss,
        "IsSubrogation": request.has_subrogation,
        "IsSalvage": request.has_salvage,
        "EstimatedLossCurrency": CURRENCY,
        "SubclaimType": codes.subclaim_type,
        "DamageType": codes.damage_type,
        "damageParty": request.damage_party,
        "RiskName": request.damage_object,
        "EstimatedLossAmount": request.estimated_loss,
        "DamageSeverity": damage_severity,
    }
    logger.info(f"Subclaim: {subclaim}")

    subclaim.update({
        "ClaimParty": claim_case.first_claim_party,
        "ClaimantId": claim_case.claimant_id,
        "InsuredId": claim_case.insured_id,
        "OwnerId": claim_case.owner_id(request.claim_owner),
        "AccidentAddress1": claim_case.accident_address_line(),
        "PolicyCoverageList": select_coverage(
            coverages, request.coverage_name, request.init_loss_indemnity
        ),
    })
    return subclaim


def prepare_registration(
    claim_case: ClaimCase,
    subclaim: Dict[str, Any],
    cause_of_loss: Code,
) -> ClaimCase:
    """Claim case ready for registration submit, carrying the new subclaim."""
    return claim_case.with_claim_data(
        # tells the platform which objects changed
        ObjectDatas=[{"IsActive": "Y", "Name": SUBCLAIM_SEQ_NO, "newSubclaim": True}],
    ).with_entity_fields(
        PolicyholderId=claim_case.require("ClaimEntity", "PolicyHolderParty", "PtyPartyId"),
        PolicyholderName=claim_case.get("ClaimEntity", "PolicyHolderParty", "PartyName"),
        TotalAmount=0,
        LossCause=cause_of_loss,
        ObjectList=[subclaim],
    )


async def register_subclaim(
    client: UpstreamClient,
    claim_case: ClaimCase,
    subclaim: Dict[str, Any],
    cause_of_loss: Code,
) -> ClaimCase:
    return await submit_claim(client, prepare_registration(claim_case, subclaim, cause_of_loss))


async def fetch_payment_code_tables(client: UpstreamClient) -> PaymentCodeTables:
    return PaymentCodeTables(
        payment_methods=await fetch_code_table(client, CodeTable.PAYMENT_METHOD),
        partial_final_options=await fetch_code_table(client, CodeTable.PARTIAL_FINAL),
    )


def prepare_settlement(
    request: PaymentRequest,
    claim_case: ClaimCase,
    settlement: SettlementLoad,
    code_tables: PaymentCodeTables,
    case_id: Code,
    task_id: Code,
) -> Dict[str, Any]:
    """Settlement submission paying the claimant from the first reserve."""
    payee = claim_case.party_with_role(CLAIMANT_ROLE)
    pay_mode = resolve_code(
        request.payment_method, code_tables.payment_methods, CodeTable.PAYMENT_METHOD.name
    )
    pay_final = resolve_code(
        request.partial_final_option,
        code_tables.partial_final_options,
        CodeTable.PARTIAL_FINAL.name,
    )
    payment_type = resolve_payment_type(request.payment_type, settlement.payment_type_code_table)

    item = build_settlement_item(
        settlement.reserve_structure[0],
        settle_amount=request.settle_amount,
        payment_type=payment_type,
        pay_final=pay_final,
    )
    return build_settlement_submission(
        case_id=case_id,
        task_id=task_id,
        claim_type=settlement.settlement_info.claim_type,
        payee=payee,
        pay_mode=pay_mode,
        item=item,
        policy_no=claim_case.policy_no,
    )


async def notify_payment_done(
    client: UpstreamClient,
    notifier: UpstreamClient,
    case_id: Code,
    new_eco_fnol_id: str,
    curr_house_claim_id: str,
) -> Dict[str, Any]:
    """
    Post the settled claim to iHub.

    Raises:
        NotificationError: If anything fails here; the settlement itself has
            already been submitted at this point
    """
    logger.info(f"Notifying payment done for case {case_id}")
    try:
        settlement_info = await query_settlement_info(client, case_id)
        settlement_info["newEcoFnolId"] = new_eco_fnol_id
        settlement_info["currHouseClaimId"] = curr_house_claim_id
        logger.info(f"Settlement Info: {settlement_info}")

        claim_entity = await retrieve_claim_by_case_id(client, case_id)
        full_claim = {
            "claimCase": claim_entity,
            "settlementInfo": settlement_info,
        }

        await notifier.post("", full_claim, decode=False)
    except OrchestrationError as exc:
        raise NotificationError(case_id, exc) from exc

    logger.info("Payment done notification sent successfully")
    return full_claim


# ============================================================================
# Workflow
# ============================================================================

async def create_payment(
    request: PaymentRequest,
    client: UpstreamClient,
    notifier: UpstreamClient,
    settings: Settings,
) -> Dict[str, Any]:
    """
    Register a subclaim, settle it and notify iHub.

    Args:
        request: Caller's payment request
        client: Claims platform client
        notifier: iHub notification client
        settings: Business configuration (product line code)

    Returns:
        ``{"claimCase": ..., "settlementInfo": ...}`` as posted to iHub

    Raises:
        OrchestrationError: On the first failing step
    """
    run = WorkflowRun("payment", request.new_eco_fnol_id)
    product_line = settings.PRODUCT_LINE_CODE

    # Registration
    hit = await run.step("find_claim", search_claims, client, request.new_eco_fnol_id, 1)
    case_id = hit.case_id

    task_id = await run.step("query_claim_tasks", query_first_task, client, case_id)
    await run.step("work_on_task", work_on_task, client, task_id)
    claim_case = await run.step("retrieve_claim_case", retrieve_case_form, client, task_id)
    claim_case = await run.step("attach_policy", attach_policy, client, claim_case, case_id)

    codes = await run.step("resolve_loss_codes", resolve_loss_codes, client, request, product_line)
    severity = await run.step(
        "resolve_damage_severity", resolve_damage_severity, client, request.estimated_loss, product_line
    )
    coverages = await run.step(
        "fetch_coverage_list",
        fetch_coverage_list,
        client,
        codes.subclaim_type,
        claim_case.product_code,
        claim_case.insured_id,
    )

    subclaim = await run.step(
        "compose_subclaim", compose_subclaim, request, claim_case, codes, severity, coverages
    )

    claim_case = await run.step(
        "submit_registration", register_subclaim, client, claim_case, subclaim, codes.cause_of_loss
    )

    # Settlement
    settlement_task_id = await run.step("query_settlement_task", query_first_task, client, case_id)
    await run.step("work_on_settlement_task", work_on_task, client, settlement_task_id)
    claim_case = await run.step(
        "retrieve_settlement_case", retrieve_case_form, client, settlement_task_id
    )
    settlement = await run.step("load_settlement", load_settlement, client, settlement_task_id)
    code_tables = await run.step("fetch_payment_codes", fetch_payment_code_tables, client)

    submission = await run.step(
        "build_settlement_item",
        prepare_settlement,
        request,
        claim_case,
        settlement,
        code_tables,
        case_id,
        settlement_task_id,
    )
    await run.step("submit_settlement", submit_settlement, client, submission)

    full_claim = await run.step(
        "notify_payment_done",
        notify_payment_done,
        client,
        notifier,
        case_id,
        request.new_eco_fnol_id,
        hit.curr_house_claim_id,
    )

    run.finish()
    return full_claim
