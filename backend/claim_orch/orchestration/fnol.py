"""
FNOL Workflow

Files a first notice of loss on the claims platform and links the
resulting claim to the caller's two correlation ids:

1. CHECK_NOT_REGISTERED - correlation id must not exist upstream yet
2. FETCH_PRODUCT_TREE - active product is a fixed position in the tree
3. FETCH_PRODUCT_DETAIL - product type code and description
4. FETCH_CONTACT_TYPE - code of the "Insured" contact type
5. SUBMIT_NOTICE - create the notice, yielding the case id
6. QUERY_CLAIM_TASKS - first task on the case is claim registration
7. WORK_ON_TASK - take the registration task from the pool
8. RETRIEVE_CLAIM_CASE - claim document behind the task
9. SAVE_EXTERNAL_IDS - write "NE:<id>;CH:<id>" into ExtClaimNo and save

Every step must succeed for the next to run. A failure after step 5 leaves
the notice on the platform; re-running is rejected by step 1 once step 9
has been reached.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from claim_orch.core.config import Settings
from claim_orch.core.logging import get_logger
from claim_orch.orchestration.schemas import FNOLRequest
from claim_orch.orchestration.sequencer import WorkflowRun
from claim_orch.services.claim_case import ClaimCase
from claim_orch.services.claim_handling import (
    query_first_task,
    retrieve_case_form,
    save_claim,
    work_on_task,
)
from claim_orch.services.claim_lookup import encode_ext_claim_no, search_claims
from claim_orch.services.reference_data import CodeTable, fetch_code_table, resolve_code
from claim_orch.services.upstream.client import UpstreamClient
from claim_orch.services.upstream.errors import UpstreamLogicalError
from claim_orch.services.upstream.models import (
    Code,
    NoticeCreationResponse,
    ProductDetailResponse,
    ProductTreeResponse,
    decode,
)

logger = get_logger(__name__)


INSURED_CONTACT_TYPE = "Insured"


@dataclass(frozen=True)
class ActiveProduct:
    code: Code
    type_code: Code
    description: str


@dataclass(frozen=True)
class NoticeResult:
    case_id: Code
    notice_no: Optional[str]


# ============================================================================
# Steps
# ============================================================================

async def check_not_registered(client: UpstreamClient, correlation_id: str) -> None:
    await search_claims(client, correlation_id, 0)


async def fetch_product_code(client: UpstreamClient, tree_index: int) -> Code:
    """Product code at the configured position of the product line tree."""
    data = await client.get("productTree/productLineTree")
    nodes = decode(ProductTreeResponse, data, "product tree").model
    if tree_index >= len(nodes):
        raise UpstreamLogicalError(
            f"Product tree has {len(nodes)} entries, no product at index {tree_index}",
            response=data,
        )
    product_code = nodes[tree_index].id
    logger.info(f"Product code: {product_code}")
    return product_code


async def fetch_product(client: UpstreamClient, product_code: Code) -> ActiveProduct:
    data = await client.get(f"product/productDetailByProductCode/{product_code}")
    detail = decode(ProductDetailResponse, data, "product detail").model
    logger.info(
        f"Product type code: {detail.product_type_code}, "
        f"Product description: {detail.product_description}"
    )
    return ActiveProduct(
        code=product_code,
        type_code=detail.product_type_code,
        description=detail.product_description,
    )


async def fetch_insured_contact_type(client: UpstreamClient) -> Code:
    entries = await fetch_code_table(client, CodeTable.CONTACT_TYPE)
    return resolve_code(INSURED_CONTACT_TYPE, entries, CodeTable.CONTACT_TYPE.name)


def build_notice(
    request: FNOLRequest,
    product: ActiveProduct,
    contact_type: Code,
    organ_id: int,
) -> Dict[str, Any]:
    """ClaimNotice payload for notice creation."""
    return {
        "@type": "ClaimNotice-ClaimNotice",
        "AccidentTime": request.date_of_loss,
        "NoticeTime": request.date_of_notification,
        "ProductTypeCode": product.type_code,
        "ProductCode": product.code,
        "ProductName": product.description,
        "PolicyNo": request.policy_no,
        "PolicyBranch": organ_id,
        "PolicyHolderName": request.policyholder_name,
        "ContactPerson": request.contact.name,
        "ContactTelephone": request.contact.telephone,
        "AccidentDescription": request.accident_description,
        "NoticeStatus": "CLOSED",
        "ContactType": contact_type,
        "AddressVo": {
            "Country": "US",
            "City": request.accident_address.city,
            "State": request.accident_address.state,
            "AddressLine1": request.accident_address.address_line1,
            "PostCode": request.accident_address.post_code,
        },
    }


async def submit_notice(client: UpstreamClient, notice: Dict[str, Any]) -> NoticeResult:
    data = await client.post("notice/creation", notice)
    created = decode(NoticeCreationResponse, data, "notice creation").model
    result = NoticeResult(case_id=created.case_ids[0], notice_no=created.notice_no)
    logger.info(f"FNOL# {result.notice_no} submitted, Case ID: {result.case_id}")
    return result


async def save_external_ids(
    client: UpstreamClient,
    claim_case: ClaimCase,
    request: FNOLRequest,
) -> Dict[str, Any]:
    ext_claim_no = encode_ext_claim_no(request.new_eco_fnol_id, request.curr_house_claim_id)
    logger.info(f"External Claim #s: {ext_claim_no}")
    return await save_claim(client, claim_case.with_entity_fields(ExtClaimNo=ext_claim_no))


# ============================================================================
# Workflow
# ============================================================================

async def create_fnol(
    request: FNOLRequest,
    client: UpstreamClient,
    settings: Settings,
) -> Dict[str, Any]:
    """
    File a first notice of loss and register the claim.

    Args:
        request: Caller's FNOL request
        client: Claims platform client
        settings: Business configuration (organ id, product tree index)

    Returns:
        The saved ClaimEntity, whose ExtClaimNo links back to the caller

    Raises:
        OrchestrationError: On the first failing step
    """
    run = WorkflowRun("fnol", request.new_eco_fnol_id)

    await run.step("check_not_registered", check_not_registered, client, request.new_eco_fnol_id)
    product_code = await run.step(
        "fetch_product_tree", fetch_product_code, client, settings.PRODUCT_TREE_INDEX
    )
    product = await run.step("fetch_product_detail", fetch_product, client, product_code)
    contact_type = await run.step("fetch_contact_type", fetch_insured_contact_type, client)

    notice = build_notice(request, product, contact_type, settings.ORGAN_ID)
    created = await run.step("submit_notice", submit_notice, client, notice)

    task_id = await run.step("query_claim_tasks", query_first_task, client, created.case_id)
    await run.step("work_on_task", work_on_task, client, task_id)
    claim_case = await run.step("retrieve_claim_case", retrieve_case_form, client, task_id)
    claim_entity = await run.step("save_external_ids", save_external_ids, client, claim_case, request)

    run.finish()
    return claim_entity
