"""
Claim handling calls on the claims platform: workflow tasks, case forms,
policy attachment, registration and coverage lookup.
"""
from typing import Any, Dict, List

from claim_orch.core.logging import get_logger
from claim_orch.services.claim_case import ClaimCase
from claim_orch.services.upstream.client import UpstreamClient
from claim_orch.services.upstream.models import (
    ClaimTasksResponse,
    Code,
    CoverageItem,
    CoverageListResponse,
    ModelEnvelope,
    decode,
)
from claim_orch.services.upstream.policy_template import build_policy_entity

logger = get_logger(__name__)


# ============================================================================
# Workflow tasks
# ============================================================================

async def query_first_task(client: UpstreamClient, case_id: Code) -> Code:
    """Id of the first open workflow task on a case."""
    data = await client.get(f"workflow/claimTasks/{case_id}/false")
    tasks = decode(ClaimTasksResponse, data, "claim tasks")
    task_id = tasks.model.load_claim_tasks[0].id
    logger.info(f"Case {case_id}: task {task_id}")
    return task_id


async def work_on_task(client: UpstreamClient, task_id: Code) -> None:
    """Claim a task from the shared pool so its case form can be opened."""
    # Only the status matters; the body may be empty
    await client.post(
        "workflow/workOnAssignForPool",
        {"TaskInstanceId": task_id, "AssignTo": "pool"},
        decode=False,
    )
    logger.info(f"Task {task_id} worked on")


# ============================================================================
# Case forms
# ============================================================================

async def retrieve_case_form(client: UpstreamClient, task_id: Code) -> ClaimCase:
    """Claim case document for a worked-on task."""
    data = await client.get(f"claimhandling/caseForm/{task_id}/0")
    claim_case = ClaimCase.from_response(data, f"case form for task {task_id}")
    logger.info(f"Claim # {claim_case.claim_no} retrieved for task {task_id}")
    return claim_case


async def retrieve_claim_by_case_id(client: UpstreamClient, case_id: Code) -> Dict[str, Any]:
    """ClaimEntity of a case, looked up without a task."""
    logger.info(f"Querying Claim by ID {case_id}")
    data = await client.get(f"claimhandling/caseForm/0/{case_id}")
    return ClaimCase.from_response(data, f"case form for case {case_id}").claim_entity


# ============================================================================
# Policy, registration and coverage
# ============================================================================

async def attach_policy(client: UpstreamClient, claim_case: ClaimCase, case_id: Code) -> ClaimCase:
    """
    Attach the policy template and adopt the entity the platform returns.

    Returns:
        New claim case whose ClaimEntity is the platform's response Model
    """
    with_policy = claim_case.with_entity_fields(PolicyEntity=build_policy_entity(case_id))
    data = await client.post("claimhandling/retrievePolicy/", with_policy.to_dict())
    envelope = decode(ModelEnvelope, data, "retrieve policy")
    logger.info(f"Policy attached to claim # {claim_case.claim_no}")
    return with_policy.with_claim_entity(envelope.model)


async def save_claim(client: UpstreamClient, claim_case: ClaimCase) -> Dict[str, Any]:
    """Save a claim without submitting it; returns the saved ClaimEntity."""
    data = await client.post("registration/saveClaim", claim_case.to_dict())
    envelope = decode(ModelEnvelope, data, "save claim")
    saved = ClaimCase.from_response(envelope.model, "saved claim")
    logger.info(f"Claim # {saved.claim_no} saved")
    return saved.claim_entity


async def submit_claim(client: UpstreamClient, claim_case: ClaimCase) -> ClaimCase:
    """Submit claim registration; returns the registered claim case."""
    data = await client.post("registration/submitClaim", claim_case.to_dict())
    envelope = decode(ModelEnvelope, data, "submit claim")
    registered = ClaimCase.from_response(envelope.model, "registered claim")
    logger.info(f"Claim # {registered.claim_no} registered successfully")
    return registered


async def fetch_coverage_list(
    client: UpstreamClient,
    subclaim_type: Code,
    product_code: Code,
    insured_id: Code,
) -> List[CoverageItem]:
    """Selectable coverages for a subclaim type on the insured object."""
    data = await client.get(
        f"claimhandling/subclaim/coverageList/{subclaim_type}/{product_code}/{insured_id}"
    )
    coverages = decode(CoverageListResponse, data, "coverage list").model
    logger.info(f"Coverage List length: {len(coverages)}")
    return coverages
