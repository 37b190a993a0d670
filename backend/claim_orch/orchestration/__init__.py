"""
Claim workflow orchestration

FNOL and payment workflows as explicit sequences of named steps against the
claims platform.
"""
from claim_orch.orchestration.fnol import create_fnol
from claim_orch.orchestration.payment import create_payment
from claim_orch.orchestration.schemas import FNOLRequest, PaymentRequest
from claim_orch.orchestration.sequencer import WorkflowRun

__all__ = [
    "create_fnol",
    "create_payment",
    "FNOLRequest",
    "PaymentRequest",
    "WorkflowRun",
]
