"""
Services package
"""
from claim_orch.services.claim_case import ClaimCase
from claim_orch.services.claim_lookup import (
    encode_ext_claim_no,
    decode_ext_claim_no,
    search_claims,
    query_current_house_id,
)
from claim_orch.services.reference_data import (
    CodeTable,
    fetch_code_table,
    resolve_code,
    classify_severity,
)

__all__ = [
    "ClaimCase",
    "encode_ext_claim_no",
    "decode_ext_claim_no",
    "search_claims",
    "query_current_house_id",
    "CodeTable",
    "fetch_code_table",
    "resolve_code",
    "classify_severity",
]
