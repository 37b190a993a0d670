"""
Policy skeleton attached to a claim before registration.

The claims platform has no policy admin behind it in this integration, so
the payment workflow attaches this fixed structure and lets the
``retrievePolicy`` call expand it into the claim's PolicyEntity.
"""
import copy
from typing import Any, Dict


POLICY_TEMPLATE: Dict[str, Any] = {
    "@type": "ClaimPolicy-ClaimPolicy",
    "PolicyNo": None,
    "ProductCode": None,
    "PolicyType": "1",
    "OrgCode": "10002",
    "CurrencyCode": "USD",
    "PolicyStatus": "1",
    "EffectiveDate": None,
    "ExpireDate": None,
    "PolicyCustomerList": [
        {
            "@type": "ClaimPolicyCustomer-ClaimPolicyCustomer",
            "IsPolicyHolder": "Y",
            "CustomerName": None,
        },
    ],
    "InsuredList": [
        {
            "@type": "ClaimPolicyInsured-ClaimPolicyInsured",
            "InsuredCategory": "1",
            "InsuredName": None,
            "PolicyCoverageList": [],
        },
    ],
    "caseId": None,
}


def build_policy_entity(case_id: Any) -> Dict[str, Any]:
    """Return a fresh copy of the policy template bound to a case."""
    policy = copy.deepcopy(POLICY_TEMPLATE)
    policy["caseId"] = case_id
    return policy
