"""
Claim Case document

The claims platform's claim document is fetched, amended and resubmitted
several times within one workflow. ClaimCase holds it as a value: readers
get typed accessors, and every amendment returns a new ClaimCase built from
a deep copy, so each step's input stays exactly what the previous step
produced.
"""
import copy
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from claim_orch.services.upstream.errors import CodeLookupError, UpstreamLogicalError


CLAIMANT_ROLE = "01"

_MISSING = object()


def _dig(document: Any, path: tuple) -> Any:
    node = document
    for key in path:
        try:
            node = node[key]
        except (KeyError, IndexError, TypeError):
            return _MISSING
    return node


@dataclass(frozen=True)
class ClaimCase:
    """Immutable view over a claim case document."""

    document: Dict[str, Any]

    @classmethod
    def from_response(cls, data: Any, what: str = "claim case") -> "ClaimCase":
        """
        Adopt an upstream body as a claim case.

        Raises:
            UpstreamLogicalError: If the body has no ClaimEntity object
        """
        if not isinstance(data, dict) or not isinstance(data.get("ClaimEntity"), dict):
            raise UpstreamLogicalError(f"{what} has no ClaimEntity", response=data)
        return cls(document=copy.deepcopy(data))

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self.document)

    # ------------------------------------------------------------------
    # Readers
    # ------------------------------------------------------------------

    def require(self, *path: Any) -> Any:
        """Return a deep copy of the value at ``path`` or fail."""
        value = _dig(self.document, path)
        if value is _MISSING or value is None:
            dotted = ".".join(str(p) for p in path)
            raise UpstreamLogicalError(f"Claim case is missing {dotted}", response=self.document)
        return copy.deepcopy(value)

    def get(self, *path: Any, default: Any = None) -> Any:
        value = _dig(self.document, path)
        return default if value is _MISSING else copy.deepcopy(value)

    @property
    def claim_entity(self) -> Dict[str, Any]:
        return self.require("ClaimEntity")

    @property
    def claim_no(self) -> Optional[str]:
        return self.get("ClaimEntity", "ClaimNo")

    @property
    def policy_no(self) -> Optional[str]:
        return self.get("ClaimEntity", "PolicyNo")

    @property
    def product_code(self) -> Any:
        return self.require("ClaimEntity", "ProductCode")

    @property
    def insured_id(self) -> Any:
        return self.require("ClaimEntity", "PolicyEntity", "InsuredList", 0, "@pk")

    @property
    def first_claim_party(self) -> Dict[str, Any]:
        return self.require("ClaimEntity", "ClaimPartyList", 0)

    @property
    def claimant_id(self) -> Any:
        return self.require("ClaimEntity", "ClaimPartyList", 0, "@pk")

    def records(self, *path: Any) -> List[Dict[str, Any]]:
        """Objects of the list at ``path``; an absent or null list is empty."""
        value = self.get(*path, default=None)
        if value is None:
            return []
        dotted = ".".join(str(p) for p in path)
        if not isinstance(value, list):
            raise UpstreamLogicalError(f"Claim case {dotted} is not a list", response=self.document)
        if not all(isinstance(entry, dict) for entry in value):
            raise UpstreamLogicalError(f"Claim case {dotted} has a non-object entry", response=self.document)
        return value

    def owner_id(self, real_name: str) -> Any:
        """UserId of the claim owner whose display name is ``real_name``."""
        for owner in self.records("ClaimEntity", "OwnerList"):
            if owner.get("RealName") == real_name:
                return owner.get("UserId")
        raise CodeLookupError("OwnerList", real_name)

    def party_with_role(self, role: str = CLAIMANT_ROLE) -> Dict[str, Any]:
        for party in self.records("ClaimEntity", "ClaimPartyList"):
            if party.get("PartyRole") == role:
                return party
        raise CodeLookupError("ClaimPartyList.PartyRole", role)

    def accident_address_line(self) -> str:
        """Single-line accident address: ``line1, city, state postcode``."""
        address = self.require("ClaimEntity", "AddressVo")
        if not isinstance(address, dict):
            raise UpstreamLogicalError("Claim case AddressVo is not an object", response=self.document)
        return (
            f"{address.get('AddressLine1')}, {address.get('City')}, "
            f"{address.get('State')} {address.get('PostCode')}"
        )

    # ------------------------------------------------------------------
    # Amendments
    # ------------------------------------------------------------------

    def with_entity_fields(self, **fields: Any) -> "ClaimCase":
        """New case with top-level ClaimEntity fields replaced."""
        document = self.to_dict()
        document["ClaimEntity"].update(copy.deepcopy(fields))
        return ClaimCase(document=document)

    def with_claim_entity(self, claim_entity: Dict[str, Any]) -> "ClaimCase":
        """New case whose ClaimEntity is replaced wholesale."""
        if not isinstance(claim_entity, dict):
            raise UpstreamLogicalError("ClaimEntity must be an object", response=claim_entity)
        document = self.to_dict()
        document["ClaimEntity"] = copy.deepcopy(claim_entity)
        return ClaimCase(document=document)

    def with_claim_data(self, **fields: Any) -> "ClaimCase":
        """New case with ClaimData fields replaced."""
        document = self.to_dict()
        claim_data = document.get("ClaimData")
        if not isinstance(claim_data, dict):
            claim_data = {}
        claim_data.update(copy.deepcopy(fields))
        document["ClaimData"] = claim_data
        return ClaimCase(document=document)
