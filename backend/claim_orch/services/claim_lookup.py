"""
Claim Lookup

Finds a claim on the claims platform by the caller's correlation id. The
link between the two caller ids and the upstream case lives in the claim's
ExtClaimNo field as ``NE:<newEcoFnolId>;CH:<currHouseClaimId>``; the FNOL
workflow writes it and this module reads it back.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from claim_orch.core.logging import get_logger
from claim_orch.services.upstream.client import UpstreamClient
from claim_orch.services.upstream.errors import UnexpectedResultCountError, UpstreamLogicalError
from claim_orch.services.upstream.models import ClaimSearchDoc, ClaimSearchResponse, Code, decode

logger = get_logger(__name__)


NEW_ECO_PREFIX = "NE"
CURR_HOUSE_PREFIX = "CH"


@dataclass(frozen=True)
class ExternalClaimIds:
    """The two caller-side identifiers carried in ExtClaimNo."""
    new_eco_fnol_id: str
    curr_house_claim_id: str


@dataclass(frozen=True)
class ClaimSearchHit:
    """A claim found by correlation id."""
    case_id: Code
    ext_claim_no: str
    new_eco_fnol_id: str
    curr_house_claim_id: str
    document: Dict[str, Any] = field(default_factory=dict, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self.document,
            "newEcoFnolId": self.new_eco_fnol_id,
            "currHouseClaimId": self.curr_house_claim_id,
        }


def encode_ext_claim_no(new_eco_fnol_id: str, curr_house_claim_id: str) -> str:
    """Build the composite ExtClaimNo value."""
    return f"{NEW_ECO_PREFIX}:{new_eco_fnol_id};{CURR_HOUSE_PREFIX}:{curr_house_claim_id}"


def decode_ext_claim_no(ext_claim_no: str) -> ExternalClaimIds:
    """
    Split a composite ExtClaimNo into its two ids.

    Raises:
        UpstreamLogicalError: If the value is not ``NE:<id>;CH:<id>``
    """
    parts = ext_claim_no.split(";") if ext_claim_no else []
    if len(parts) != 2:
        raise UpstreamLogicalError(f"Malformed ExtClaimNo: {ext_claim_no!r}", response=ext_claim_no)

    values = {}
    for part in parts:
        prefix, sep, value = part.partition(":")
        if not sep:
            raise UpstreamLogicalError(f"Malformed ExtClaimNo: {ext_claim_no!r}", response=ext_claim_no)
        values[prefix] = value

    if set(values) != {NEW_ECO_PREFIX, CURR_HOUSE_PREFIX}:
        raise UpstreamLogicalError(f"Malformed ExtClaimNo: {ext_claim_no!r}", response=ext_claim_no)

    return ExternalClaimIds(
        new_eco_fnol_id=values[NEW_ECO_PREFIX],
        curr_house_claim_id=values[CURR_HOUSE_PREFIX],
    )


def build_search_body(correlation_id: str) -> Dict[str, Any]:
    return {
        "Conditions": {},
        "PageNo": 1,
        "PageSize": 10,
        "FuzzyConditions": {"ExtClaimNo": correlation_id},
        "Module": "ClaimCase",
        "SortField": "LastReviewDate",
        "SortType": "DESC",
        "SearchType": 0,
    }


def exact_matches(
    docs: List[ClaimSearchDoc],
    correlation_id: str,
) -> List[Tuple[ClaimSearchDoc, ExternalClaimIds]]:
    """
    Keep the search hits whose ExtClaimNo carries exactly ``correlation_id``.

    The platform matches ExtClaimNo fuzzily, so a search for ``NE12`` also
    returns the claim filed as ``NE:NE123;CH:...``. Hits whose ExtClaimNo
    does not decode were not filed through FNOL and never match.
    """
    matches = []
    for doc in docs:
        try:
            ids = decode_ext_claim_no(doc.ext_claim_no or "")
        except UpstreamLogicalError:
            logger.warning(f"Skipping case {doc.case_id}: unparseable ExtClaimNo {doc.ext_claim_no!r}")
            continue
        if ids.new_eco_fnol_id == correlation_id:
            matches.append((doc, ids))
    return matches


async def search_claims(
    client: UpstreamClient,
    correlation_id: str,
    expected_count: int,
) -> Optional[ClaimSearchHit]:
    """
    Search claims by correlation id and assert the number of matches.

    Only hits whose decoded newEcoFnolId equals ``correlation_id`` count.

    Args:
        client: Claims platform client
        correlation_id: The caller's newEcoFnolId
        expected_count: 0 to assert the claim does not exist yet,
            1 to assert it exists

    Returns:
        None when no claim was expected, otherwise the decoded hit

    Raises:
        UnexpectedResultCountError: If the match count differs from expected
    """
    logger.info(f"Searching claim: {correlation_id}")
    data = await client.post("public/ap00/query/entity", build_search_body(correlation_id))
    docs = decode(ClaimSearchResponse, data, "claim search").docs
    matches = exact_matches(docs, correlation_id)

    count = len(matches)
    logger.info(f"Found {count} claim(s) for {correlation_id} among {len(docs)} search hit(s)")
    if count != expected_count:
        logger.error(f"Expected {expected_count} claim(s) but found {count} claim(s) for {correlation_id}")
        raise UnexpectedResultCountError(correlation_id, expected_count, count)

    if not count:
        return None

    doc, ids = matches[0]
    logger.info(
        f"Claim for {correlation_id}: case {doc.case_id}, "
        f"newEcoFnolId={ids.new_eco_fnol_id}, currHouseClaimId={ids.curr_house_claim_id}"
    )
    return ClaimSearchHit(
        case_id=doc.case_id,
        ext_claim_no=doc.ext_claim_no,
        new_eco_fnol_id=ids.new_eco_fnol_id,
        curr_house_claim_id=ids.curr_house_claim_id,
        document=doc.to_upstream(),
    )


async def query_current_house_id(client: UpstreamClient, correlation_id: str) -> ClaimSearchHit:
    """Look up an existing claim and its current-house claim id."""
    return await search_claims(client, correlation_id, 1)
