"""
Reference Data Resolver

Fetches claims platform code tables and translates human-readable
descriptions into the codes the platform accepts. Also holds the damage
severity bucketing, the only numeric decision in the workflows.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from claim_orch.core.logging import get_logger
from claim_orch.services.upstream.client import UpstreamClient
from claim_orch.services.upstream.errors import CodeLookupError, UpstreamLogicalError
from claim_orch.services.upstream.models import Code, CodeTableEntry, decode_code_table

logger = get_logger(__name__)


class CodeTable(str, Enum):
    """Code table ids on the claims platform."""
    PARTIAL_FINAL = "1000"
    CAUSE_OF_LOSS = "1006"
    SUBCLAIM_TYPE = "1007"
    CONTACT_TYPE = "1026"
    DAMAGE_TYPE = "1027"
    DAMAGE_SEVERITY = "1050"
    SEVERITY_THRESHOLD = "74915434"
    PAYMENT_METHOD = "75283381"


class Severity(str, Enum):
    """Severity labels as they appear in the damage severity table."""
    SMALL = "Small"
    MEDIUM = "Medium"
    HIGH = "High"


MEDIUM_LOSS = "MediumLoss"
HIGH_LOSS = "HighLoss"


async def fetch_code_table(
    client: UpstreamClient,
    table: CodeTable,
    product_line_code: Optional[str] = None,
) -> List[CodeTableEntry]:
    """
    Fetch a code table in upstream order.

    Args:
        client: Claims platform client
        table: Code table to fetch
        product_line_code: When given, the table is filtered by product line
            through the condition endpoint

    Returns:
        Ordered list of code table entries
    """
    table = CodeTable(table)
    table_id = table.value
    if product_line_code is None:
        data = await client.get(f"public/codetable/data/list/{table_id}")
    else:
        data = await client.post(
            f"public/codetable/data/condition/{table_id}",
            {"PRODUCT_LINE_CODE": product_line_code},
        )

    entries = decode_code_table(data, table.name)
    logger.info(f"Code table {table.name} ({table_id}): {len(entries)} entries")
    return entries


def resolve_code(
    description: str,
    entries: Iterable[CodeTableEntry],
    table: str = "code table",
) -> Code:
    """
    Translate a description into its code.

    Matching is exact and case-sensitive; the first matching entry wins.

    Raises:
        CodeLookupError: If no entry's description equals ``description``
    """
    for entry in entries:
        if entry.description == description:
            return entry.code
    logger.error(f"No {table} entry matches {description!r}")
    raise CodeLookupError(table, description)


@dataclass(frozen=True)
class SeverityThresholds:
    """Loss amounts at which severity moves up a bucket."""
    medium_loss: float
    high_loss: float

    @classmethod
    def from_entries(cls, entries: List[CodeTableEntry]) -> "SeverityThresholds":
        table = CodeTable.SEVERITY_THRESHOLD.name
        medium = resolve_code(MEDIUM_LOSS, entries, table)
        high = resolve_code(HIGH_LOSS, entries, table)
        try:
            return cls(medium_loss=float(medium), high_loss=float(high))
        except ValueError as exc:
            raise UpstreamLogicalError(
                f"Severity thresholds are not numeric: {MEDIUM_LOSS}={medium!r}, {HIGH_LOSS}={high!r}",
                response=[e.to_upstream() for e in entries],
            ) from exc


def classify_severity(estimated_loss: float, medium_loss: float, high_loss: float) -> Severity:
    """
    Bucket an estimated loss.

    Thresholds are exclusive upper bounds: a loss equal to a threshold
    falls into the higher bucket.
    """
    if estimated_loss < medium_loss:
        return Severity.SMALL
    if estimated_loss < high_loss:
        return Severity.MEDIUM
    return Severity.HIGH


def resolve_severity(
    estimated_loss: float,
    severity_entries: List[CodeTableEntry],
    thresholds: SeverityThresholds,
) -> Code:
    """Classify a loss and translate the label through the severity table."""
    severity = classify_severity(estimated_loss, thresholds.medium_loss, thresholds.high_loss)
    logger.info(
        f"Estimated loss {estimated_loss} classified as {severity.value} "
        f"(medium={thresholds.medium_loss}, high={thresholds.high_loss})"
    )
    return resolve_code(severity.value, severity_entries, CodeTable.DAMAGE_SEVERITY.name)
