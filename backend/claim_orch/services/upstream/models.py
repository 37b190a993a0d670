"""
Typed records for the claims platform responses the workflows consume.

Only the fields the workflows read are declared; everything else rides along
as extra data so documents can be resubmitted unchanged. A body that does not
fit its record is reported as an UpstreamLogicalError.
"""
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from claim_orch.services.upstream.errors import UpstreamLogicalError


Code = Union[str, int]

T = TypeVar("T")


class UpstreamModel(BaseModel):
    """Base record: accepts upstream PascalCase keys, keeps unknown keys."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_upstream(self) -> Dict[str, Any]:
        """Dump back to the upstream wire shape."""
        return self.model_dump(by_alias=True, exclude_unset=True)


# ============================================================================
# Code tables
# ============================================================================

class CodeTableEntry(UpstreamModel):
    description: str = Field(alias="Description")
    code: Code = Field(alias="Code")


# ============================================================================
# Product
# ============================================================================

class ProductTreeNode(UpstreamModel):
    id: Code


class ProductTreeResponse(UpstreamModel):
    model: List[ProductTreeNode] = Field(alias="Model")


class ProductDetail(UpstreamModel):
    product_type_code: Code = Field(alias="ProductTypeCode")
    product_description: str = Field(alias="ProductDescription")


class ProductDetailResponse(UpstreamModel):
    model: ProductDetail = Field(alias="Model")


# ============================================================================
# Notice and workflow tasks
# ============================================================================

class NoticeCreation(UpstreamModel):
    case_ids: List[Code] = Field(alias="CaseIds", min_length=1)
    notice_no: Optional[str] = Field(default=None, alias="NoticeNo")


class NoticeCreationResponse(UpstreamModel):
    model: NoticeCreation = Field(alias="Model")


class ClaimTask(UpstreamModel):
    id: Code


class ClaimTaskList(UpstreamModel):
    load_claim_tasks: List[ClaimTask] = Field(alias="loadClaimTasks", min_length=1)


class ClaimTasksResponse(UpstreamModel):
    model: ClaimTaskList = Field(alias="Model")


# ============================================================================
# Claim search
# ============================================================================

class ClaimSearchDoc(UpstreamModel):
    case_id: Code = Field(alias="CaseId")
    ext_claim_no: Optional[str] = Field(default=None, alias="ExtClaimNo")


class ClaimSearchResult(UpstreamModel):
    solr_docs: Optional[List[ClaimSearchDoc]] = Field(default=None, alias="SolrDocs")


class ClaimSearchResponse(UpstreamModel):
    results: Optional[List[ClaimSearchResult]] = Field(default=None, alias="Results")

    @property
    def docs(self) -> List[ClaimSearchDoc]:
        if not self.results:
            return []
        return self.results[0].solr_docs or []


# ============================================================================
# Claim documents
# ============================================================================

class ModelEnvelope(UpstreamModel):
    """Generic ``{"Status": ..., "Model": {...}}`` wrapper."""
    model: Dict[str, Any] = Field(alias="Model")


class CoverageItem(UpstreamModel):
    coverage_name: Optional[str] = Field(default=None, alias="CoverageName")


class CoverageListResponse(UpstreamModel):
    model: List[CoverageItem] = Field(alias="Model")


# ============================================================================
# Settlement
# ============================================================================

class ReserveEntry(UpstreamModel):
    currency_code: Optional[str] = Field(default=None, alias="CurrencyCode")


class PaymentTypeOption(UpstreamModel):
    id: Code
    text: str


class SettlementInfo(UpstreamModel):
    claim_type: Optional[Code] = Field(default=None, alias="ClaimType")
    settle_id: Optional[Code] = Field(default=None, alias="SettleId")


class SettlementLoad(UpstreamModel):
    reserve_structure: List[ReserveEntry] = Field(alias="ReserveStructure", min_length=1)
    payment_type_code_table: List[PaymentTypeOption] = Field(alias="PaymentTypeCodeTable")
    settlement_info: SettlementInfo = Field(alias="SettlementInfo")


class SettlementLoadResponse(UpstreamModel):
    model: SettlementLoad = Field(alias="Model")


class SettlementHistoryEntry(UpstreamModel):
    settle_id: Code = Field(alias="SettleId")


class SettlementHistoryResponse(UpstreamModel):
    model: List[SettlementHistoryEntry] = Field(alias="Model", min_length=1)


class SettlementDetail(UpstreamModel):
    settlement_info: SettlementInfo = Field(alias="SettlementInfo")


class SettlementDetailResponse(UpstreamModel):
    model: SettlementDetail = Field(alias="Model")


# ============================================================================
# Decoding
# ============================================================================

_code_table_adapter = TypeAdapter(List[CodeTableEntry])


def decode(model_cls: Type[T], data: Any, what: str) -> T:
    """Validate an upstream body against its record."""
    try:
        return model_cls.model_validate(data)
    except ValidationError as exc:
        raise UpstreamLogicalError(
            f"Unexpected {what} response: {exc.error_count()} validation error(s)",
            response=data,
        ) from exc


def decode_code_table(data: Any, what: str) -> List[CodeTableEntry]:
    """Validate a code table body (a bare JSON list)."""
    try:
        return _code_table_adapter.validate_python(data)
    except ValidationError as exc:
        raise UpstreamLogicalError(
            f"Unexpected {what} code table: {exc.error_count()} validation error(s)",
            response=data,
        ) from exc
