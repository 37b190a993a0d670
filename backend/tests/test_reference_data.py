"""
Tests for code table resolution and damage severity bucketing.
"""

import pytest

from claim_orch.services.reference_data import (
    CodeTable,
    Severity,
    SeverityThresholds,
    classify_severity,
    fetch_code_table,
    resolve_code,
    resolve_severity,
)
from claim_orch.services.upstream.errors import CodeLookupError, UpstreamLogicalError
from claim_orch.services.upstream.models import CodeTableEntry


def entries(*pairs):
    return [CodeTableEntry(Description=d, Code=c) for d, c in pairs]


class TestResolveCode:
    """Test description to code translation."""

    def test_exact_match(self):
        """Test the matching entry's code is returned."""
        table = entries(("Claimant", "1"), ("Insured", "2"))
        assert resolve_code("Insured", table, "CONTACT_TYPE") == "2"

    def test_first_match_wins(self):
        """Test duplicate descriptions resolve to the first entry."""
        table = entries(("Fire", "CL01"), ("Fire", "CL99"))
        assert resolve_code("Fire", table) == "CL01"

    def test_match_is_case_sensitive(self):
        """Test a description differing only in case does not match."""
        with pytest.raises(CodeLookupError) as exc_info:
            resolve_code("insured", entries(("Insured", "2")), "CONTACT_TYPE")
        assert exc_info.value.table == "CONTACT_TYPE"
        assert exc_info.value.description == "insured"

    def test_whitespace_is_not_trimmed(self):
        """Test surrounding whitespace prevents a match."""
        with pytest.raises(CodeLookupError):
            resolve_code("Insured ", entries(("Insured", "2")))

    def test_empty_table(self):
        """Test lookup in an empty table fails."""
        with pytest.raises(CodeLookupError):
            resolve_code("Insured", [])


class TestClassifySeverity:
    """Test severity bucketing against the two thresholds."""

    @pytest.mark.parametrize(
        "loss,expected",
        [
            (0, Severity.SMALL),
            (4999.99, Severity.SMALL),
            (5000, Severity.MEDIUM),
            (19999.99, Severity.MEDIUM),
            (20000, Severity.HIGH),
            (1_000_000, Severity.HIGH),
        ],
    )
    def test_buckets(self, loss, expected):
        """Test a loss equal to a threshold falls into the higher bucket."""
        assert classify_severity(loss, 5000, 20000) is expected

    def test_thresholds_from_entries(self):
        """Test MediumLoss and HighLoss are read as numbers."""
        thresholds = SeverityThresholds.from_entries(
            entries(("HighLoss", "20000"), ("MediumLoss", "5000.5"))
        )
        assert thresholds.medium_loss == 5000.5
        assert thresholds.high_loss == 20000.0

    def test_missing_threshold(self):
        """Test a table without HighLoss fails the lookup."""
        with pytest.raises(CodeLookupError) as exc_info:
            SeverityThresholds.from_entries(entries(("MediumLoss", "5000")))
        assert exc_info.value.description == "HighLoss"

    def test_non_numeric_threshold(self):
        """Test a non-numeric threshold is reported as an upstream fault."""
        with pytest.raises(UpstreamLogicalError):
            SeverityThresholds.from_entries(entries(("MediumLoss", "lots"), ("HighLoss", "20000")))

    def test_resolve_severity_code(self):
        """Test the severity label is translated through the severity table."""
        severities = entries(("Small", "S"), ("Medium", "M"), ("High", "H"))
        thresholds = SeverityThresholds(medium_loss=5000, high_loss=20000)
        assert resolve_severity(25000, severities, thresholds) == "H"


class TestFetchCodeTable:
    """Test code table retrieval from the claims platform."""

    @pytest.mark.asyncio
    async def test_list_endpoint(self, platform, claims_client):
        """Test an unfiltered table is fetched with GET on the list endpoint."""
        platform.ok("GET", "public/codetable/data/list/1026", [
            {"Description": "Claimant", "Code": "1", "Extra": "kept"},
        ])

        result = await fetch_code_table(claims_client, CodeTable.CONTACT_TYPE)

        assert platform.calls == [("GET", "public/codetable/data/list/1026")]
        assert result[0].code == "1"
        assert result[0].to_upstream()["Extra"] == "kept"

    @pytest.mark.asyncio
    async def test_condition_endpoint(self, platform, claims_client):
        """Test a product-line table is fetched with POST and the line code."""
        platform.ok("POST", "public/codetable/data/condition/1006", [
            {"Description": "Fire", "Code": "CL01"},
        ])

        result = await fetch_code_table(claims_client, CodeTable.CAUSE_OF_LOSS, product_line_code="1")

        assert platform.bodies_for("public/codetable/data/condition/1006") == [
            {"PRODUCT_LINE_CODE": "1"}
        ]
        assert resolve_code("Fire", result) == "CL01"

    @pytest.mark.asyncio
    async def test_preserves_order(self, platform, claims_client):
        """Test entries come back in upstream order."""
        platform.ok("GET", "public/codetable/data/list/1000", [
            {"Description": "Partial", "Code": "0"},
            {"Description": "Final", "Code": "1"},
        ])

        result = await fetch_code_table(claims_client, CodeTable.PARTIAL_FINAL)

        assert [e.description for e in result] == ["Partial", "Final"]

    @pytest.mark.asyncio
    async def test_non_list_body(self, platform, claims_client):
        """Test a body that is not a list of entries is rejected."""
        platform.ok("GET", "public/codetable/data/list/1000", {"unexpected": True})

        with pytest.raises(UpstreamLogicalError):
            await fetch_code_table(claims_client, CodeTable.PARTIAL_FINAL)
