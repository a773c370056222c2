"""Tests for data models."""

import pytest
from pydantic import ValidationError

from blob_inventory.schemas import (
    InvalidTargetLine,
    ListingPage,
    ObjectProperties,
    ObjectRecord,
    RunSummary,
    ServiceError,
    Target,
    TargetError,
    TargetResult,
    TargetState,
)


class TestTarget:
    """Test target validation."""

    def test_target_creation(self):
        target = Target(account="acct", container="cont")
        assert target.account == "acct"
        assert target.container == "cont"
        assert str(target) == "acct/cont"

    def test_target_is_immutable(self):
        target = Target(account="acct", container="cont")
        with pytest.raises(ValidationError):
            target.account = "other"

    def test_target_requires_both_fields(self):
        with pytest.raises(ValidationError):
            Target(account="acct")  # Missing container

    def test_target_rejects_empty_values(self):
        with pytest.raises(ValidationError):
            Target(account="", container="cont")

    def test_target_ignores_unknown_fields(self):
        target = Target(account="acct", container="c", note="x")
        assert target == Target(account="acct", container="c")

    @pytest.mark.parametrize(
        "account",
        ["evil.example/x#", "Acct1", "ab", "a" * 25, "acct-1", "acct@host"],
    )
    def test_target_rejects_invalid_account_names(self, account):
        """Test that only valid storage account names reach the endpoint host."""
        with pytest.raises(ValidationError):
            Target(account=account, container="cont")


class TestObjectRecord:
    """Test record defaults."""

    def test_property_defaults(self):
        props = ObjectProperties()
        assert props.access_tier == "None"
        assert props.resource_type == ""
        assert props.content_length == ""

    def test_record_default_properties(self):
        record = ObjectRecord(name="a.txt")
        assert record.properties == ObjectProperties()


class TestListingPage:
    """Test page pagination state."""

    def test_has_more_with_marker(self):
        assert ListingPage(next_marker="m1").has_more is True

    def test_no_more_without_marker(self):
        assert ListingPage().has_more is False

    def test_error_page_has_no_more(self):
        page = ListingPage(next_marker="m1", error=ServiceError(code="ServerBusy"))
        assert page.has_more is False


class TestRunSummary:
    """Test run aggregation."""

    def test_totals(self):
        a = Target(account="acct", container="1")
        b = Target(account="acct", container="2")
        summary = RunSummary(
            results=(
                TargetResult(target=a, state=TargetState.DONE, record_count=5),
                TargetResult(
                    target=b,
                    state=TargetState.FATAL,
                    record_count=2,
                    error=TargetError(code="DecodeError", message="bad"),
                ),
            ),
            invalid_lines=(InvalidTargetLine(line_number=3, line="x", reason="bad"),),
        )

        assert summary.total_records == 7
        assert [r.target for r in summary.succeeded] == [a]
        assert [r.target for r in summary.failed] == [b]
