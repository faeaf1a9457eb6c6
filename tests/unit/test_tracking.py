"""Unit tests for the calculator error mapping shared by the routers"""

import pytest
from fastapi import HTTPException
from prometheus_client import REGISTRY
from wealth_engine.api.tracking import tracked_calculation
from wealth_engine.domain.exceptions import InvalidInputError


def _count(calculation: str, outcome: str) -> float:
    labels = {"calculation": calculation, "outcome": outcome}
    return REGISTRY.get_sample_value("wealth_engine_calculation_total", labels) or 0


def test_successful_calculation_is_counted():
    before = _count("tracking_ok", "ok")

    with tracked_calculation("req-1", "tracking_ok") as log_fields:
        log_fields["filing_status"] = "single"

    assert _count("tracking_ok", "ok") == before + 1


def test_domain_error_maps_to_422_and_is_counted():
    before = _count("tracking_invalid", "invalid")

    with pytest.raises(HTTPException) as exc_info:
        with tracked_calculation("req-2", "tracking_invalid"):
            raise InvalidInputError("gross_pay must be greater than 0, got 0")

    assert exc_info.value.status_code == 422
    assert exc_info.value.detail == "gross_pay must be greater than 0, got 0"
    assert _count("tracking_invalid", "invalid") == before + 1


def test_unexpected_error_maps_to_500_and_is_counted(caplog):
    before = _count("tracking_error", "error")

    with pytest.raises(HTTPException) as exc_info:
        with tracked_calculation("req-3", "tracking_error"):
            raise HTTPException(status_code=404, detail="Not found")

    assert exc_info.value.status_code == 500
    assert _count("tracking_error", "error") == before + 1
    assert caplog.records[-1].calculation == "tracking_error"
