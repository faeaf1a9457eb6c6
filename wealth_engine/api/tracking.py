"""Shared error mapping, logging and metrics around a calculator call"""

import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from fastapi import HTTPException

from wealth_engine.domain.exceptions import DomainException
from wealth_engine.infrastructure.observability.logging import log_calculation
from wealth_engine.infrastructure.observability.metrics import record_calculation


@contextmanager
def tracked_calculation(request_id: str, calculation: str) -> Iterator[Dict[str, Any]]:
    """
    Time a calculator call, then log and count its outcome.

    Callers may add fields to the yielded dict; they are attached to the log
    record. Domain validation errors become 422, anything else 500.
    """
    start_time = time.perf_counter()
    log_fields: Dict[str, Any] = {}

    def finish(outcome: str, error: Optional[str] = None) -> None:
        duration = time.perf_counter() - start_time
        record_calculation(calculation, outcome, duration)
        log_calculation(request_id, calculation, outcome, duration * 1000, error=error, **log_fields)

    try:
        yield log_fields

    except DomainException as e:
        finish("invalid", str(e))
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        finish("error", repr(e))
        raise HTTPException(status_code=500, detail="Internal server error")

    finish("ok")
