"""
fleetdesk/services/summary.py

Aggregation of per-row import outcomes into the end-of-run summary.
"""

from __future__ import annotations

from collections.abc import Iterable

from fleetdesk.domain.imports import ImportOutcome, ImportSummary, RowError


def summarize(outcomes: Iterable[ImportOutcome]) -> ImportSummary:
    """
    Count outcomes and flatten their messages into ``(row, message)`` pairs.

    Warnings on successful rows are flattened too, so an operator sees a
    street that was not linked even though the driver was created.
    """

    collected = tuple(outcomes)
    succeeded = sum(1 for outcome in collected if outcome.succeeded)
    errors = tuple(
        RowError(row=outcome.row, message=message)
        for outcome in collected
        for message in outcome.errors
    )
    return ImportSummary(
        total=len(collected),
        succeeded=succeeded,
        failed=len(collected) - succeeded,
        outcomes=collected,
        errors=errors,
    )


def error_log_rows(summary: ImportSummary) -> list[dict[str, object]]:
    return [{"row": error.row, "message": error.message} for error in summary.errors]
