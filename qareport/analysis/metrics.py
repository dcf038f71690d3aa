"""Reduce parsed CSV rows into the report's summary statistics.

Aggregation is deliberately total: every row, however malformed, lands in
exactly one status bucket, one tester bucket and one date bucket.  Missing
or unrecognised values are bucketed as ``Other`` / ``Unknown`` and never
raise.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

STATUS_BUCKETS: tuple[str, ...] = ("Passed", "Failed", "Untested", "Other")
"""Status buckets in display order."""

OTHER_STATUS = "Other"
RECOGNISED_STATUSES: frozenset[str] = frozenset({"Passed", "Failed", "Untested"})
UNKNOWN = "Unknown"

STATUS_FIELD = "Status"
BUGS_FIELD = "bugs"
TESTER_FIELD = "Created by"
CREATED_AT_FIELD = "Created at"
TEST_FIELD = "Test"
TICKET_FIELD = "Issues (case)"

Row = Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class Metrics:
    total_cases: int = 0
    status_counts: dict[str, int] = field(
        default_factory=lambda: dict.fromkeys(STATUS_BUCKETS, 0)
    )
    bug_count: int = 0
    tests_by_tester: dict[str, int] = field(default_factory=dict)
    tests_by_date: dict[str, int] = field(default_factory=dict)
    testers: tuple[str, ...] = ()

    @property
    def pass_rate(self) -> float:
        return pass_rate(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalCases": self.total_cases,
            "statusCounts": dict(self.status_counts),
            "bugCount": self.bug_count,
            "testsByTester": dict(self.tests_by_tester),
            "testsByDate": dict(self.tests_by_date),
            "testers": list(self.testers),
        }


def _field_text(row: Row, key: str) -> str:
    value = row.get(key)
    if value is None:
        return ""
    return str(value)


def status_bucket(raw_status: object) -> str:
    """Return the bucket for a row status.

    Matching is exact after trimming: ``"failed"`` is not ``"Failed"`` and
    falls into ``Other``.
    """
    status = str(raw_status if raw_status is not None else "").strip()
    if status in RECOGNISED_STATUSES:
        return status
    return OTHER_STATUS


def tester_key(row: Row) -> str:
    return _field_text(row, TESTER_FIELD) or UNKNOWN


def date_key(row: Row) -> str:
    created_at = _field_text(row, CREATED_AT_FIELD)
    if not created_at:
        return UNKNOWN
    return created_at.split("T", 1)[0]


def has_bug(row: Row) -> bool:
    return bool(_field_text(row, BUGS_FIELD).strip())


def aggregate(rows: Iterable[Row]) -> Metrics:
    """Build :class:`Metrics` from a sequence of row mappings."""
    status_counts = dict.fromkeys(STATUS_BUCKETS, 0)
    tests_by_tester: dict[str, int] = {}
    tests_by_date: dict[str, int] = {}
    total = 0
    bugs = 0

    for row in rows:
        total += 1
        status_counts[status_bucket(row.get(STATUS_FIELD))] += 1
        if has_bug(row):
            bugs += 1
        tester = tester_key(row)
        tests_by_tester[tester] = tests_by_tester.get(tester, 0) + 1
        day = date_key(row)
        tests_by_date[day] = tests_by_date.get(day, 0) + 1

    return Metrics(
        total_cases=total,
        status_counts=status_counts,
        bug_count=bugs,
        tests_by_tester=tests_by_tester,
        tests_by_date=tests_by_date,
        testers=tuple(tests_by_tester),
    )


def percentage(count: int, total: int, places: int) -> float:
    """``count / total`` as a percentage rounded to *places*; 0 when total is 0."""
    if total <= 0:
        return 0.0
    return round((count / total) * 100.0, places)


def percentages(counts: Mapping[str, int], places: int = 2) -> dict[str, float]:
    """Share of each category relative to the sum of all *counts*."""
    total = sum(counts.values())
    return {key: percentage(value, total, places) for key, value in counts.items()}


def pass_rate(metrics: Metrics) -> float:
    """Passed share of all cases, one decimal place."""
    return percentage(metrics.status_counts.get("Passed", 0), metrics.total_cases, 1)
