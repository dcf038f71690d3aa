"""qareport.analysis – pure aggregation of parsed CSV rows.

Nothing here touches reportlab; the renderer only consumes :class:`Metrics`.
"""

from .metrics import (
    STATUS_BUCKETS,
    Metrics,
    aggregate,
    pass_rate,
    percentage,
    percentages,
    status_bucket,
)

__all__ = [
    "STATUS_BUCKETS",
    "Metrics",
    "aggregate",
    "pass_rate",
    "percentage",
    "percentages",
    "status_bucket",
]
