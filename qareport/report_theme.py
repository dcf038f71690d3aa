from __future__ import annotations

# Print-friendly palette used by every report page.
REPORT_COLORS = {
    "brand": "#2d2e80",
    "ink": "#000000",
    "text_secondary": "#495057",
    "text_muted": "#6c757d",
    "border": "#dee2e6",
    "surface": "#f8f9fa",
    "panel": "#ffffff",
    "table_header_bg": "#2d2e80",
    "table_header_text": "#ffffff",
    "table_zebra_bg": "#f8f9fa",
    "danger": "#dc3545",
}

# General-status labels are matched case-sensitively after "_" -> " ".
GENERAL_STATUS_COLORS = {
    "PASSED": "#4caf50",
    "FAILED": "#f44336",
    "PASSED WITH ISSUES": "#ff9800",
}

# Row statuses are matched case-insensitively.
TEST_STATUS_COLORS = {
    "passed": "#4caf50",
    "failed": "#f44336",
    "untested": "#ff9800",
}

DEFAULT_TEXT_COLOR = "#000000"

# Pass-rate banding: (minimum percent, color), checked top-down.
PASS_RATE_BANDS = (
    (80.0, "#28a745"),
    (60.0, "#ffc107"),
    (0.0, "#dc3545"),
)

# Breakdown panel colors per status bucket.
BREAKDOWN_COLORS = {
    "Passed": "#28a745",
    "Failed": "#dc3545",
    "Untested": "#ffc107",
    "Other": "#6c757d",
}

# Slice colors for the status distribution chart, in bucket order.
CHART_STATUS_COLORS = {
    "Passed": "#4caf50",
    "Failed": "#f44336",
    "Untested": "#ff9800",
    "Other": "#9e9e9e",
}

CHART_SERIES_COLOR = "#2196f3"
