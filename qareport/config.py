from __future__ import annotations

import logging
import os
from copy import deepcopy
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .report.charts import CHART_KINDS
from .report.layout import ROW_CAP, SUMMARY_RATIOS
from .report.report_data import PAGE_SIZES, ReportOptions, resolve_page_size
from .report.theme import ReportTheme, load_theme

PACKAGE_DIR = Path(__file__).resolve().parent
PROJECT_DIR = PACKAGE_DIR.parent
"""Root of the checkout; ``config.yaml`` is looked up here by default."""

CONFIG_ENV_VAR = "QAREPORT_CONFIG"
LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024
VALID_ORIENTATIONS: frozenset[str] = frozenset({"landscape", "portrait"})
VALID_LOG_LEVELS: frozenset[str] = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

DEFAULT_CONFIG: dict[str, Any] = {
    "server": {"host": "0.0.0.0", "port": 3000},
    "report": {
        "page_size": "A4",
        "orientation": "landscape",
        "margin": 40,
        "summary_ratios": list(SUMMARY_RATIOS),
        "row_cap": ROW_CAP,
        "chart": "pie",
        "include_tester_chart": True,
        "output_dir": "reports",
        "logo_path": None,
        "render_timeout_s": 60.0,
    },
    "fonts": {
        "primary": None,
        "secondary": None,
    },
    "uploads": {
        "dir": "uploads",
        "max_bytes": DEFAULT_MAX_UPLOAD_BYTES,
    },
    "logging": {"level": "INFO"},
}


def documented_default_config() -> dict[str, Any]:
    """Return runtime defaults in the shape documented by config.example.yaml."""
    return deepcopy(DEFAULT_CONFIG)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _resolve_config_path(path_text: str, config_path: Path) -> Path:
    path = Path(path_text)
    if path.is_absolute():
        return path
    return config_path.resolve().parent / path


def _optional_path(value: object, config_path: Path) -> Path | None:
    if value is None or not str(value).strip():
        return None
    return _resolve_config_path(str(value), config_path)


@dataclass(slots=True)
class ServerConfig:
    host: str
    port: int

    def __post_init__(self) -> None:
        if not isinstance(self.port, int) or not (1 <= self.port <= 65535):
            raise ValueError(f"ServerConfig.port must be 1-65535, got {self.port!r}")


@dataclass(slots=True)
class ReportConfig:
    page_size: str
    orientation: str
    margin: float
    summary_ratios: tuple[float, float, float]
    row_cap: int
    chart: str
    include_tester_chart: bool
    output_dir: Path
    logo_path: Path | None
    render_timeout_s: float

    def __post_init__(self) -> None:
        self.page_size = self.page_size.upper()
        if self.page_size not in PAGE_SIZES:
            raise ValueError(
                f"report.page_size must be one of {sorted(PAGE_SIZES)}, got {self.page_size!r}"
            )
        if self.orientation not in VALID_ORIENTATIONS:
            raise ValueError(
                f"report.orientation must be landscape or portrait, got {self.orientation!r}"
            )
        if self.chart not in CHART_KINDS:
            raise ValueError(f"report.chart must be one of {CHART_KINDS}, got {self.chart!r}")
        if len(self.summary_ratios) != 3 or any(r <= 0 for r in self.summary_ratios):
            raise ValueError(
                f"report.summary_ratios must be three positive numbers, got {self.summary_ratios!r}"
            )
        if sum(self.summary_ratios) > 1.0:
            LOGGER.warning(
                "report.summary_ratios=%s sum above 1.0; panels will overflow the margins",
                list(self.summary_ratios),
            )
        if self.margin < 0:
            LOGGER.warning("report.margin=%s is negative; clamped to 0", self.margin)
            self.margin = 0.0
        if self.row_cap < 0:
            LOGGER.warning("report.row_cap=%s is negative; clamped to 0", self.row_cap)
            self.row_cap = 0
        if self.render_timeout_s <= 0:
            LOGGER.warning(
                "report.render_timeout_s=%s is not positive; using %s",
                self.render_timeout_s,
                DEFAULT_CONFIG["report"]["render_timeout_s"],
            )
            self.render_timeout_s = float(DEFAULT_CONFIG["report"]["render_timeout_s"])

    @property
    def page_dimensions(self) -> tuple[float, float]:
        return resolve_page_size(self.page_size, self.orientation)


@dataclass(slots=True)
class FontsConfig:
    primary: Path | None
    secondary: Path | None


@dataclass(slots=True)
class UploadsConfig:
    dir: Path
    max_bytes: int

    def __post_init__(self) -> None:
        if not isinstance(self.max_bytes, int) or self.max_bytes < 1:
            LOGGER.warning(
                "uploads.max_bytes=%s is not a positive integer; using %s",
                self.max_bytes,
                DEFAULT_MAX_UPLOAD_BYTES,
            )
            self.max_bytes = DEFAULT_MAX_UPLOAD_BYTES


@dataclass(slots=True)
class LoggingConfig:
    level: str

    def __post_init__(self) -> None:
        level = str(self.level).upper()
        if level not in VALID_LOG_LEVELS:
            LOGGER.warning("logging.level=%r is not a valid level; using INFO", self.level)
            level = "INFO"
        self.level = level


@dataclass(slots=True)
class AppConfig:
    server: ServerConfig
    report: ReportConfig
    fonts: FontsConfig
    uploads: UploadsConfig
    logging: LoggingConfig
    config_path: Path

    def report_options(self) -> ReportOptions:
        """Renderer options derived from the ``report`` section."""
        return ReportOptions(
            page_size=self.report.page_dimensions,
            margin=self.report.margin,
            summary_ratios=self.report.summary_ratios,
            row_cap=self.report.row_cap,
            include_tester_chart=self.report.include_tester_chart,
            logo_path=self.report.logo_path,
        )

    def load_theme(self) -> ReportTheme:
        return load_theme(self.fonts.primary, self.fonts.secondary)


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path} must contain a YAML object at the top level.")
        return data


def default_config_path() -> Path:
    env_path = os.getenv(CONFIG_ENV_VAR, "").strip()
    if env_path:
        return Path(env_path)
    return PROJECT_DIR / "config.yaml"


def load_config(config_path: Path | None = None) -> AppConfig:
    path = (config_path or default_config_path()).resolve()
    override = _read_config_file(path)
    merged = _deep_merge(DEFAULT_CONFIG, override)

    report_cfg = merged["report"]
    ratios_raw = report_cfg.get("summary_ratios") or SUMMARY_RATIOS
    try:
        summary_ratios = tuple(float(r) for r in ratios_raw)
    except (TypeError, ValueError):
        raise ValueError(
            f"report.summary_ratios must be a list of numbers, got {ratios_raw!r}"
        ) from None

    uploads_cfg = merged["uploads"]
    fonts_cfg = merged.get("fonts") or {}
    app_config = AppConfig(
        server=ServerConfig(
            host=str(merged["server"]["host"]),
            port=int(merged["server"]["port"]),
        ),
        report=ReportConfig(
            page_size=str(report_cfg["page_size"]),
            orientation=str(report_cfg["orientation"]).lower(),
            margin=float(report_cfg["margin"]),
            summary_ratios=summary_ratios,
            row_cap=int(report_cfg["row_cap"]),
            chart=str(report_cfg["chart"]).lower(),
            include_tester_chart=bool(report_cfg["include_tester_chart"]),
            output_dir=_resolve_config_path(str(report_cfg["output_dir"]), path),
            logo_path=_optional_path(report_cfg.get("logo_path"), path),
            render_timeout_s=float(report_cfg["render_timeout_s"]),
        ),
        fonts=FontsConfig(
            primary=_optional_path(fonts_cfg.get("primary"), path),
            secondary=_optional_path(fonts_cfg.get("secondary"), path),
        ),
        uploads=UploadsConfig(
            dir=_resolve_config_path(str(uploads_cfg["dir"]), path),
            max_bytes=int(uploads_cfg["max_bytes"]),
        ),
        logging=LoggingConfig(level=str(merged["logging"]["level"])),
        config_path=path,
    )
    LOGGER.info(
        "Loaded config=%s output_dir=%s uploads_dir=%s",
        app_config.config_path,
        app_config.report.output_dir,
        app_config.uploads.dir,
    )
    return app_config
