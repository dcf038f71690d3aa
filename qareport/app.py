"""HTTP service wiring: configuration -> theme -> renderer -> routes.

Boundary note for maintainers:
- Keep this module focused on wiring, not report details.
- Aggregation belongs in ``analysis/``; drawing belongs in ``report/``.
- API schemas belong in ``api_models.py``.
"""

from __future__ import annotations

import argparse
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path

import uvicorn
from fastapi import FastAPI

from . import __version__
from .config import AppConfig, load_config
from .report.charts import ProportionalBarRenderer, build_chart_renderer
from .report.pdf_builder import ReportRenderer
from .report.theme import ReportTheme
from .routes import create_router

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class RuntimeState:
    config: AppConfig
    theme: ReportTheme
    renderer: ReportRenderer


def build_runtime(config: AppConfig) -> RuntimeState:
    theme = config.load_theme()
    renderer = ReportRenderer(
        theme,
        config.report_options(),
        status_chart=build_chart_renderer(config.report.chart, theme),
        tester_chart=ProportionalBarRenderer(theme),
    )
    return RuntimeState(config=config, theme=theme, renderer=renderer)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(config_path: Path | None = None, *, config: AppConfig | None = None) -> FastAPI:
    if config is None:
        config = load_config(config_path)
    runtime = build_runtime(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        for directory in (config.uploads.dir, config.report.output_dir):
            directory.mkdir(parents=True, exist_ok=True)
        LOGGER.info(
            "QA report service %s ready (chart=%s, page=%s %s)",
            __version__,
            config.report.chart,
            config.report.page_size,
            config.report.orientation,
        )
        yield

    app = FastAPI(title="QA Report", version=__version__, lifespan=lifespan)
    app.state.runtime = runtime
    app.include_router(create_router(runtime))
    return app


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the QA report server")
    parser.add_argument("--config", type=Path, default=None, help="Path to config YAML")
    parser.add_argument("--host", default=None, help="Override server.host")
    parser.add_argument("--port", type=int, default=None, help="Override server.port")
    args = parser.parse_args()

    config = load_config(args.config)
    configure_logging(config.logging.level)
    runtime_app = create_app(config=config)
    runtime: RuntimeState = runtime_app.state.runtime
    host = args.host or runtime.config.server.host
    port = args.port or runtime.config.server.port
    try:
        uvicorn.run(
            runtime_app,
            host=host,
            port=port,
            log_level=runtime.config.logging.level.lower(),
        )
    except OSError:
        LOGGER.error("Failed to bind to %s:%d.", host, port, exc_info=True)
        raise


if __name__ == "__main__":
    main()
