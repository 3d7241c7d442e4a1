from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from fastapi import FastAPI

from pixelmatch_core import __version__


@dataclass
class GatewayConfig:
    host: str = "127.0.0.1"
    port: int = 8765
    max_file_size: int = 64 * 1024 * 1024
    workers: Optional[int] = None
    match_config_path: Optional[Path] = None


def create_app(config: Optional[GatewayConfig] = None) -> FastAPI:
    cfg = config or GatewayConfig()

    app = FastAPI(title="Pixelmatch Gateway", version=__version__)
    app.state.config = cfg

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok", "version": __version__}

    from .compare_routes import router as compare_router

    app.include_router(compare_router)
    return app
