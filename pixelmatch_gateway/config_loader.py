"""Configuration loader for the comparison gateway - loads from environment variables."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

from .app import GatewayConfig


def load_config_from_env() -> GatewayConfig:
    """
    Load GatewayConfig from environment variables.

    Loads .env file if present and reads configuration values.

    Environment Variables:
        HOST: Server host (default: 127.0.0.1)
        PORT: Server port (default: 8765)
        MAX_FILE_SIZE: Maximum upload size in bytes (default: 67108864 = 64MB)
        PIXELMATCH_WORKERS: Row bands scanned concurrently per comparison
        PIXELMATCH_CONFIG: JSON/TOML file with comparison defaults

    Returns:
        GatewayConfig object with values from environment
    """
    # Load .env file if it exists
    load_dotenv()

    workers = os.getenv("PIXELMATCH_WORKERS")
    match_config = os.getenv("PIXELMATCH_CONFIG")

    return GatewayConfig(
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8765")),
        max_file_size=int(os.getenv("MAX_FILE_SIZE", str(64 * 1024 * 1024))),
        workers=int(workers) if workers else None,
        match_config_path=Path(match_config) if match_config else None,
    )
