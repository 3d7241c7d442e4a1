"""Version information for pixelmatch-core."""
from __future__ import annotations

import platform
from typing import Dict

import numpy as np
import PIL

__version__ = "0.1.0"


def get_version_info() -> Dict[str, str]:
    """
    Get version information for the package and its imaging stack.

    Returns:
        Dictionary with version, numpy, pillow and python versions
    """
    return {
        "version": __version__,
        "numpy": np.__version__,
        "pillow": PIL.__version__,
        "python": platform.python_version(),
    }


def format_version_info() -> str:
    """
    Format version information as a human-readable string.

    Returns:
        Formatted version string
    """
    info = get_version_info()

    lines = [
        f"pixelmatch-core v{info['version']}",
        f"numpy {info['numpy']}, Pillow {info['pillow']}, Python {info['python']}",
    ]

    return "\n".join(lines)
