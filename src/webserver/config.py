"""
Configuration helpers for the timeline web server.
"""

from dataclasses import dataclass
from typing import Optional

from src.app.constants import DEFAULT_SCRIPT_NAME


@dataclass
class ServerConfig:
    host: str = "127.0.0.1"
    port: int = 8000
    script_path: str = DEFAULT_SCRIPT_NAME
    layout_config_path: Optional[str] = None
