"""
CLI Utilities Module.

Common utility functions for CLI tools.
"""

import logging
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)


def validate_script_path(script_path: str) -> bool:
    """
    Validate that a script file exists.

    Args:
        script_path: Path to the script JSON file.

    Returns:
        True if valid, False otherwise.
    """
    path = Path(script_path)

    if not path.exists():
        logger.error(f"Script file not found: {script_path}")
        return False
    if not path.is_file():
        logger.error(f"Script path is not a file: {script_path}")
        return False

    return True


def parse_id_list(raw: Optional[str]) -> List[str]:
    """
    Split a comma-separated list of IDs, dropping blanks.

    Args:
        raw: The option value, e.g. "e1,e2".

    Returns:
        List of IDs.
    """
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]
