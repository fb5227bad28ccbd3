"""
Checks for the external command-line tools the harness drives.
"""

import shutil
import logging
from typing import Iterable

from common.errors import ToolMissingError

logger = logging.getLogger(__name__)

INSTALL_HINTS = {
    "aws": "pip install awscli   # or your platform's package manager",
    "hyperfine": "cargo install hyperfine   # or brew/apt install hyperfine",
}


def require_tools(*tools: str) -> None:
    """Raise ToolMissingError if any tool is not on PATH."""
    missing = [tool for tool in tools if shutil.which(tool) is None]
    if missing:
        for tool in missing:
            logger.error(f"Missing required tool: {tool}")
            hint = INSTALL_HINTS.get(tool)
            if hint:
                logger.error(f"  Install with: {hint}")
        raise ToolMissingError(missing)


def tools_for_listing_client(listing_client: str) -> Iterable[str]:
    """Tools a trial command built for this listing client needs at run time."""
    if listing_client == "awscli":
        return ("aws",)
    return ()
