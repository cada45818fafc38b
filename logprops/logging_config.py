"""logprops logging configuration.

logprops uses the shared InstruktAI logging standard (`instrukt_ai_logging`).
Library code only ever calls `get_logger(__name__)`; handlers are installed
by whoever embeds the pipeline, or by `setup_logging()` for the bundled CLI.
Example log query: `instrukt-ai-logs logprops --since 10m`.
"""

from __future__ import annotations

import os
from typing import Optional

from instrukt_ai_logging import configure_logging

LOG_LEVEL_ENV = "LOGPROPS_LOG_LEVEL"


def setup_logging(level: Optional[str] = None) -> None:
    """Configure logprops logging.

    Args:
        level: Optional override for `LOGPROPS_LOG_LEVEL`.
    """
    if level:
        os.environ[LOG_LEVEL_ENV] = level.upper()

    configure_logging("logprops")
