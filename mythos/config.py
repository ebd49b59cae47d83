"""
Process configuration.

Read from environment variables at import time:
    MYTHOS_ENV                 development | production
    MYTHOS_LOG_LEVEL           logging level name
    ALLOWED_ORIGINS            comma separated CORS origins
    MYTHOS_DEFAULT_DIFFICULTY  AI difficulty for new sessions
    MYTHOS_SESSION_TTL         seconds before an idle session expires
    MYTHOS_EXPERT_SIMULATIONS  optional cap on expert AI simulations
"""

import logging
import os

MYTHOS_ENV = os.getenv("MYTHOS_ENV", "development")
MYTHOS_LOG_LEVEL = os.getenv("MYTHOS_LOG_LEVEL", "INFO")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")
DEFAULT_DIFFICULTY = os.getenv("MYTHOS_DEFAULT_DIFFICULTY", "medium")
SESSION_TTL_SECONDS = int(os.getenv("MYTHOS_SESSION_TTL", "3600"))

_expert_cap = os.getenv("MYTHOS_EXPERT_SIMULATIONS")
EXPERT_SIMULATION_CAP = int(_expert_cap) if _expert_cap else None

_configured = False


def configure_logging(level: str | int | None = None) -> None:
    """Set up root logging once. Later calls only adjust the level."""
    global _configured
    level = level or MYTHOS_LOG_LEVEL
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    if _configured:
        logging.getLogger().setLevel(level)
        return

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    _configured = True
