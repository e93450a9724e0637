"""Base agent with shared patterns for tool orchestration.

Provides:
- BaseAgent with run ID management and structured logging
"""

import structlog
from uuid import uuid4

from audit_sieve.core.config import Config

logger = structlog.get_logger()


class BaseAgent:
    """Base agent holding the run configuration and a bound logger."""

    def __init__(self, config: Config, run_id: str | None = None):
        """Initialize base agent.

        Args:
            config: Immutable run configuration
            run_id: Optional run ID (generates new UUID if not provided)
        """
        self.config = config
        self.run_id = run_id or str(uuid4())
        self.log = logger.bind(agent=self.__class__.__name__, run_id=self.run_id)
