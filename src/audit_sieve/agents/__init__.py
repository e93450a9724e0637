"""Agents orchestrating scanner runs.

Provides:
- BaseAgent: Shared configuration and logging
- AuditAgent: Scanner invocation with network retry and output parsing
"""

from .audit import AuditAgent
from .base import BaseAgent

__all__ = ["AuditAgent", "BaseAgent"]
