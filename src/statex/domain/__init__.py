"""Domain layer for statex application."""

from statex.domain.context import Context
from statex.domain.extraction import ExtractionService
from statex.domain.security import SecurityService

__all__ = [
    "Context",
    "ExtractionService",
    "SecurityService",
]
