"""Application layer - request DTOs, use cases and service wiring."""

from millbook.application.services import MillbookServices, create_services

__all__ = ["MillbookServices", "create_services"]
