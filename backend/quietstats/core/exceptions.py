"""
Domain exceptions raised by the analytics engine.

The HTTP layer translates the not-found family into 404 responses.
"""
from uuid import UUID


class QuietStatsError(Exception):
    """Base class for all QuietStats errors."""


class NotFoundError(QuietStatsError):
    """A definition was requested that does not exist for the project."""

    resource = "Resource"

    def __init__(self, resource_id: UUID | str, project_id: UUID | str) -> None:
        self.resource_id = str(resource_id)
        self.project_id = str(project_id)
        super().__init__(f"{self.resource} not found for this project")


class FunnelNotFoundError(NotFoundError):
    resource = "Funnel"


class SegmentNotFoundError(NotFoundError):
    resource = "Segment"
