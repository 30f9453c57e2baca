"""User reference data."""

from datetime import datetime

from weekboard.models.base import CamelModel


class User(CamelModel):
    """User who owns tasks and receives weekly reports.

    Read-only from weekboard's point of view.
    """

    id: str
    email: str
    name: str
    long_name: str = ""
    avatar: str = ""
    role: str = ""
    department: str = ""
    created_at: datetime
    updated_at: datetime

    @property
    def display_name(self) -> str:
        return self.long_name or self.name
