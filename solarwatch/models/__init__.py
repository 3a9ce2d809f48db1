from solarwatch.models.base import Base
from solarwatch.models.event import Event, MediaAsset
from solarwatch.models.admin import AdminUser, SecurityQuestion
from solarwatch.models.content import AboutSection, TeamMember

__all__ = [
    "Base",
    "Event",
    "MediaAsset",
    "AdminUser",
    "SecurityQuestion",
    "AboutSection",
    "TeamMember",
]
