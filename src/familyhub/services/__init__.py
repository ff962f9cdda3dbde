"""View-state controllers used by the web pages and the CLI."""

from .balance import HostWallet
from .experience_form import ExperienceEditor
from .experiences import HostExperiences, PublishedCatalog
from .forum import ForumBoard, ForumModeration
from .profile import ProfileSettings
from .schedules import ActivitySchedules

__all__ = [
    "ActivitySchedules",
    "ExperienceEditor",
    "ForumBoard",
    "ForumModeration",
    "HostExperiences",
    "HostWallet",
    "ProfileSettings",
    "PublishedCatalog",
]
