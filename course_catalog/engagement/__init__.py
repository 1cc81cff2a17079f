"""
Контекст вовлеченности: опыт, серия посещений, уведомления.
"""

from .application import NotificationInbox, ProfileProgressService, my_courses
from .domain import Notification, ProfileStats

__all__ = [
    "NotificationInbox",
    "ProfileProgressService",
    "my_courses",
    "Notification",
    "ProfileStats",
]
