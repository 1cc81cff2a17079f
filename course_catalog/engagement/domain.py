"""
Доменная модель контекста вовлеченности: опыт, серия посещений и уведомления.
"""

from datetime import date
from typing import Optional, Tuple

from pydantic import BaseModel, Field

EXP_PER_VISIT = 100


class ProfileStats(BaseModel):
    """Игровая статистика профиля."""

    exp_points: int = Field(0, ge=0)
    streak_days: int = Field(0, ge=0)
    last_visit: Optional[date] = None

    def after_visit(self, today: date) -> "ProfileStats":
        """Статистика после посещения в указанный день.

        Опыт начисляется за каждое посещение, серия растет на единицу
        при первом посещении в любой новый день, пропуски ее не сбрасывают.
        """
        streak = self.streak_days
        if self.last_visit != today:
            streak += 1
        return ProfileStats(
            exp_points=self.exp_points + EXP_PER_VISIT,
            streak_days=streak,
            last_visit=today,
        )


class Notification(BaseModel):
    """Уведомление пользователя."""

    text: str = Field(..., min_length=1)
    unread: bool = True


DEFAULT_NOTIFICATIONS: Tuple[str, ...] = (
    "New comment on your post.",
    "Your subscription is expiring soon.",
    "New like on your photo!",
    "You have a new friend request.",
    "Update available. Please update to the latest version.",
)
