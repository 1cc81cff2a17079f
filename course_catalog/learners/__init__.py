"""
Контекст учащихся: пользователи и их прогресс по курсам.
"""

from .domain import Learner, ProgressRecord
from .infrastructure import InMemoryProgressTracker, InMemoryUserDirectory

__all__ = [
    "Learner",
    "ProgressRecord",
    "InMemoryProgressTracker",
    "InMemoryUserDirectory",
]
