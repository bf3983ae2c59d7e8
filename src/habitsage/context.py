"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from sqlmodel import Session

from .config import BaseConfig
from .infra.database import bootstrap_database
from .infra.repositories import SQLModelHabitRepository
from .logging_config import get_logger
from .services.habits import HabitService

logger = get_logger("context")


@dataclass
class AppContext:
    """Centralized application context with repositories and services."""

    config: BaseConfig
    session_factory: Callable[[], Session]
    habit_repo: SQLModelHabitRepository
    habit_service: HabitService

    @property
    def user_id(self) -> int:
        return self.habit_service.user_id


def create_app_context(
    config: Optional[BaseConfig] = None, *, user_id: Optional[int] = None
) -> AppContext:
    """Create and initialize the application context."""

    if config is None:
        config = BaseConfig()

    _engine, session_factory = bootstrap_database(config)
    habit_repo = SQLModelHabitRepository(session_factory)
    owner = user_id if user_id is not None else config.USER_ID
    habit_service = HabitService(habit_repo, user_id=owner)

    logger.debug("App context created", extra={"database_url": config.DATABASE_URL})

    return AppContext(
        config=config,
        session_factory=session_factory,
        habit_repo=habit_repo,
        habit_service=habit_service,
    )
