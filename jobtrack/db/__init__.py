from .database import (
    close_db,
    get_app_engine,
    get_db,
    get_engine,
    get_session,
    get_session_factory,
    init_db,
)

__all__ = [
    "close_db",
    "get_app_engine",
    "get_db",
    "get_engine",
    "get_session",
    "get_session_factory",
    "init_db",
]
