# emltrust/routers/deps.py
from ..services.history import HistoryStore


def get_history_store() -> HistoryStore:
    """FastAPI dependency; overridden in tests."""
    return HistoryStore()
