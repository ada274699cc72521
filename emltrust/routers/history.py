# emltrust/routers/history.py
from fastapi import APIRouter, Depends, HTTPException

from ..services.history import HistoryStore
from .deps import get_history_store

router = APIRouter()


@router.get("")
async def list_history(history: HistoryStore = Depends(get_history_store)):
    return [e.model_dump(mode="json") for e in await history.list()]


@router.get("/{content_hash}")
async def get_history_entry(content_hash: str, history: HistoryStore = Depends(get_history_store)):
    entry = await history.find(content_hash)
    if entry is None:
        raise HTTPException(status_code=404, detail="entry not found")
    return entry.model_dump(mode="json")


@router.delete("")
async def clear_history(history: HistoryStore = Depends(get_history_store)):
    await history.clear()
    return {"cleared": True}


@router.delete("/{entry_id}")
async def remove_history_entry(entry_id: str, history: HistoryStore = Depends(get_history_store)):
    return [e.model_dump(mode="json") for e in await history.remove(entry_id)]
