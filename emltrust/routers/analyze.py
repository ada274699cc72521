# emltrust/routers/analyze.py
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from ..config import settings
from ..services.analysis import analyze_eml
from ..services.history import HistoryStore
from .deps import get_history_store

router = APIRouter()


@router.post("/analyze")
async def analyze_upload(
    file: UploadFile = File(...),
    dkim_selector: Optional[str] = Form(None),
    history: HistoryStore = Depends(get_history_store),
):
    fname = (file.filename or "").lower()
    if not fname.endswith(".eml"):
        raise HTTPException(status_code=400, detail="Only .eml files allowed")

    content = await file.read()
    if len(content) > settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024:
        raise HTTPException(status_code=400, detail="File too large")

    assessment = await analyze_eml(content, history=history, dkim_selector=dkim_selector or None)
    return assessment.model_dump(mode="json")
