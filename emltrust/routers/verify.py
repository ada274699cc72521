# emltrust/routers/verify.py
from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from ..verifier import dns_engine

router = APIRouter()


class VerifyRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    domain: str
    dkim_selector: Optional[str] = Field(default=None, alias="dkimSelector")
    sender_ip: Optional[str] = Field(default=None, alias="senderIP")


@router.post("/verify")
async def verify(body: VerifyRequest):
    if not body.domain.strip():
        raise HTTPException(status_code=400, detail="domain is required")

    facts = await dns_engine.verify_domain(
        body.domain,
        dkim_selector=body.dkim_selector,
        sender_ip=body.sender_ip,
    )
    return facts.to_verify_response()
