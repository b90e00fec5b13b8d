# bitebyte/schemas/common.py
from pydantic import BaseModel
from typing import Optional


class MessageResponse(BaseModel):
    message: str


class MessageEnvelope(BaseModel):
    success: bool = True
    data: MessageResponse
    error: Optional[str] = None
