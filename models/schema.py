# models/schema.py

import datetime
from pydantic import BaseModel, Field
from typing import List, Literal, Optional

class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str

class ChatRequest(BaseModel):
    messages: List[ChatMessage]
    pincode: str = ""

class CsvRow(BaseModel):
    """One parsed CSV line, before the server normalises it."""
    pincode: str = ""
    disease_name: str = ""
    cases: Optional[int] = None
    date: str = ""
    advice: str = ""

class OutbreakRecord(BaseModel):
    pincode: str
    disease_name: str
    cases: int = Field(ge=0)
    date: datetime.date
    advice: str

class DiseaseRecord(OutbreakRecord):
    """Stored outbreak row as returned by the query routes."""
    id: int
    created_at: Optional[datetime.datetime] = None

    model_config = {"from_attributes": True}

class UploadRequest(BaseModel):
    data: List[CsvRow]

class UploadResponse(BaseModel):
    success: bool = True
    count: int
