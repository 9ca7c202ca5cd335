# main.py

import os
from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, Header, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from sqlalchemy.orm import Session
from typing import List, Optional
from db.database import Base, engine, get_db
import db.models  # noqa: F401
from functions.auth import resolve_user
from functions.chat import open_chat_stream
from functions.disease_data import delete_record, list_records
from functions.errors import FunctionError
from functions.upload_disease_data import upload_disease_data
from models.schema import ChatRequest, DiseaseRecord, UploadResponse

AUTO_CREATE_TABLES = os.getenv("AUTO_CREATE_TABLES", "true").lower() in ("1", "true", "yes")

@asynccontextmanager
async def lifespan(_app: FastAPI):
    if AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
    yield

app = FastAPI(title="HealthAlert API", version="0.1", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)

@app.exception_handler(FunctionError)
async def function_error_handler(_request: Request, exc: FunctionError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

def current_user(authorization: Optional[str] = Header(default=None), session: Session = Depends(get_db)) -> Optional[str]:
    """Explicit caller identity taken from the bearer token; None when signed out."""
    return resolve_user(session, authorization)

@app.post("/functions/v1/chat")
def chat(request: ChatRequest):
    """Proxy the conversation to the AI provider and stream the reply as SSE."""
    messages = [m.model_dump() for m in request.messages]
    frames = open_chat_stream(messages, request.pincode)
    return StreamingResponse(
        frames,
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"},
    )

@app.post("/functions/v1/upload-disease-data", response_model=UploadResponse)
async def upload_data(
    request: Request,
    user_id: Optional[str] = Depends(current_user),
    session: Session = Depends(get_db),
):
    """Admin-only bulk upload of parsed CSV rows."""
    try:
        payload = await request.json()
    except ValueError:
        # Malformed body is reported as 400, but only after the auth checks.
        payload = None

    return upload_disease_data(session, user_id, payload)

@app.get("/disease-data", response_model=List[DiseaseRecord])
async def get_disease_data(
    pincode: Optional[str] = None,
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
    session: Session = Depends(get_db),
):
    """Outbreak rows, newest first, optionally for one pincode."""
    return list_records(session, pincode=pincode, limit=limit)

@app.delete("/disease-data/{record_id}")
async def delete_disease_data(
    record_id: int,
    user_id: Optional[str] = Depends(current_user),
    session: Session = Depends(get_db),
):
    return delete_record(session, user_id, record_id)
