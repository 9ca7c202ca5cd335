# ui/api_client.py

import os
import re
import requests
from dotenv import load_dotenv
from typing import Callable, Dict, List, Optional
from models.schema import ChatMessage, ChatRequest, CsvRow, UploadRequest
from ui.stream_reader import StreamReader

load_dotenv()
BACKEND_URL = os.getenv("BACKEND_URL", "http://localhost:8000")

CHAT_PATH = "/functions/v1/chat"
UPLOAD_PATH = "/functions/v1/upload-disease-data"
DISEASE_DATA_PATH = "/disease-data"

# Connect timeout only: a stalled stream is waited on indefinitely.
CONNECT_TIMEOUT = 10
REQUEST_TIMEOUT = 30

_PINCODE = re.compile(r"^\d{6}$")


class ApiError(Exception):
    """Backend answered with an error status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

class ChatTransportError(ApiError):
    """The chat stream could not be started."""

class RateLimitedError(ChatTransportError):
    pass

class ServiceUnavailableError(ChatTransportError):
    pass

class PincodeError(ValueError):
    pass


def validate_pincode(pincode: str) -> str:
    """Check a pincode before any request is made. Returns it stripped."""
    pincode = (pincode or "").strip()
    if not pincode:
        raise PincodeError("Please enter a pincode")
    if not _PINCODE.match(pincode):
        raise PincodeError("Please enter a valid 6-digit pincode")
    return pincode

def _auth_headers(token: Optional[str]) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"} if token else {}

def _error_message(response: requests.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        message = payload.get("error") or payload.get("detail")
        if isinstance(message, str) and message:
            return message
    return response.text.strip() or f"HTTP {response.status_code}"


def stream_chat(
    messages: List[ChatMessage],
    pincode: str,
    on_delta: Callable[[str], None],
    on_done: Callable[[], None],
    base_url: str = BACKEND_URL,
    session: Optional[requests.Session] = None,
) -> None:
    """
    Post the conversation and feed the streamed reply into on_delta.

    Raises before reading anything when the status is not 2xx; 429 and 402
    get their own error types. on_done fires once the stream is complete.
    """
    http = session or requests
    response = http.post(
        base_url + CHAT_PATH,
        json=ChatRequest(messages=messages, pincode=pincode).model_dump(),
        stream=True,
        timeout=(CONNECT_TIMEOUT, None),
    )

    try:
        if not response.ok:
            message = _error_message(response)
            if response.status_code == 429:
                raise RateLimitedError(message, 429)
            if response.status_code == 402:
                raise ServiceUnavailableError(message, 402)
            raise ChatTransportError(message, response.status_code)

        reader = StreamReader(on_delta, on_done)
        for chunk in response.iter_content(chunk_size=None):
            if chunk:
                reader.feed(chunk)
            if reader.done:
                break
        reader.close()
    finally:
        response.close()


def upload_csv(rows: List[CsvRow], token: Optional[str], base_url: str = BACKEND_URL) -> int:
    """Send parsed CSV rows in one request. Returns the stored row count."""
    response = requests.post(
        base_url + UPLOAD_PATH,
        json=UploadRequest(data=rows).model_dump(),
        headers=_auth_headers(token),
        timeout=REQUEST_TIMEOUT,
    )
    if not response.ok:
        raise ApiError(_error_message(response), response.status_code)
    return response.json()["count"]

def fetch_alerts(pincode: Optional[str] = None, limit: Optional[int] = None, base_url: str = BACKEND_URL) -> List[Dict]:
    params = {}
    if pincode:
        params["pincode"] = pincode
    if limit:
        params["limit"] = limit
    response = requests.get(base_url + DISEASE_DATA_PATH, params=params, timeout=REQUEST_TIMEOUT)
    if not response.ok:
        raise ApiError(_error_message(response), response.status_code)
    return response.json()

def delete_record(record_id: int, token: Optional[str], base_url: str = BACKEND_URL) -> None:
    response = requests.delete(
        f"{base_url}{DISEASE_DATA_PATH}/{record_id}",
        headers=_auth_headers(token),
        timeout=REQUEST_TIMEOUT,
    )
    if not response.ok:
        raise ApiError(_error_message(response), response.status_code)
