# functions/chat.py

import os
from functools import lru_cache
from typing import Dict, Iterable, Iterator, List
from dotenv import load_dotenv
from openai import OpenAI, APIStatusError, OpenAIError, RateLimitError
from agents.health_agent import build_system_prompt
from functions.errors import ProviderError

load_dotenv()

OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
DONE_FRAME = "data: [DONE]\n\n"

@lru_cache(maxsize=1)
def get_client() -> OpenAI:
    return OpenAI(api_key=os.getenv("OPENAI_API_KEY"))

def sse_frames(stream: Iterable) -> Iterator[str]:
    """Re-frame provider chunks as `data: <json>` events, then the terminator."""
    try:
        for chunk in stream:
            yield f"data: {chunk.model_dump_json(exclude_none=True)}\n\n"
    except OpenAIError as e:
        # Status is already sent; the client sees a closed stream and flushes.
        print("❌ Chat stream interrupted:", e)
        return
    yield DONE_FRAME

def open_chat_stream(messages: List[Dict], pincode: str = "") -> Iterator[str]:
    """
    Start a streaming completion for the conversation and return its SSE frames.

    Provider errors are raised here, before any byte is sent, so the caller
    can still answer with a status code: 429 for rate limits, 402 when the
    provider account is out of credit, 500 otherwise.
    """
    print("######################################################")
    print(f"💬 CHAT REQUEST: {len(messages)} messages, pincode={pincode or '-'}")
    print("######################################################")

    system_prompt = build_system_prompt(pincode)

    try:
        stream = get_client().chat.completions.create(
            model=OPENAI_MODEL,
            messages=[{"role": "system", "content": system_prompt}] + list(messages),
            stream=True,
        )
    except RateLimitError:
        raise ProviderError("Rate limits exceeded, please try again later.", 429)
    except APIStatusError as e:
        if e.status_code == 402:
            raise ProviderError("Payment required, please add funds to your workspace.", 402)
        print("❌ AI gateway error:", e.status_code, e.message)
        raise ProviderError("AI gateway error", 500)
    except OpenAIError as e:
        print("❌ AI gateway error:", e)
        raise ProviderError("AI gateway error", 500)

    return sse_frames(stream)
