"""Canned provider payloads shared by the test modules."""

from __future__ import annotations

import json
from typing import Any

BASE_URL = "https://llm.test/v1"
API_KEY = "sk-test-123"


def moderation_body(*flags: bool) -> dict[str, Any]:
    return {
        "id": "modr-1",
        "model": "omni-moderation-latest",
        "results": [
            {
                "flagged": flag,
                "categories": {"hate": flag, "self-harm": False},
                "category_scores": {"hate": 0.9 if flag else 0.01, "self-harm": 0.0},
            }
            for flag in flags
        ],
    }


def completion_body(*contents: str | None) -> dict[str, Any]:
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "created": 1_700_000_000,
        "model": "gpt-4o-mini",
        "choices": [
            {
                "index": i,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
                "logprobs": None,
            }
            for i, content in enumerate(contents)
        ],
        "usage": {"prompt_tokens": 12, "completion_tokens": 8, "total_tokens": 20},
    }


def reply_json(sender: str = "bot", type_: str = "text", content: str = "hi") -> str:
    return json.dumps({"sender": sender, "type": type_, "content": content})
