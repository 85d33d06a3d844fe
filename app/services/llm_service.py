"""Gemini generateContent client used as the recommendation oracle."""
from __future__ import annotations

import json
import logging
import time
from typing import Any

import httpx

from app.config import settings
from app.services.errors import OracleContractError, OracleTransportError
from app.services.llm_call_tracker import get_tracker

logger = logging.getLogger(__name__)


def _extract_text(data: Any) -> str | None:
    """Pull ``candidates[0].content.parts[0].text`` out of a response envelope."""
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    return text if isinstance(text, str) and text.strip() else None


async def call_llm(
    prompt: str,
    model: str | None = None,
    temperature: float = 0.3,
    json_mode: bool = True,
    *,
    stage: str = "general",
) -> str:
    """
    Send one prompt to Gemini and return the generated text.

    Exactly one HTTP attempt is made.

    Args:
        prompt: Full prompt text.
        model: Model ID (defaults to settings.GEMINI_MODEL).
        temperature: Sampling temperature.
        json_mode: If True, ask for an ``application/json`` response.
        stage: Caller label recorded in the call log.

    Raises:
        OracleTransportError: Missing key, network failure or non-2xx status.
        OracleContractError: The envelope carries no generated text.
    """
    api_key = settings.GEMINI_API_KEY
    if not api_key:
        raise OracleTransportError("GEMINI_API_KEY not configured")

    model = model or settings.GEMINI_MODEL
    tracker = get_tracker()
    start_time = time.time()

    generation_config: dict[str, Any] = {"temperature": temperature}
    if json_mode:
        generation_config["responseMimeType"] = "application/json"

    payload = {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": generation_config,
    }
    headers = {
        "x-goog-api-key": api_key,
        "Content-Type": "application/json",
    }
    url = f"{settings.GEMINI_API_BASE}/models/{model}:generateContent"

    def _fail(message: str, raw: Any = None) -> None:
        tracker.log_call(
            model=model,
            prompt=prompt,
            response_text="",
            stage=stage,
            duration_ms=(time.time() - start_time) * 1000,
            success=False,
            error_message=message,
            raw_payload=raw,
        )

    try:
        async with httpx.AsyncClient(timeout=settings.ORACLE_TIMEOUT) as client:
            resp = await client.post(url, json=payload, headers=headers)
            resp.raise_for_status()
            data = resp.json()
    except httpx.HTTPStatusError as e:
        error_msg = f"HTTP {e.response.status_code}: {e.response.text[:500]}"
        _fail(error_msg)
        raise OracleTransportError(error_msg) from e
    except httpx.RequestError as e:
        error_msg = f"Request error: {e!r}"
        _fail(error_msg)
        raise OracleTransportError(error_msg) from e
    except ValueError as e:
        error_msg = f"Response is not JSON: {e}"
        _fail(error_msg, resp.text)
        raise OracleContractError(error_msg, raw=resp.text) from e

    content = _extract_text(data)
    if content is None:
        error_msg = f"No text output from model {model}"
        _fail(error_msg, data)
        raise OracleContractError(error_msg, raw=data)

    usage = (data.get("usageMetadata") if isinstance(data, dict) else None) or {}
    tracker.log_call(
        model=model,
        prompt=prompt,
        response_text=content,
        input_tokens=usage.get("promptTokenCount", 0),
        output_tokens=usage.get("candidatesTokenCount", 0),
        stage=stage,
        duration_ms=(time.time() - start_time) * 1000,
        success=True,
    )
    return content


async def call_llm_json(
    prompt: str,
    model: str | None = None,
    temperature: float = 0.1,
    *,
    stage: str = "general",
) -> dict[str, Any] | list[Any]:
    """
    Call the oracle and parse the response as JSON.

    Returns parsed JSON (dict or list).
    """
    raw = await call_llm(
        prompt=prompt,
        model=model,
        temperature=temperature,
        json_mode=True,
        stage=stage,
    )

    # Strip markdown code fences if present
    text = raw.strip()
    if text.startswith("```"):
        lines = text.split("\n")
        lines = [l for l in lines if not l.strip().startswith("```")]
        text = "\n".join(lines)

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise OracleContractError(
            f"Failed to parse oracle response as JSON: {e}", raw=text
        ) from e
