"""
Unified AI client used by the video chat and quiz generation functions.

Provider priority:
  1. Oracle Generative AI via OCI SDK signed requests (~/.oci/config).
  2. Anthropic, when ANTHROPIC_API_KEY is set and OCI is not configured.
  3. A fixed stub reply when neither is configured.
"""

import asyncio
import json
import logging
from pathlib import Path

import oci

from coursehub.config import settings

logger = logging.getLogger(__name__)


class AIServiceError(RuntimeError):
    """Raised when the configured AI provider fails or returns garbage."""


STUB_REPLY = (
    "[AI not configured] Set ANTHROPIC_API_KEY, or ORACLE_GENAI_COMPARTMENT_ID "
    "and ORACLE_GENAI_MODEL with a valid ~/.oci/config, then restart the server."
)


# ── Oracle GenAI ─────────────────────────────────────────────────────────────

def _oracle_configured() -> bool:
    return bool(
        settings.OCI_CONFIG_FILE
        and settings.OCI_CONFIG_PROFILE
        and settings.ORACLE_GENAI_MODEL
        and settings.ORACLE_GENAI_COMPARTMENT_ID
    )


def _uses_cohere_format(model_id: str) -> bool:
    forced = settings.ORACLE_GENAI_API_FORMAT.strip().upper()
    if forced in ("COHERE", "GENERIC"):
        return forced == "COHERE"
    return model_id.lower().startswith("cohere.")


def _oracle_chat_body(system: str, messages: list[dict], max_tokens: int, temperature: float) -> dict:
    model_id = settings.ORACLE_GENAI_MODEL

    if _uses_cohere_format(model_id):
        # Cohere takes the last turn as "message" and the rest as history
        chat_request: dict = {
            "apiFormat": "COHERE",
            "message": messages[-1]["content"] if messages else "",
            "chatHistory": [
                {"role": "USER" if m["role"] == "user" else "CHATBOT", "message": m["content"]}
                for m in messages[:-1]
            ],
            "maxTokens": max_tokens,
            "temperature": temperature,
            "isStream": False,
        }
        if system:
            chat_request["preambleOverride"] = system
    else:
        chat_request = {
            "apiFormat": "GENERIC",
            "messages": [
                {
                    "role": "USER" if m["role"] == "user" else "ASSISTANT",
                    "content": [{"type": "TEXT", "text": m["content"]}],
                }
                for m in messages
            ],
            "maxTokens": max_tokens,
            "temperature": temperature,
            "isStream": False,
        }
        if system:
            chat_request["systemMessage"] = system

    return {
        "compartmentId": settings.ORACLE_GENAI_COMPARTMENT_ID,
        "servingMode": {"servingType": "ON_DEMAND", "modelId": model_id},
        "chatRequest": chat_request,
    }


def _oracle_reply_text(payload: dict) -> str:
    chat_response = payload.get("chatResponse", {})
    if chat_response.get("apiFormat") == "COHERE":
        return chat_response.get("text", "")
    choices = chat_response.get("choices") or []
    if not choices:
        return ""
    content = choices[0].get("message", {}).get("content", [])
    if isinstance(content, list):
        return "".join(part.get("text", "") for part in content)
    return str(content)


def _oracle_post(resource_path: str, body: dict) -> dict:
    """Blocking signed POST; run it through asyncio.to_thread."""
    config = oci.config.from_file(
        file_location=str(Path(settings.OCI_CONFIG_FILE).expanduser()),
        profile_name=settings.OCI_CONFIG_PROFILE,
    )
    endpoint = settings.ORACLE_GENAI_BASE_URL.rstrip("/") or (
        f"https://inference.generativeai.{config.get('region', 'us-chicago-1')}.oci.oraclecloud.com"
    )
    client = oci.generative_ai_inference.GenerativeAiInferenceClient(
        config=config,
        service_endpoint=endpoint,
        timeout=(10.0, 120.0),
    )
    # The SDK prefixes the API version, so the path starts at /actions
    response = client.base_client.call_api(
        resource_path=resource_path,
        method="POST",
        header_params={"content-type": "application/json"},
        body=body,
        response_type="str",
    )
    data = response.data if isinstance(response.data, str) else str(response.data)
    return json.loads(data)


async def _oracle_chat(system: str, messages: list[dict], max_tokens: int, temperature: float) -> str:
    body = _oracle_chat_body(system, messages, max_tokens, temperature)
    payload = await asyncio.to_thread(_oracle_post, "/actions/chat", body)
    return _oracle_reply_text(payload)


# ── Anthropic ────────────────────────────────────────────────────────────────

def _anthropic_configured() -> bool:
    return bool(settings.ANTHROPIC_API_KEY)


async def _anthropic_chat(system: str, messages: list[dict], max_tokens: int, temperature: float) -> str:
    import anthropic

    client = anthropic.AsyncAnthropic(api_key=settings.ANTHROPIC_API_KEY)
    response = await client.messages.create(
        model=settings.ANTHROPIC_MODEL,
        max_tokens=max_tokens,
        temperature=temperature,
        system=system,
        messages=messages,
    )
    return "".join(block.text for block in response.content if getattr(block, "type", "") == "text")


# ── Public API ───────────────────────────────────────────────────────────────

def ai_provider_name() -> str:
    if _oracle_configured():
        return f"Oracle GenAI OCI-Signed ({settings.ORACLE_GENAI_MODEL})"
    if _anthropic_configured():
        return f"Anthropic ({settings.ANTHROPIC_MODEL})"
    return "none"


async def chat(
    system: str,
    messages: list[dict],
    max_tokens: int = 600,
    temperature: float = 0.7,
) -> str:
    """Send one chat completion request to the configured provider.

    ``messages`` is a list of ``{"role": "user"|"assistant", "content": str}``
    with the newest turn last. Provider failures raise AIServiceError; there
    is no silent fallback from one provider to the next.
    """
    try:
        if _oracle_configured():
            return await _oracle_chat(system, messages, max_tokens, temperature)
        if _anthropic_configured():
            return await _anthropic_chat(system, messages, max_tokens, temperature)
    except Exception as e:
        logger.exception("AI provider %s failed", ai_provider_name())
        raise AIServiceError(f"{ai_provider_name()} error: {e}") from e

    logger.warning("AI provider not configured, returning stub reply")
    return STUB_REPLY


async def ai_health_check() -> dict:
    """Live connectivity test, served at /api/health/ai."""
    provider = ai_provider_name()
    if provider == "none":
        return {"provider": "none", "status": "unconfigured", "message": STUB_REPLY}

    try:
        reply = await chat(
            system="You are a test assistant.",
            messages=[{"role": "user", "content": "Reply with exactly: OK"}],
            max_tokens=10,
            temperature=0.0,
        )
        return {"provider": provider, "status": "ok", "test_reply": reply.strip()}
    except AIServiceError as e:
        return {"provider": provider, "status": "error", "error": str(e)}
