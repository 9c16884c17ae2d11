# jgtravel/gateway.py
from typing import Any, List, Optional, Sequence

import google.genai as genai
from google.genai import errors, types

from jgtravel.config import ConfigurationError, Settings
from jgtravel.logs import get_logger
from jgtravel.schemas import ChatMessage

logger = get_logger(__name__)

FALLBACK_REPLY = "Sorry — I couldn't generate a reply."

GATEWAY_PREAMBLE = """You are Travel Assistant for JG Camps & Resorts.
- Be concise, friendly, and helpful.
- If an itinerary is requested: give a day-wise plan with approximate travel times.
- For "best time" questions: give months, pros/cons, weather and crowd levels.
- For budgets: rough costs for stay/food/transport/activities in INR, never naming properties.
- Use bullet points and short paragraphs. Ask a 1-line clarifier if ambiguous."""

# Gemini only knows "user" and "model"; system text travels as a user turn.
_ROLE_MAP = {"user": "user", "assistant": "model", "system": "user"}


class GatewayConfigError(ConfigurationError):
    """The gateway cannot reach the provider because it is not configured."""


def to_contents(messages: Sequence[ChatMessage], preamble: Optional[str] = GATEWAY_PREAMBLE) -> List[types.Content]:
    """Translate role-tagged chat messages into Gemini ``Content`` turns."""
    contents: List[types.Content] = []
    if preamble:
        contents.append(types.Content(role="user", parts=[types.Part.from_text(text=preamble)]))
    for message in messages:
        contents.append(
            types.Content(role=_ROLE_MAP[message.role], parts=[types.Part.from_text(text=message.content)])
        )
    return contents


def extract_reply_text(response: Any) -> Optional[str]:
    """Join the text parts of the first candidate, or ``None`` if there are none."""
    candidates = getattr(response, "candidates", None)
    if not candidates:
        return None
    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) or []
    texts = [part.text for part in parts if isinstance(getattr(part, "text", None), str)]
    text = "\n".join(texts)
    return text if text.strip() else None


def _client(settings: Settings, timeout: float) -> genai.Client:
    # The SDK sends the key as a request header and takes the timeout in milliseconds.
    options = types.HttpOptions(base_url=settings.gemini_api_base, timeout=int(timeout * 1000))
    return genai.Client(api_key=settings.gemini_api_key, http_options=options)


async def generate_reply(
    messages: Sequence[ChatMessage],
    settings: Settings,
    *,
    timeout: Optional[float] = None,
    preamble: Optional[str] = GATEWAY_PREAMBLE,
) -> str:
    """Send one generation request upstream and return the reply text.

    Transport errors, API errors and empty candidates all come back as
    ``FALLBACK_REPLY``; the only exception raised is ``GatewayConfigError``
    for a missing API key. There is a single attempt.
    """
    if not messages:
        raise ValueError("messages is required")
    if not settings.gemini_api_key:
        raise GatewayConfigError("GEMINI_API_KEY environment variable not configured")

    logger.info(
        "Invoking model %s with %d message(s)", settings.gemini_model, len(messages)
    )
    try:
        client = _client(settings, timeout or settings.gemini_timeout)
        response = await client.aio.models.generate_content(
            model=settings.gemini_model,
            contents=to_contents(messages, preamble),
        )
    except errors.APIError as exc:
        logger.warning("Upstream generation returned HTTP %s", exc.code)
        return FALLBACK_REPLY
    except Exception:
        logger.warning("Upstream generation failed", exc_info=True)
        return FALLBACK_REPLY

    text = extract_reply_text(response)
    if text is None:
        logger.warning("Upstream response carried no candidate text; returning fallback reply")
        return FALLBACK_REPLY
    logger.info("Received %d characters from model %s", len(text), settings.gemini_model)
    return text
