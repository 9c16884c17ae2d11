# jgtravel/planner.py
from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import Awaitable, Callable, List, Optional, Sequence

from jgtravel.config import Settings
from jgtravel.gateway import generate_reply
from jgtravel.interpreter import interpret
from jgtravel.logs import get_logger
from jgtravel.prompts import (
    CHAT_FOOTER,
    CHAT_SYSTEM_PROMPT,
    CONTACT_EMAIL,
    CONTACT_LINE,
    CONTACT_PHONES,
    compose_prompts,
)
from jgtravel.schemas import (
    ChatMessage,
    ContactDetails,
    ItineraryResponse,
    TripRequest,
)

logger = get_logger(__name__)

TIMEOUT_MESSAGE = (
    "The itinerary request timed out. Please try again, or contact our travel "
    "experts directly for a personalised plan."
)

Completer = Callable[[Sequence[ChatMessage], Settings], Awaitable[str]]


def contact_details() -> ContactDetails:
    return ContactDetails(phones=list(CONTACT_PHONES), email=CONTACT_EMAIL, line=CONTACT_LINE)


async def plan_itinerary(
    trip: TripRequest,
    settings: Settings,
    *,
    structured: bool = False,
    include_prompts: bool = False,
    complete: Optional[Completer] = None,
) -> ItineraryResponse:
    """Compose prompts, call the model once and interpret the reply.

    The whole call is bounded by ``settings.planner_timeout``. When that limit
    is hit the response carries ``TIMEOUT_MESSAGE`` with ``timed_out`` set,
    which callers can tell apart from the gateway's generic fallback reply.
    """
    complete = complete or generate_reply
    prompts = compose_prompts(trip, structured=structured)
    logger.info(
        "Planning %d-day %s trip across %d destination(s)",
        trip.duration_days,
        trip.region,
        len(trip.destinations),
    )

    # Upstream requests outlive the planner limit, so a hang ends in TIMEOUT_MESSAGE.
    upstream = replace(
        settings, gemini_timeout=max(settings.gemini_timeout, settings.planner_timeout + 1)
    )
    timed_out = False
    try:
        reply = await asyncio.wait_for(
            complete(prompts.as_messages(), upstream), timeout=settings.planner_timeout
        )
    except asyncio.TimeoutError:
        logger.warning("Itinerary generation exceeded %.0fs", settings.planner_timeout)
        reply = TIMEOUT_MESSAGE
        timed_out = True

    return ItineraryResponse(
        reply=reply,
        timed_out=timed_out,
        itinerary=interpret(reply),
        contact=contact_details(),
        prompts=prompts if include_prompts else None,
    )


def build_chat_messages(message: str, history: Sequence[ChatMessage] = ()) -> List[ChatMessage]:
    """Prefix the conversation with the assistant rules; caller system turns are dropped."""
    messages = [ChatMessage(role="system", content=CHAT_SYSTEM_PROMPT)]
    messages.extend(turn for turn in history if turn.role != "system")
    messages.append(ChatMessage(role="user", content=message))
    return messages


async def chat_reply(
    message: str,
    settings: Settings,
    *,
    history: Sequence[ChatMessage] = (),
    complete: Optional[Completer] = None,
) -> str:
    """Answer one chat turn and append the booking contact footer."""
    complete = complete or generate_reply
    reply = await complete(build_chat_messages(message, history), settings)
    return f"{reply}\n\n{CHAT_FOOTER}"
