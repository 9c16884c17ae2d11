from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
from fastapi import BackgroundTasks, Body, Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from jgtravel.config import Settings, get_settings
from jgtravel.gateway import GatewayConfigError, generate_reply
from jgtravel.leads import forward_lead, lead_status, log_lead
from jgtravel.logs import get_logger
from jgtravel.planner import chat_reply, plan_itinerary
from jgtravel.schemas import (
    ChatRequest,
    CompletionReply,
    CompletionRequest,
    ItineraryRequest,
    ItineraryResponse,
)

logger = get_logger(__name__)

app = FastAPI(title="JG Camps & Resorts Planner API")

# The marketing site and local dev servers call these endpoints from the
# browser; JGTRAVEL_ALLOWED_ORIGINS narrows the list in production.
app.add_middleware(
    CORSMiddleware,
    allow_origins=Settings.from_env().allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_MISSING_KEY_DETAIL = "GEMINI_API_KEY is not configured"


@app.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.post("/api/gemini", response_model=CompletionReply)
async def api_gemini(
    payload: Optional[Dict[str, Any]] = Body(None),
    settings: Settings = Depends(get_settings),
) -> CompletionReply:
    """Proxy role-tagged messages to the model and return its reply text.

    Upstream failures still answer 200 with a fallback reply; only a bad
    request (400) or a missing API key (500) surface as errors.
    """
    try:
        request = CompletionRequest.model_validate(payload or {})
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail="messages is required") from exc

    try:
        reply = await generate_reply(request.messages, settings)
    except GatewayConfigError as exc:
        logger.error("Rejecting completion request: %s", exc)
        raise HTTPException(status_code=500, detail=_MISSING_KEY_DETAIL) from exc
    return CompletionReply(reply=reply)


@app.post("/api/itinerary", response_model=ItineraryResponse)
async def api_itinerary(
    background_tasks: BackgroundTasks,
    payload: Dict[str, Any] = Body(...),
    settings: Settings = Depends(get_settings),
) -> ItineraryResponse:
    """Generate an itinerary for the planner form and interpret the reply."""
    try:
        request = ItineraryRequest.model_validate(payload)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False)) from exc
    if not request.destinations:
        raise HTTPException(status_code=400, detail="At least one destination is required")

    try:
        result = await plan_itinerary(
            request,
            settings,
            structured=request.structured,
            include_prompts=request.include_prompts,
        )
    except GatewayConfigError as exc:
        logger.error("Rejecting itinerary request: %s", exc)
        raise HTTPException(status_code=500, detail=_MISSING_KEY_DETAIL) from exc

    background_tasks.add_task(
        log_lead,
        {
            "channel": "planner",
            "page": f"{request.region}-plan",
            "note": ", ".join(request.destinations),
            "meta": {
                "durationDays": request.duration_days,
                "tripType": request.trip_type,
                "budget": request.budget_tier.value if request.budget_tier else None,
                "timedOut": result.timed_out,
            },
        },
        settings,
    )
    return result


@app.post("/api/chat", response_model=CompletionReply)
async def api_chat(
    background_tasks: BackgroundTasks,
    payload: Dict[str, Any] = Body(...),
    settings: Settings = Depends(get_settings),
) -> CompletionReply:
    try:
        request = ChatRequest.model_validate(payload)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail="message is required") from exc
    message = request.message.strip()
    if not message:
        raise HTTPException(status_code=400, detail="message is required")

    try:
        reply = await chat_reply(message, settings, history=request.history)
    except GatewayConfigError as exc:
        logger.error("Rejecting chat request: %s", exc)
        raise HTTPException(status_code=500, detail=_MISSING_KEY_DETAIL) from exc

    background_tasks.add_task(log_lead, {"channel": "chat", "note": message[:200]}, settings)
    return CompletionReply(reply=reply)


@app.get("/api/leads")
async def leads_status(settings: Settings = Depends(get_settings)) -> Dict[str, Any]:
    return lead_status(settings)


@app.post("/api/leads")
async def leads_forward(
    payload: Optional[Dict[str, Any]] = Body(None),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """Forward a lead to the sheet webhook, retrying once on a non-2xx answer."""
    if not settings.leads_webhook_url:
        return JSONResponse(status_code=500, content={"ok": False, "error": "LEADS_WEBHOOK_URL missing"})

    try:
        result = await forward_lead(settings.leads_webhook_url, payload or {})
    except httpx.HTTPError as exc:
        logger.warning("Lead webhook unreachable", exc_info=True)
        return JSONResponse(status_code=500, content={"ok": False, "error": str(exc) or "Server error"})

    if not result.ok:
        return JSONResponse(
            status_code=502,
            content={"ok": False, "status": result.status, "upstream": result.data},
        )
    return JSONResponse(status_code=200, content={"ok": True, "upstream": result.data})
