"""Best-effort lead logging to the sheet webhook."""
from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx

from jgtravel.config import Settings
from jgtravel.logs import get_logger
from jgtravel.schemas import LeadPayload

logger = get_logger(__name__)

LEAD_TIMEOUT_SECONDS = 10.0
FORWARD_ATTEMPTS = 2


@dataclass
class LeadForwardResult:
    ok: bool
    status: int
    data: Any = None


def _tolerant_json(text: str) -> Any:
    # Apps Script webhooks sometimes answer with plain text.
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return None


async def forward_lead(url: str, payload: Dict[str, Any], *, attempts: int = FORWARD_ATTEMPTS) -> LeadForwardResult:
    """POST ``payload`` to the webhook, retrying once on a non-2xx answer.

    Transport errors propagate to the caller.
    """
    result = LeadForwardResult(ok=False, status=500)
    async with httpx.AsyncClient(timeout=LEAD_TIMEOUT_SECONDS, follow_redirects=True) as client:
        for _ in range(max(1, attempts)):
            response = await client.post(url, json=payload)
            result = LeadForwardResult(
                ok=response.is_success,
                status=response.status_code,
                data=_tolerant_json(response.text),
            )
            if result.ok:
                break
    return result


async def log_lead(payload: LeadPayload | Dict[str, Any], settings: Settings) -> bool:
    """Record a lead without ever failing the caller.

    Returns ``True`` only when the webhook accepted the lead. A missing webhook,
    a non-2xx answer or a transport error are logged as warnings.
    """
    try:
        lead = payload if isinstance(payload, LeadPayload) else LeadPayload.model_validate(payload)
        body = lead.model_dump(mode="json", exclude_none=True)
        body["meta"] = {**body.get("meta", {}), "serverTs": datetime.now(timezone.utc).isoformat()}
        if not settings.leads_webhook_url:
            logger.warning("LEADS_WEBHOOK_URL not set; dropping %s lead", lead.channel)
            return False
        result = await forward_lead(settings.leads_webhook_url, body, attempts=1)
        if not result.ok:
            logger.warning("Lead log upstream returned HTTP %s", result.status)
        return result.ok
    except Exception:
        logger.warning("Lead log failed", exc_info=True)
        return False


def lead_status(settings: Settings) -> Dict[str, Optional[Any]]:
    present = bool(settings.leads_webhook_url)
    return {
        "ok": True,
        "envPresent": present,
        "message": "API ready" if present else "Missing LEADS_WEBHOOK_URL",
    }
