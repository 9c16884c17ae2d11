# jgtravel/prompts.py
"""Prompt templates for the itinerary planner and the chat assistant."""
from __future__ import annotations

from typing import List

from jgtravel.regions import Region, get_region
from jgtravel.schemas import PromptPair, TripRequest, parse_duration

__all__ = [
    "AGENCY_NAME",
    "CONTACT_PHONES",
    "CONTACT_EMAIL",
    "CONTACT_LINE",
    "CHAT_SYSTEM_PROMPT",
    "build_system_prompt",
    "build_user_prompt",
    "compose_prompts",
    "parse_duration",
]

AGENCY_NAME = "JG Camps & Resorts"
CONTACT_PHONES = ("8595167227", "8076874150")
CONTACT_EMAIL = "jgadven@gmail.com"
CONTACT_LINE = (
    f"For stay bookings and accommodation options, contact {AGENCY_NAME} at "
    f"📞 {CONTACT_PHONES[0]} / {CONTACT_PHONES[1]} or ✉️ {CONTACT_EMAIL}."
)

PLANNER_SYSTEM_TEMPLATE = """You are a professional travel planner for **{agency}**, specialising in {region}.
Rules:
- Do NOT mention or recommend any specific hotel, resort, homestay, Airbnb, stay property or booking platform by name.
- Whenever you would otherwise recommend a stay or property, instead say: "{contact_line}"
- Produce a clean Markdown itinerary with sequential headings "Day 1", "Day 2", etc.
- For each day mention approximate travel times, 2-3 activity highlights, and cafe or local food ideas.
- Include short cost guidance across three tiers (Economy / Mid / Premium) without naming any hotel, vendor or operator.
- End with a one-line summary encouraging the traveller to contact {agency} for bookings.
- Keep the tone concise, friendly, and traveller-focused."""

STRUCTURED_RULE_TEMPLATE = """
- After the Markdown itinerary, append ONE fenced ```json code block with this shape (omit unknown fields, no comments):
{schema}"""

STRUCTURED_SCHEMA = """{
  "overview": "string",
  "totalNights": 0,
  "route": ["place", "..."],
  "days": [
    {
      "dayNumber": 1,
      "title": "string",
      "driveTime": "string",
      "nightsAt": "string",
      "highlights": ["string"],
      "foodSuggestions": ["string"]
    }
  ],
  "costGuidance": {"economy": "string", "mid": "string", "premium": "string"},
  "summary": "string"
}"""

USER_TEMPLATE = """Plan a {days}-day {trip_type} itinerary.
States: {states}
Spots / regions: {destinations}
Budget: {budget}"""

CHAT_SYSTEM_PROMPT = f"""You are {AGENCY_NAME} travel assistant.
Rules:
- NEVER mention hotel, resort, homestay or property names.
- For any stay or booking requests, always say:
  "{CONTACT_LINE}"
- Be short, helpful, and travel-focused."""

CHAT_FOOTER = (
    f"📩 *For stay bookings or packages, please contact {AGENCY_NAME} — "
    f"{CONTACT_PHONES[0]} / {CONTACT_PHONES[1]} or {CONTACT_EMAIL}*"
)


def build_system_prompt(region: Region | str, structured: bool = False) -> str:
    """Return the planner system prompt carrying the booking and contact rules."""
    if not isinstance(region, Region):
        region = get_region(region)
    prompt = PLANNER_SYSTEM_TEMPLATE.format(
        agency=AGENCY_NAME,
        region=region.label,
        contact_line=CONTACT_LINE,
    )
    if structured:
        prompt += STRUCTURED_RULE_TEMPLATE.format(schema=STRUCTURED_SCHEMA)
    return prompt


def build_user_prompt(trip: TripRequest) -> str:
    region = get_region(trip.region)
    lines: List[str] = [
        USER_TEMPLATE.format(
            days=trip.duration_days,
            trip_type=trip.trip_type or region.default_trip_type,
            states=", ".join(trip.states) or region.label,
            destinations=", ".join(trip.destinations) or region.fallback_places,
            budget=region.budget_labels[trip.budget_tier.rank] if trip.budget_tier else "flexible",
        )
    ]
    if trip.starting_city:
        lines.append(f"Starting city: {trip.starting_city}")
    if trip.notes:
        lines.append(f"Notes: {trip.notes}")
    lines.append(region.focus)
    return "\n".join(lines)


def compose_prompts(trip: TripRequest, structured: bool = False) -> PromptPair:
    """Build the system/user prompt pair for one generation request.

    Callers validate the request first; an empty destination list is a caller
    bug and raises ``ValueError``.
    """
    if not trip.destinations:
        raise ValueError("At least one destination is required")
    return PromptPair(
        system_prompt=build_system_prompt(trip.region, structured=structured),
        user_prompt=build_user_prompt(trip),
    )
