import math
import re
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Sequence

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)

from jgtravel.regions import DEFAULT_REGION, REGIONS

DEFAULT_DURATION_DAYS = 4

_DURATION_ALIASES = ("duration_days", "durationDays", "duration")


def parse_duration(label: Any, default: int = DEFAULT_DURATION_DAYS) -> int:
    """Resolve a duration label such as ``"10+"`` or ``"4D/3N"`` to whole days.

    The leading integer of the label wins. Labels that do not start with a
    positive integer resolve to ``default``.
    """
    if isinstance(label, bool) or label is None:
        return default
    if isinstance(label, (int, float)):
        if not math.isfinite(label):
            return default
        days = int(label)
        return days if days > 0 else default
    match = re.match(r"\s*(\d+)", str(label))
    if not match:
        return default
    days = int(match.group(1))
    return days if days > 0 else default


def _unique_names(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        raise ValueError("expected a list of names")
    names: List[str] = []
    seen: set[str] = set()
    for item in value:
        for part in str(item).split(","):
            name = part.strip()
            if name and name.lower() not in seen:
                seen.add(name.lower())
                names.append(name)
    return names


def _budget_key(label: str) -> str:
    return re.sub(r"[\s_/-]+", " ", label.strip().lower())


def _as_text(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


# ------- Trip input -------
class BudgetTier(str, Enum):
    economy = "economy"
    mid = "mid"
    luxury = "luxury"

    @property
    def rank(self) -> int:
        return list(BudgetTier).index(self)

    @classmethod
    def from_label(cls, label: str, labels: Sequence[str] = ()) -> Optional["BudgetTier"]:
        """Map a budget label to its tier.

        ``labels`` are the form choices of the requesting page, lowest first;
        a label matching one of them takes that position. Other labels fall
        back to common synonyms.
        """
        key = _budget_key(label)
        if not key or key == "flexible":
            return None
        for rank, choice in enumerate(labels):
            if key == _budget_key(choice):
                return list(cls)[rank]
        if key in {"economy", "budget", "low", "basic", "₹"}:
            return cls.economy
        if key in {"mid", "mid range", "mid premium", "midrange", "moderate", "premium", "standard", "comfort", "₹₹"}:
            return cls.mid
        if key in {"luxury", "lux", "high end", "₹₹₹"}:
            return cls.luxury
        raise ValueError(f"Unknown budget tier '{label}'")


class TripRequest(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    region: str = DEFAULT_REGION
    duration_days: int = Field(
        DEFAULT_DURATION_DAYS, validation_alias=AliasChoices(*_DURATION_ALIASES)
    )
    trip_type: str = Field("", validation_alias=AliasChoices("trip_type", "tripType"))
    states: List[str] = Field(default_factory=list)
    destinations: List[str] = Field(default_factory=list)
    budget_tier: Optional[BudgetTier] = Field(
        None, validation_alias=AliasChoices("budget_tier", "budgetTier", "budget")
    )
    starting_city: Optional[str] = Field(
        None, validation_alias=AliasChoices("starting_city", "startingCity")
    )
    notes: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _resolve_duration(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        region_key = str(data.get("region") or DEFAULT_REGION).strip().lower()
        region = REGIONS.get(region_key)
        default = region.default_days if region else DEFAULT_DURATION_DAYS
        label = None
        for key in _DURATION_ALIASES:
            if key in data:
                label = data.pop(key)
                break
        data["duration_days"] = parse_duration(label, default=default)
        return data

    @field_validator("region", mode="before")
    @classmethod
    def _known_region(cls, value: Any) -> str:
        key = str(value or DEFAULT_REGION).strip().lower()
        if key not in REGIONS:
            raise ValueError(f"Unknown region '{value}'")
        return key

    @field_validator("states", "destinations", mode="before")
    @classmethod
    def _dedupe_names(cls, value: Any) -> List[str]:
        return _unique_names(value)

    @field_validator("budget_tier", mode="before")
    @classmethod
    def _budget_label(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None or isinstance(value, BudgetTier):
            return value
        region = REGIONS.get(info.data.get("region", DEFAULT_REGION))
        return BudgetTier.from_label(str(value), region.budget_labels if region else ())

    @field_validator("trip_type", mode="before")
    @classmethod
    def _strip_trip_type(cls, value: Any) -> str:
        return str(value or "").strip()

    @field_validator("starting_city", "notes", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        return text or None


# ------- Gateway models -------
class ChatMessage(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: str


class PromptPair(BaseModel):
    model_config = ConfigDict(frozen=True)

    system_prompt: str
    user_prompt: str

    def as_messages(self) -> List[ChatMessage]:
        return [
            ChatMessage(role="system", content=self.system_prompt),
            ChatMessage(role="user", content=self.user_prompt),
        ]


class CompletionRequest(BaseModel):
    messages: List[ChatMessage] = Field(..., min_length=1)


class CompletionReply(BaseModel):
    reply: str


# ------- Interpreted itinerary -------
class ItineraryDay(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    day_number: int = Field(..., validation_alias=AliasChoices("day_number", "dayNumber", "day"))
    title: str
    drive_time: Optional[str] = Field(None, validation_alias=AliasChoices("drive_time", "driveTime"))
    nights_at: Optional[str] = Field(None, validation_alias=AliasChoices("nights_at", "nightsAt"))
    highlights: List[str] = Field(default_factory=list)
    food_suggestions: Optional[List[str]] = Field(
        None, validation_alias=AliasChoices("food_suggestions", "foodSuggestions")
    )

    @field_validator("title", "drive_time", "nights_at", mode="before")
    @classmethod
    def _scalar_text(cls, value: Any) -> Any:
        return _as_text(value)

    @field_validator("highlights", mode="before")
    @classmethod
    def _null_highlights(cls, value: Any) -> Any:
        return [] if value is None else value


class CostGuidance(BaseModel):
    model_config = ConfigDict(extra="ignore")

    economy: Optional[str] = None
    mid: Optional[str] = None
    premium: Optional[str] = None

    @field_validator("economy", "mid", "premium", mode="before")
    @classmethod
    def _scalar_text(cls, value: Any) -> Any:
        return _as_text(value)


class StructuredItinerary(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    overview: Optional[str] = None
    total_nights: Optional[int] = Field(None, validation_alias=AliasChoices("total_nights", "totalNights"))
    route: Optional[List[str]] = None
    days: List[ItineraryDay] = Field(default_factory=list)
    cost_guidance: Optional[CostGuidance] = Field(
        None, validation_alias=AliasChoices("cost_guidance", "costGuidance")
    )
    summary: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _number_days(cls, data: Any) -> Any:
        # Models often omit the day number or title; fall back to the position.
        if not isinstance(data, dict) or not isinstance(data.get("days"), list):
            return data
        days = []
        for idx, day in enumerate(data["days"], 1):
            if isinstance(day, dict):
                day = dict(day)
                if not any(key in day for key in ("day_number", "dayNumber", "day")):
                    day["day_number"] = idx
                if not day.get("title"):
                    number = day.get("day_number", day.get("dayNumber", day.get("day")))
                    day["title"] = f"Day {number}"
            days.append(day)
        return {**data, "days": days}


class DaySection(BaseModel):
    title: str
    body: str


class InterpretedItinerary(BaseModel):
    kind: Literal["structured", "sections", "raw"]
    structured: Optional[StructuredItinerary] = None
    sections: List[DaySection] = Field(default_factory=list)
    preamble: Optional[str] = None
    raw: Optional[str] = None


# ------- API models -------
class ContactDetails(BaseModel):
    phones: List[str]
    email: str
    line: str


class ItineraryRequest(TripRequest):
    structured: bool = False
    include_prompts: bool = Field(False, validation_alias=AliasChoices("include_prompts", "includePrompts"))


class ItineraryResponse(BaseModel):
    reply: str
    timed_out: bool = False
    itinerary: InterpretedItinerary
    contact: ContactDetails
    prompts: Optional[PromptPair] = None


class ChatRequest(BaseModel):
    message: str
    history: List[ChatMessage] = Field(default_factory=list)


class LeadPayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    channel: str
    name: Optional[str] = None
    phone: Optional[str] = None
    note: Optional[str] = None
    page: Optional[str] = None
    meta: Dict[str, Any] = Field(default_factory=dict)
