"""Planner regions offered on the site and their form choices."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple


@dataclass(frozen=True)
class Region:
    key: str
    label: str
    trip_types: Tuple[str, ...]
    default_trip_type: str
    fallback_places: str
    focus: str
    default_days: int = 4
    states: Tuple[str, ...] = field(default_factory=tuple)
    # Budget choices on the region's form, lowest tier first.
    budget_labels: Tuple[str, str, str] = ("Economy", "Premium", "Luxury")


REGIONS: Dict[str, Region] = {
    "himalaya": Region(
        key="himalaya",
        label="Himalaya",
        trip_types=("Adventure", "Spiritual", "Family", "Wellness", "Group", "Leisure"),
        default_trip_type="Himalayan",
        fallback_places="Himalayan highlights",
        focus="Account for mountain roads, acclimatisation and weather windows.",
        states=(
            "Himachal Pradesh",
            "Uttarakhand",
            "Jammu & Kashmir",
            "Ladakh",
            "Sikkim",
            "Arunachal Pradesh",
        ),
    ),
    "north": Region(
        key="north",
        label="North India",
        trip_types=("Adventure", "Cultural", "Family", "Spiritual", "Wellness", "Luxury"),
        default_trip_type="North India",
        fallback_places="North Indian highlights",
        focus="Ensure cultural, scenic, and spiritual balance with travel-friendly pacing.",
        states=("Delhi", "Punjab", "Haryana", "Uttarakhand", "Himachal Pradesh", "Jammu & Kashmir"),
    ),
    "south": Region(
        key="south",
        label="South India",
        trip_types=("Adventure", "Spiritual", "Family", "Wellness", "Group", "Leisure"),
        default_trip_type="South Indian",
        fallback_places="regional highlights",
        focus="Keep it balanced and traveller-friendly.",
        states=("Kerala", "Karnataka", "Tamil Nadu", "Andhra Pradesh", "Telangana", "Puducherry"),
    ),
    "central": Region(
        key="central",
        label="Central India",
        trip_types=("Adventure", "Cultural", "Wildlife", "Spiritual", "Family", "Leisure"),
        default_trip_type="Central India",
        fallback_places="Central Indian highlights",
        focus="Ensure a good balance of nature, culture, and comfort.",
        states=("Madhya Pradesh", "Chhattisgarh"),
    ),
    "spiritual": Region(
        key="spiritual",
        label="Spiritual India",
        trip_types=("Char Dham", "Jyotirlinga", "Temple Trail", "Buddhist Circuit", "Sikh Heritage"),
        default_trip_type="Spiritual",
        fallback_places="spiritual highlights",
        focus=(
            "Consider accessibility and travel-friendly pacing, with short notes on "
            "rituals, attire and permits where relevant."
        ),
        default_days=5,
        budget_labels=("Economy", "Mid", "Premium"),
    ),
    "group": Region(
        key="group",
        label="Group Retreats",
        trip_types=("Corporate Offsite", "School Trip", "College Tour", "Family Reunion", "Spiritual Retreat"),
        default_trip_type="group retreat",
        fallback_places="locations as discussed",
        focus="Propose a practical route, nights per stop, and a sample daily programme for the group.",
        budget_labels=("Economy", "Mid", "Premium"),
    ),
    "multi": Region(
        key="multi",
        label="Multi-Destination",
        trip_types=("Adventure", "Leisure", "Family", "Honeymoon", "Spiritual"),
        default_trip_type="multi-destination",
        fallback_places="the selected destinations",
        focus=(
            "Propose the best route order to minimise backtracking and allocate nights "
            "per destination accordingly."
        ),
    ),
}

DEFAULT_REGION = "himalaya"


def get_region(key: str | None) -> Region:
    """Look up a region by key, raising ``KeyError`` for unknown keys."""
    normalised = (key or DEFAULT_REGION).strip().lower()
    if normalised not in REGIONS:
        raise KeyError(f"Unknown region '{key}'")
    return REGIONS[normalised]
