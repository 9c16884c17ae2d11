import pytest

from jgtravel.prompts import (
    CHAT_SYSTEM_PROMPT,
    CONTACT_EMAIL,
    CONTACT_LINE,
    CONTACT_PHONES,
    build_system_prompt,
    compose_prompts,
)
from jgtravel.regions import REGIONS
from jgtravel.schemas import TripRequest


@pytest.mark.parametrize("region", sorted(REGIONS))
@pytest.mark.parametrize("structured", [False, True])
def test_every_system_prompt_carries_contact_details(region, structured):
    prompt = build_system_prompt(region, structured=structured)

    assert CONTACT_LINE in prompt
    for phone in CONTACT_PHONES:
        assert phone in prompt
    assert CONTACT_EMAIL in prompt
    assert "Day 1" in prompt
    assert "Economy / Mid / Premium" in prompt


def test_chat_prompt_carries_contact_details():
    assert CONTACT_LINE in CHAT_SYSTEM_PROMPT


def test_structured_variant_requests_fenced_json_block():
    plain = build_system_prompt("himalaya")
    rich = build_system_prompt("himalaya", structured=True)

    assert "```json" not in plain
    assert "```json" in rich
    assert '"dayNumber"' in rich
    assert rich.startswith(plain)


def test_compose_prompts_for_short_adventure_trip():
    trip = TripRequest(
        duration_days=3,
        destinations=["Shimla"],
        trip_type="Adventure",
        budget_tier="Economy",
    )

    prompts = compose_prompts(trip)

    assert "3-day" in prompts.user_prompt
    assert "Shimla" in prompts.user_prompt
    assert "Adventure" in prompts.user_prompt
    assert "Budget: Economy" in prompts.user_prompt
    messages = prompts.as_messages()
    assert [m.role for m in messages] == ["system", "user"]
    assert messages[0].content == prompts.system_prompt


def test_compose_prompts_mentions_optional_fields_only_when_present():
    bare = compose_prompts(TripRequest(destinations=["Gangtok"]))
    assert "Starting city" not in bare.user_prompt
    assert "Notes" not in bare.user_prompt
    assert "Budget: flexible" in bare.user_prompt

    full = compose_prompts(
        TripRequest(destinations=["Gangtok"], starting_city="Siliguri", notes="Needs Nathula permit")
    )
    assert "Starting city: Siliguri" in full.user_prompt
    assert "Notes: Needs Nathula permit" in full.user_prompt


def test_compose_prompts_is_deterministic():
    trip = TripRequest(region="south", destinations=["Munnar", "Alleppey"], duration_days=5)
    assert compose_prompts(trip) == compose_prompts(trip)


def test_compose_prompts_requires_destinations():
    with pytest.raises(ValueError):
        compose_prompts(TripRequest(destinations=[]))
