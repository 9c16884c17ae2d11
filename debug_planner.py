# debug_planner.py
import asyncio
import json

from jgtravel.config import Settings
from jgtravel.planner import plan_itinerary
from jgtravel.schemas import TripRequest


async def main():
    trip = TripRequest.model_validate(
        {
            "region": "himalaya",
            "duration": "5",
            "tripType": "Adventure",
            "states": ["Himachal Pradesh"],
            "destinations": ["Manali", "Kasol", "Bir Billing"],
            "budget": "Premium",
            "startingCity": "Delhi",
            "notes": "Travelling with two teenagers; keep treks moderate.",
        }
    )
    result = await plan_itinerary(trip, Settings.from_env(), structured=True, include_prompts=True)
    print(json.dumps(result.model_dump(mode="json"), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    asyncio.run(main())
