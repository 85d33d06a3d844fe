"""Seed the events table with sample campus events."""
import argparse
import asyncio
import sys
from datetime import date, time, timedelta
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.schemas.event import EventCreate
from app.services import event_service
from app.services.errors import EventValidationError
from app.services.event_repository import SupabaseEventRepository


def sample_events(start: date) -> list[EventCreate]:
    return [
        EventCreate(
            title="AI Workshop",
            description="Hands-on introduction to building apps with large language models.",
            date=start + timedelta(days=3),
            time=time(17, 0),
            location="Engineering Hall 101",
            department="Computer Science",
            club="ACM Student Chapter",
            tags=["Workshop", "technology", "AI"],
            max_attendees=60,
        ),
        EventCreate(
            title="Soccer Match",
            description="Intramural soccer final. Bring your team colors.",
            date=start + timedelta(days=4),
            time=time(15, 30),
            location="North Field",
            department="Student Life",
            club="Intramural Sports",
            tags=["Sports", "Social"],
        ),
        EventCreate(
            title="Startup Pitch Night",
            description="Student founders pitch to local investors.",
            date=start + timedelta(days=7),
            time=time(18, 0),
            location="Business School Atrium",
            department="Business",
            club="Entrepreneurship Club",
            tags="Competition, startups, networking",
            max_attendees=200,
        ),
        EventCreate(
            title="Robotics Seminar",
            description="Research talk on autonomous navigation for campus delivery robots.",
            date=start + timedelta(days=10),
            time=time(12, 0),
            location="Science Center 204",
            department="Engineering",
            club="Robotics Society",
            tags=["Seminar", "technology"],
        ),
    ]


async def seed(dry_run: bool = False):
    """Validate the sample events and insert them."""
    repository = SupabaseEventRepository()
    events = sample_events(date.today())
    print(f"Loaded {len(events)} sample events")

    for fields in events:
        try:
            if dry_run:
                event_service.validate_event(fields)
                print(f"  Valid: {fields.title}")
                continue
            event = await event_service.create_event(repository, fields)
            print(f"  Created: {event.title} ({event.id})")
        except EventValidationError as e:
            print(f"  Skipped {fields.title}: {e.errors}")
    print("Seed complete!")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--dry-run", action="store_true", help="Validate without inserting")
    args = parser.parse_args()
    asyncio.run(seed(dry_run=args.dry_run))
