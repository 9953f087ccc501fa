"""Built-in Seed Venues.

큐레이션 저장소 장애 시 빈 화면 대신 보여줄 내장 장소 목록입니다.
"""

from __future__ import annotations

from apps.venue_map.domain.entities import SEED_ID_PREFIX, Venue, curated_order_key
from apps.venue_map.domain.enums import ALL, CategoryFilter, VenueCategory, VenueSource
from apps.venue_map.domain.value_objects import Coordinates

SEED_VENUES: tuple[Venue, ...] = (
    Venue(
        id=f"{SEED_ID_PREFIX}1",
        name="Iron Paradise",
        category=VenueCategory.GYM,
        location=Coordinates(41.0431, 29.0067),
        source=VenueSource.SEED,
        rating=4.8,
        review_count=120,
        description="Premier strength training facility with 24/7 access and sauna.",
        image_url="https://images.unsplash.com/photo-1534438327276-14e5300c3a48?w=800&auto=format&fit=crop&q=60",
        verified=True,
        address="123 Fitness Blvd",
        contact_phone="+1 555-0101",
        website="ironparadise.com",
        hours="24/7 Open",
        amenity_tags=("Sauna", "Free Weights", "Cardio", "Showers"),
    ),
    Venue(
        id=f"{SEED_ID_PREFIX}2",
        name="River Run Path",
        category=VenueCategory.ROUTE,
        location=Coordinates(41.0769, 29.0436),
        source=VenueSource.SEED,
        rating=4.9,
        review_count=85,
        description="Scenic 5km running track along the water. Perfect for sunsets.",
        image_url="https://images.unsplash.com/photo-1506197061617-7f5c0b093236?w=800&auto=format&fit=crop&q=60",
        verified=True,
        address="Riverfront Park Entrance",
        amenity_tags=("Scenic", "5km", "Paved", "Lighting"),
    ),
    Venue(
        id=f"{SEED_ID_PREFIX}3",
        name="Skyline Courts",
        category=VenueCategory.COURT,
        location=Coordinates(41.0766, 29.0135),
        source=VenueSource.SEED,
        rating=4.5,
        review_count=42,
        description="Rooftop tennis courts with panoramic city views.",
        image_url="https://images.unsplash.com/photo-1622279457486-62dcc4a431d6?w=800&auto=format&fit=crop&q=60",
        verified=True,
        address="500 High Rise Ave, Roof",
        contact_phone="+1 555-0103",
        hours="06:00 AM - 10:00 PM",
        amenity_tags=("Tennis", "Equipment Rental", "Lights"),
    ),
    Venue(
        id=f"{SEED_ID_PREFIX}4",
        name="Central Zen",
        category=VenueCategory.PARK,
        location=Coordinates(41.0486, 28.9875),
        source=VenueSource.SEED,
        rating=5.0,
        review_count=210,
        description="Peaceful grassy zone designated for outdoor yoga and meditation.",
        image_url="https://images.unsplash.com/photo-1519125323398-675f0ddb6308?w=800&auto=format&fit=crop&q=60",
        verified=True,
        address="Central Park West",
        amenity_tags=("Yoga", "Meditation", "Quiet Zone"),
    ),
    Venue(
        id=f"{SEED_ID_PREFIX}5",
        name="Aqua Center",
        category=VenueCategory.POOL,
        location=Coordinates(41.0602, 28.9870),
        source=VenueSource.SEED,
        rating=4.7,
        review_count=156,
        description="Olympic-sized heated pool with dedicated lap lanes.",
        image_url="https://images.unsplash.com/photo-1576610616656-d3aa5d1f4534?w=800&auto=format&fit=crop&q=60",
        verified=True,
        address="88 Splash Way",
        contact_phone="+1 555-0199",
        website="aquacenter.city",
        hours="05:00 AM - 09:00 PM",
        amenity_tags=("Heated", "Lanes", "Classes", "Lockers"),
    ),
    Venue(
        id=f"{SEED_ID_PREFIX}6",
        name="Gold Standard Recovery",
        category=VenueCategory.SALON,
        location=Coordinates(41.0370, 28.9850),
        source=VenueSource.SEED,
        rating=5.0,
        review_count=342,
        description="Luxury sports recovery salon. Cryotherapy, massage, and IV drips for elite athletes.",
        image_url="https://images.unsplash.com/photo-1540555700478-4be289fbecef?w=800&auto=format&fit=crop&q=60",
        verified=True,
        sponsored=True,
        address="101 Elite Way, Suite 100",
        contact_phone="+1 800-RECOVER",
        website="goldstandard.recovery",
        hours="08:00 AM - 08:00 PM",
        amenity_tags=("Cryo", "Massage", "Sauna", "IV Therapy", "Luxury"),
    ),
    Venue(
        id=f"{SEED_ID_PREFIX}7",
        name="Pro Nutrition Hub",
        category=VenueCategory.SALON,
        location=Coordinates(41.0255, 28.9744),
        source=VenueSource.SEED,
        rating=4.8,
        review_count=128,
        description="Personalized meal prep and nutrition consulting for high performance.",
        image_url="https://images.unsplash.com/photo-1498837167922-ddd27525d352?w=800&auto=format&fit=crop&q=60",
        verified=True,
        sponsored=True,
        address="45 Health St",
        contact_phone="+1 555-EAT-WELL",
        hours="09:00 AM - 07:00 PM",
        amenity_tags=("Meal Prep", "Supplements", "Consulting"),
    ),
)


def filter_seed_venues(
    category_filter: CategoryFilter = ALL,
    search_text: str | None = None,
) -> tuple[Venue, ...]:
    """시드 목록을 큐레이션 조회와 같은 규칙으로 필터/정렬합니다."""
    matched = [venue for venue in SEED_VENUES if venue.matches(category_filter, search_text)]
    return tuple(sorted(matched, key=curated_order_key))
