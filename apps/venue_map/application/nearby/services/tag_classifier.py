"""Tag Classifier.

외부 인덱스(OSM) 태그 집합을 VenueCategory 하나로 분류합니다.

우선순위 (위에서부터 첫 매칭 채택):
1. sport 태그 (세미콜론 목록은 왼쪽부터)
2. 시설 태그 (leisure → amenity → natural → highway → route → shop)
3. 이름 휴리스틱
4. 기본값 GYM
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from apps.venue_map.domain.enums import VenueCategory

DEFAULT_CATEGORY = VenueCategory.GYM

SPORT_CATEGORIES: dict[str, VenueCategory] = {
    "fitness": VenueCategory.GYM,
    "weightlifting": VenueCategory.GYM,
    "crossfit": VenueCategory.CROSSFIT,
    "yoga": VenueCategory.YOGA,
    "pilates": VenueCategory.YOGA,
    "boxing": VenueCategory.BOXING,
    "kickboxing": VenueCategory.BOXING,
    "dance": VenueCategory.DANCE,
    "martial_arts": VenueCategory.MARTIAL_ARTS,
    "karate": VenueCategory.MARTIAL_ARTS,
    "judo": VenueCategory.MARTIAL_ARTS,
    "taekwondo": VenueCategory.MARTIAL_ARTS,
    "aikido": VenueCategory.MARTIAL_ARTS,
    "jiu-jitsu": VenueCategory.MARTIAL_ARTS,
    "climbing": VenueCategory.CLIMBING,
    "bouldering": VenueCategory.CLIMBING,
    "tennis": VenueCategory.TENNIS,
    "table_tennis": VenueCategory.TENNIS,
    "padel": VenueCategory.TENNIS,
    "basketball": VenueCategory.BASKETBALL,
    "soccer": VenueCategory.FOOTBALL,
    "american_football": VenueCategory.FOOTBALL,
    "volleyball": VenueCategory.VOLLEYBALL,
    "beachvolleyball": VenueCategory.VOLLEYBALL,
    "golf": VenueCategory.GOLF,
    "skateboard": VenueCategory.SKATE,
    "ice_skating": VenueCategory.SKATE,
    "running": VenueCategory.TRACK,
    "athletics": VenueCategory.TRACK,
    "cycling": VenueCategory.CYCLING,
    "swimming": VenueCategory.POOL,
}


@dataclass(frozen=True)
class FacilityRule:
    key: str
    values: Mapping[str, VenueCategory]


# 키 평가 순서가 곧 우선순위
FACILITY_RULES: tuple[FacilityRule, ...] = (
    FacilityRule(
        "leisure",
        {
            "fitness_centre": VenueCategory.GYM,
            "fitness_station": VenueCategory.PARK,
            "sports_centre": VenueCategory.GYM,
            "sports_hall": VenueCategory.COURT,
            "pitch": VenueCategory.COURT,
            "park": VenueCategory.PARK,
            "swimming_pool": VenueCategory.POOL,
            "water_park": VenueCategory.POOL,
            "stadium": VenueCategory.STADIUM,
            "track": VenueCategory.TRACK,
            "golf_course": VenueCategory.GOLF,
            "ice_rink": VenueCategory.SKATE,
            "dance": VenueCategory.DANCE,
            "beach_resort": VenueCategory.BEACH,
            "sauna": VenueCategory.SALON,
        },
    ),
    FacilityRule(
        "amenity",
        {
            "dojo": VenueCategory.MARTIAL_ARTS,
            "dancing_school": VenueCategory.DANCE,
            "spa": VenueCategory.SALON,
            "yoga": VenueCategory.YOGA,
        },
    ),
    FacilityRule("natural", {"beach": VenueCategory.BEACH}),
    FacilityRule("highway", {"cycleway": VenueCategory.CYCLING, "footway": VenueCategory.ROUTE}),
    FacilityRule(
        "route",
        {"running": VenueCategory.ROUTE, "hiking": VenueCategory.ROUTE, "bicycle": VenueCategory.CYCLING},
    ),
    FacilityRule("shop", {"massage": VenueCategory.SALON, "beauty": VenueCategory.SALON}),
)

# 튜플 순서 = 우선순위 (crossfit 가 gym 보다 먼저)
NAME_KEYWORDS: tuple[tuple[VenueCategory, tuple[str, ...]], ...] = (
    (VenueCategory.CROSSFIT, ("crossfit", "cross fit")),
    (VenueCategory.YOGA, ("yoga", "pilates")),
    (VenueCategory.BOXING, ("boxing", "boks")),
    (VenueCategory.MARTIAL_ARTS, ("karate", "judo", "taekwondo", "dojo", "mma")),
    (VenueCategory.CLIMBING, ("climbing", "boulder")),
    (VenueCategory.DANCE, ("dance", "dans")),
    (VenueCategory.POOL, ("pool", "havuz", "aquatic")),
    (VenueCategory.TENNIS, ("tennis", "tenis")),
    (VenueCategory.STADIUM, ("stadium", "stadyum", "arena")),
    (VenueCategory.PARK, ("park",)),
)

# amenity_tags 에 노출할 부가 태그 (순서 고정)
AMENITY_TAG_LABELS: tuple[tuple[str, str, str], ...] = (
    ("lit", "yes", "Lighting"),
    ("covered", "yes", "Covered"),
    ("indoor", "yes", "Indoor"),
    ("fee", "no", "Free"),
    ("wheelchair", "yes", "Wheelchair Access"),
    ("shower", "yes", "Showers"),
)


def _split_values(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [value.strip().lower() for value in raw.split(";") if value.strip()]


class TagClassifier:
    """OSM 태그 → VenueCategory 분류기.

    동일한 입력에 대해 항상 동일한 결과를 반환합니다 (상태 없음).
    """

    @staticmethod
    def classify(tags: Mapping[str, str]) -> VenueCategory:
        for sport in _split_values(tags.get("sport")):
            if sport in SPORT_CATEGORIES:
                return SPORT_CATEGORIES[sport]

        for rule in FACILITY_RULES:
            for value in _split_values(tags.get(rule.key)):
                if value in rule.values:
                    return rule.values[value]

        name = (tags.get("name") or "").lower()
        if name:
            for category, keywords in NAME_KEYWORDS:
                if any(keyword in name for keyword in keywords):
                    return category

        return DEFAULT_CATEGORY

    @staticmethod
    def amenity_tags(tags: Mapping[str, str]) -> tuple[str, ...]:
        """표시용 태그 목록 (sport 값 + 부가 시설 태그)."""
        labels: list[str] = []
        for sport in _split_values(tags.get("sport")):
            label = sport.replace("_", " ").title()
            if label not in labels:
                labels.append(label)
        for key, expected, label in AMENITY_TAG_LABELS:
            if (tags.get(key) or "").lower() == expected:
                labels.append(label)
        surface = tags.get("surface")
        if surface:
            labels.append(surface.replace("_", " ").title())
        return tuple(labels)
