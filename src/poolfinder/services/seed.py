"""Built-in sample facilities for a fresh installation."""

import logging
from typing import List

from ..models.base import FacilityRecord
from .coordinator import SaveCoordinator

logger = logging.getLogger(__name__)

SAMPLE_FACILITIES = [
    {
        "id": "1",
        "name": "올림픽 수영장",
        "address": "서울특별시 송파구 올림픽로 424",
        "region": "서울",
        "phone": "02-410-1600",
        "location": {"latitude": 37.5207, "longitude": 127.1215},
        "lanes": 10,
        "length_m": 50,
        "has_kids_pool": True,
        "free_swim_schedule": [
            {"day_class": "weekday", "start_time": "13:00", "end_time": "13:50"},
            {"day_class": "weekday", "start_time": "18:00", "end_time": "18:50"},
            {"day_class": "saturday", "start_time": "09:00", "end_time": "17:00"},
        ],
        "fees": [
            {"type": "adult", "category": "weekday", "price": 6000},
            {"type": "teen", "category": "weekday", "price": 5000},
            {"type": "child", "category": "weekday", "price": 4000},
        ],
        "closed_days": {
            "kind": "structured",
            "policy": {
                "regular_enabled": True,
                "public_holidays_enabled": True,
                "rules": [
                    {"occurrence": "MONTHLY", "week_ordinal": 2, "day_of_week": 0},
                    {"occurrence": "MONTHLY", "week_ordinal": 4, "day_of_week": 0},
                ],
            },
        },
    },
    {
        "id": "2",
        "name": "부산 사직 실내수영장",
        "address": "부산광역시 동래구 사직로 45",
        "region": "부산",
        "phone": "051-500-2121",
        "location": {"latitude": 35.1901, "longitude": 129.0583},
        "lanes": 8,
        "length_m": 50,
        "free_swim_schedule": [
            {"day_class": "weekday", "start_time": "06:00", "end_time": "21:00"},
            {"day_class": "saturday", "start_time": "09:00", "end_time": "18:00"},
        ],
        "fees": [
            {"type": "adult", "category": "weekday", "price": 5000},
            {"type": "child", "category": "weekday", "price": 3000},
        ],
        "closed_days": {
            "kind": "structured",
            "policy": {"rules": [{"occurrence": "WEEKLY", "week_ordinal": 0, "day_of_week": 1}]},
        },
    },
    {
        "id": "3",
        "name": "대전 용운 국제수영장",
        "address": "대전광역시 동구 동부로 138",
        "region": "대전",
        "phone": "042-280-1000",
        "location": {"latitude": 36.3351, "longitude": 127.4601},
        "lanes": 10,
        "length_m": 50,
        "has_kids_pool": True,
        "free_swim_schedule": [
            {"day_class": "weekday", "start_time": "06:00", "end_time": "21:00"},
            {"day_class": "saturday", "start_time": "06:00", "end_time": "18:00"},
        ],
        "fees": [
            {"type": "adult", "category": "weekday", "price": 5500},
            {"type": "teen", "category": "weekday", "price": 4500},
        ],
        "closed_days": {
            "kind": "structured",
            "policy": {
                "rules": [
                    {"occurrence": "MONTHLY", "week_ordinal": 1, "day_of_week": 0},
                    {"occurrence": "MONTHLY", "week_ordinal": 3, "day_of_week": 0},
                ],
            },
        },
    },
    {
        "id": "4",
        "name": "탄천 종합운동장 수영장",
        "address": "경기도 성남시 분당구 탄천로 215",
        "region": "경기",
        "phone": "031-725-7100",
        "location": {"latitude": 37.4087, "longitude": 127.1259},
        "lanes": 7,
        "length_m": 50,
        "has_kids_pool": True,
        "free_swim_schedule": [
            {"day_class": "weekday", "start_time": "06:00", "end_time": "09:00"},
        ],
        "fees": [{"type": "adult", "category": "weekday", "price": 5000}],
        "closed_days": "매월 첫째, 셋째 일요일",
    },
]


def sample_facilities() -> List[FacilityRecord]:
    return [FacilityRecord.model_validate(item) for item in SAMPLE_FACILITIES]


async def seed_if_empty(coordinator: SaveCoordinator) -> int:
    """
    Load the sample facilities when storage holds none.

    Returns:
        Number of facilities written
    """
    if await coordinator.read():
        return 0

    written = 0
    for record in sample_facilities():
        await coordinator.save(record, actor_id="system")
        written += 1

    logger.info(f"Seeded {written} sample facilities")
    return written
