"""Base models for the poolfinder service."""

import json
import logging
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

logger = logging.getLogger(__name__)

TIME_PATTERN = r"^([01][0-9]|2[0-3]):[0-5][0-9]$"  # HH:MM, 24-hour


class DayClass(str, Enum):
    """Which days a free-swim schedule rule applies to."""
    WEEKDAY = "weekday"                        # Monday to Friday
    SATURDAY = "saturday"
    SUNDAY = "sunday"
    WEEKEND_OR_HOLIDAY = "weekend_or_holiday"
    ALL = "all"


# Labels written by the first version of the registration form
LEGACY_DAY_LABELS = {
    "평일(월-금)": DayClass.WEEKDAY,
    "토요일": DayClass.SATURDAY,
    "일요일": DayClass.SUNDAY,
    "공휴일": DayClass.WEEKEND_OR_HOLIDAY,
}


class Occurrence(str, Enum):
    """Recurrence of a regular closure rule."""
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"


class FeeType(str, Enum):
    ADULT = "adult"
    TEEN = "teen"
    CHILD = "child"
    SENIOR = "senior"


class FeeCategory(str, Enum):
    WEEKDAY = "weekday"
    WEEKEND_OR_HOLIDAY = "weekend_or_holiday"


class Backend(str, Enum):
    """Storage backend that ultimately served an operation."""
    PRIMARY = "primary"
    SECONDARY = "secondary"
    NONE = "none"


class Location(BaseModel):
    """Geographic location."""
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)

    def as_tuple(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


class ScheduleRule(BaseModel):
    """One weekly free-swim session, times as HH:MM at minute resolution."""
    day_class: DayClass
    start_time: str = Field(..., pattern=TIME_PATTERN)
    end_time: str = Field(..., pattern=TIME_PATTERN)

    @field_validator("day_class", mode="before")
    @classmethod
    def _accept_legacy_labels(cls, value: Any) -> Any:
        if isinstance(value, str) and value in LEGACY_DAY_LABELS:
            return LEGACY_DAY_LABELS[value]
        return value

    @property
    def start_minute(self) -> int:
        hours, minutes = map(int, self.start_time.split(":"))
        return hours * 60 + minutes

    @property
    def end_minute(self) -> int:
        hours, minutes = map(int, self.end_time.split(":"))
        return hours * 60 + minutes

    def to_time_string(self) -> str:
        """Convert to readable time string."""
        return f"{self.start_time}-{self.end_time}"


class FeeInfo(BaseModel):
    """Admission fee entry."""
    type: FeeType
    category: FeeCategory = FeeCategory.WEEKDAY
    price: int = Field(..., ge=0)
    description: Optional[str] = None

    @field_validator("category", mode="before")
    @classmethod
    def _accept_legacy_category(cls, value: Any) -> Any:
        if value == "평일":
            return FeeCategory.WEEKDAY
        if value == "주말/공휴일":
            return FeeCategory.WEEKEND_OR_HOLIDAY
        return value


class Review(BaseModel):
    """Free-form user review, carried as-is."""
    id: str
    user_id: str
    user_name: str
    rating: int = Field(..., ge=1, le=5)
    content: str
    date: str


class HolidayRule(BaseModel):
    """Regular closure rule: every week, or the nth weekday of the month.

    Also accepts the camelCase keys written by the first web client
    (type, weekNumber, dayOfWeek).
    """
    occurrence: Occurrence = Field(
        default=Occurrence.WEEKLY,
        validation_alias=AliasChoices("occurrence", "type"),
    )
    week_ordinal: int = Field(
        default=0, ge=0, le=5,
        validation_alias=AliasChoices("week_ordinal", "weekNumber"),
    )  # 0 = every week
    day_of_week: int = Field(
        ..., ge=0, le=6,
        validation_alias=AliasChoices("day_of_week", "dayOfWeek"),
    )  # 0 = Sunday ... 6 = Saturday

    @field_validator("week_ordinal", mode="before")
    @classmethod
    def _missing_ordinal_is_every_week(cls, value: Any) -> Any:
        return 0 if value is None else value


class HolidayPolicy(BaseModel):
    """Structured closed-day settings."""
    regular_enabled: bool = Field(
        default=True,
        validation_alias=AliasChoices("regular_enabled", "regularHolidayEnabled"),
    )
    specific_dates_enabled: bool = Field(
        default=False,
        validation_alias=AliasChoices("specific_dates_enabled", "specificHolidayEnabled"),
    )
    public_holidays_enabled: bool = Field(
        default=False,
        validation_alias=AliasChoices("public_holidays_enabled", "publicHolidayEnabled"),
    )
    temporary_enabled: bool = Field(
        default=False,
        validation_alias=AliasChoices("temporary_enabled", "temporaryHolidayEnabled"),
    )
    rules: List[HolidayRule] = Field(default_factory=list)


class LegacyClosure(BaseModel):
    """Free-text closure label kept for records written before structured rules."""
    kind: Literal["legacy"] = "legacy"
    text: str = ""


class StructuredClosure(BaseModel):
    """Closure described by a HolidayPolicy."""
    kind: Literal["structured"] = "structured"
    policy: HolidayPolicy = Field(default_factory=HolidayPolicy)


ClosureDescriptor = Annotated[
    Union[LegacyClosure, StructuredClosure],
    Field(discriminator="kind"),
]


def _downgrade(raw: Any, reason: str) -> LegacyClosure:
    logger.warning(f"Ignoring malformed closure ({reason}), keeping it as text")
    if isinstance(raw, str):
        return LegacyClosure(text=raw)
    return LegacyClosure(text=json.dumps(raw, ensure_ascii=False, default=str))


def _rule_list(items: Any) -> StructuredClosure:
    if not isinstance(items, list):
        raise TypeError("closure rules must be a list")
    return StructuredClosure(policy=HolidayPolicy(rules=[HolidayRule.model_validate(item) for item in items]))


def coerce_closure(raw: Any, holiday_options: Any = None) -> Any:
    """Map the raw closed-day representations onto the tagged variant.

    Structured data that does not validate is downgraded to legacy text so
    that the record still loads and evaluates as "not closed".
    """
    if holiday_options is not None:
        try:
            return StructuredClosure(policy=HolidayPolicy.model_validate(holiday_options))
        except ValidationError as e:
            logger.warning(f"Ignoring malformed holiday options: {e.error_count()} errors")
            return LegacyClosure(text=raw if isinstance(raw, str) else "")

    if raw is None:
        return LegacyClosure()

    if isinstance(raw, (LegacyClosure, StructuredClosure)):
        return raw

    if isinstance(raw, str):
        stripped = raw.strip()
        if stripped.startswith("["):
            try:
                return _rule_list(json.loads(stripped))
            except (ValueError, TypeError, ValidationError):
                logger.debug("Closed-day text looks like JSON but is not a rule list")
        return LegacyClosure(text=raw)

    if isinstance(raw, list):
        try:
            return _rule_list(raw)
        except ValidationError as e:
            return _downgrade(raw, f"{e.error_count()} rule errors")

    if isinstance(raw, dict):
        if raw.get("kind") == "legacy":
            try:
                return LegacyClosure.model_validate(raw)
            except ValidationError:
                return _downgrade(raw.get("text"), "legacy text is not a string")
        policy = raw.get("policy", {}) if raw.get("kind") == "structured" else raw
        try:
            return StructuredClosure(policy=HolidayPolicy.model_validate(policy))
        except ValidationError as e:
            return _downgrade(raw, f"{e.error_count()} policy errors")

    return _downgrade(raw, f"unsupported type {type(raw).__name__}")


class FacilityRecord(BaseModel):
    """A public swimming facility."""
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., min_length=1)
    name: str = ""
    address: str = ""
    region: str = ""
    phone: str = ""
    image_url: str = ""
    location: Optional[Location] = None

    lanes: Optional[int] = Field(default=None, ge=0)
    length_m: Optional[int] = Field(default=None, ge=0)
    has_kids_pool: bool = False
    has_heated_pool: bool = False
    has_walking_lane: bool = False
    extra_features: str = ""

    free_swim_schedule: List[ScheduleRule] = Field(default_factory=list)
    fees: List[FeeInfo] = Field(default_factory=list)
    closed_days: ClosureDescriptor = Field(default_factory=LegacyClosure)
    is_public: bool = True

    reviews: List[Review] = Field(default_factory=list)

    created_by: Optional[str] = None
    last_modified_by: Optional[str] = None
    created_at: Optional[datetime] = None

    @model_validator(mode="before")
    @classmethod
    def _normalize_closure(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        holiday_options = data.pop("holiday_options", None)
        legacy_options = data.pop("holidayOptions", None)
        if holiday_options is None:
            holiday_options = legacy_options
        if "is_public" in data and data["is_public"] is None:
            data["is_public"] = True
        data["closed_days"] = coerce_closure(data.get("closed_days"), holiday_options)
        return data

    @property
    def has_schedule(self) -> bool:
        return bool(self.free_swim_schedule)

    def without_audit(self) -> dict:
        """Dump the record without audit fields, for content comparison."""
        return self.model_dump(exclude={"created_by", "last_modified_by", "created_at"})


class VersionSnapshot(BaseModel):
    """Immutable copy of a facility record taken before it was overwritten."""
    model_config = ConfigDict(frozen=True)

    id: str
    facility_id: str
    data: FacilityRecord
    created_at: datetime
