from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class PricingOption(CamelModel):
    name: str = Field(..., examples=["Standard Housing"])
    price: float = Field(..., ge=0, examples=[414])
    description: Optional[str] = Field(None, examples=["Ages 18 and older"])


class EventBase(CamelModel):
    title: str = Field(..., examples=["Fall Women's Retreat 1"])
    start_date: date = Field(..., examples=["2025-09-19"])
    end_date: date = Field(..., examples=["2025-09-21"])
    event_type: str = Field(..., examples=["Women's Retreat"])
    description: Optional[str] = None
    age_group: str = Field(..., examples=["18+"])
    gender: Optional[str] = Field(None, pattern="^(Male|Female|Coed)$")
    location: Optional[str] = None
    pricing_options: List[PricingOption] = Field(..., min_length=1)

    @model_validator(mode="after")
    def check_dates(self):
        if self.start_date > self.end_date:
            raise ValueError("startDate must not be after endDate")
        return self


class EventCreate(EventBase):
    pass


class Event(EventBase):
    id: str
    age_min: Optional[int] = None
    age_max: Optional[int] = None

    @computed_field(alias="minPrice")
    @property
    def min_price(self) -> float:
        return min(option.price for option in self.pricing_options)

    @computed_field(alias="maxPrice")
    @property
    def max_price(self) -> float:
        return max(option.price for option in self.pricing_options)


class User(CamelModel):
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    calendar_sync_enabled: bool = False
    google_calendar_id: Optional[str] = None
    outlook_calendar_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserUpsert(CamelModel):
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None


class FavoriteCreate(CamelModel):
    event_id: Optional[str] = None


class FavoriteEvent(CamelModel):
    id: str
    user_id: str
    event_id: str
    added_at: datetime
    synced_to_calendar: bool = False
    external_calendar_event_id: Optional[str] = None


class FavoriteEventWithEvent(FavoriteEvent):
    event: Event


class FavoriteCheck(CamelModel):
    is_favorite: bool


class CalendarSyncUpdate(CamelModel):
    enabled: bool
    google_calendar_id: Optional[str] = None
    outlook_calendar_id: Optional[str] = None


class SyncLogCreate(CamelModel):
    event_id: str
    operation: str = Field(..., pattern="^(create|update|delete)$")
    provider: str = Field(..., pattern="^(google|outlook)$")
    status: str = Field(..., pattern="^(success|failed)$")
    external_event_id: Optional[str] = None
    error_message: Optional[str] = None


class SyncLog(CamelModel):
    id: str
    user_id: str
    event_id: str
    operation: str
    provider: str
    status: str
    external_event_id: Optional[str] = None
    error_message: Optional[str] = None
    synced_at: datetime


class DayEvents(CamelModel):
    day: date = Field(..., alias="date")
    weekday: str
    is_current_month: bool = True
    events: List[Event]
    more_count: int = 0


class MonthView(CamelModel):
    year: int
    month: int
    days: List[DayEvents]


class WeekView(CamelModel):
    start: date
    end: date
    days: List[DayEvents]


class YearMonth(CamelModel):
    month: int
    name: str
    event_count: int
    days: List[DayEvents]


class YearView(CamelModel):
    year: int
    months: List[YearMonth]


class ShareLinks(CamelModel):
    title: str
    text: str
    url: str
    mailto: str
    sms: str


class TypeCounts(CamelModel):
    counts: Dict[str, int]
    total: int
