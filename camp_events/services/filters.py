"""
Event filtering shared by the list and calendar views.

Everything here is pure: functions take a list of events and return a new
list (or mapping) without touching the input, so the same engine backs the
month, week, year and list endpoints.
"""
import math
import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from camp_events.core.errors import ValidationError
from camp_events.db.schemas import Event

TITLE_ONLY = ("title",)
LIST_SEARCH_FIELDS = ("title", "event_type", "location")

# Label -> (min age, max age). None as max means open-ended; None as the
# whole range means the label does not restrict anything.
AGE_GROUP_RANGES: Dict[str, Optional[Tuple[int, Optional[int]]]] = {
    "Kids (8-11)": (8, 11),
    "Youth (12-17)": (12, 17),
    "Adults (18+)": (18, None),
    "All Ages": None,
}

_OPEN_ENDED = re.compile(r"^\s*(\d+)\s*\+\s*$")
_BOUNDED = re.compile(r"^\s*(\d+)\s*-\s*(\d+)\s*$")
_SINGLE = re.compile(r"^\s*(\d+)\s*$")


def parse_age_group(text: Optional[str]) -> Tuple[Optional[int], Optional[int]]:
    """
    Turn an age descriptor into a structured range.

    "8+" -> (8, None), "16-75" -> (16, 75), "12" -> (12, 12). Anything else
    (including "All Ages") -> (None, None), an unrestricted event.
    """
    if not text:
        return None, None
    match = _OPEN_ENDED.match(text)
    if match:
        return int(match.group(1)), None
    match = _BOUNDED.match(text)
    if match:
        low, high = int(match.group(1)), int(match.group(2))
        return min(low, high), max(low, high)
    match = _SINGLE.match(text)
    if match:
        return int(match.group(1)), int(match.group(1))
    return None, None


def price_bounds(event: Event) -> Tuple[float, float]:
    prices = [option.price for option in event.pricing_options]
    return min(prices), max(prices)


@dataclass(frozen=True)
class PriceRange:
    min: float = 0
    max: float = math.inf

    def __post_init__(self):
        if self.min < 0 or self.max < self.min:
            raise ValidationError("Invalid price range", detail=f"min={self.min}, max={self.max}")

    def overlaps(self, low: float, high: float) -> bool:
        return low <= self.max and high >= self.min


@dataclass(frozen=True)
class FilterSpec:
    search: str = ""
    event_types: FrozenSet[str] = field(default_factory=frozenset)
    price_range: Optional[PriceRange] = None
    age_groups: FrozenSet[str] = field(default_factory=frozenset)
    search_fields: Tuple[str, ...] = TITLE_ONLY

    def __post_init__(self):
        unknown = sorted(set(self.age_groups) - set(AGE_GROUP_RANGES))
        if unknown:
            raise ValidationError("Unknown age group", detail=", ".join(unknown))

    @classmethod
    def build(cls, search: str = None, event_types: Iterable[str] = None, min_price: float = None,
              max_price: float = None, age_groups: Iterable[str] = None,
              search_fields: Tuple[str, ...] = TITLE_ONLY) -> "FilterSpec":
        price_range = None
        if min_price is not None or max_price is not None:
            price_range = PriceRange(
                min=0 if min_price is None else min_price,
                max=math.inf if max_price is None else max_price,
            )
        return cls(
            search=(search or "").strip(),
            event_types=frozenset(event_types or ()),
            price_range=price_range,
            age_groups=frozenset(age_groups or ()),
            search_fields=search_fields,
        )


def matches_search(event: Event, needle: str, search_fields: Tuple[str, ...]) -> bool:
    if not needle:
        return True
    needle = needle.lower()
    for name in search_fields:
        value = getattr(event, name, None)
        if value and needle in value.lower():
            return True
    return False


def matches_age_groups(event: Event, labels: FrozenSet[str]) -> bool:
    if not labels:
        return True
    event_low = event.age_min if event.age_min is not None else 0
    event_high = event.age_max if event.age_max is not None else math.inf
    for label in labels:
        bounds = AGE_GROUP_RANGES[label]
        if bounds is None:
            return True
        low, high = bounds
        if high is None:
            high = math.inf
        if event_low <= high and event_high >= low:
            return True
    return False


def matches(event: Event, spec: FilterSpec) -> bool:
    if not matches_search(event, spec.search, spec.search_fields):
        return False
    if spec.event_types and event.event_type not in spec.event_types:
        return False
    if spec.price_range is not None and not spec.price_range.overlaps(*price_bounds(event)):
        return False
    return matches_age_groups(event, spec.age_groups)


def filter_events(events: List[Event], spec: FilterSpec) -> List[Event]:
    """Return the events matching every predicate in spec, in input order."""
    return [event for event in events if matches(event, spec)]


def event_type_counts(events: Iterable[Event]) -> Dict[str, int]:
    return dict(Counter(event.event_type for event in events))


def sort_by_start(events: List[Event]) -> List[Event]:
    return sorted(events, key=lambda event: (event.start_date, event.end_date))
