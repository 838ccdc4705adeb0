"""
Weekday Model

Ordinals follow the calendar standard: Sunday=1, Monday=2 ... Saturday=7.
"""
from enum import IntEnum
from datetime import datetime
from typing import Iterable, List, Set


class Weekday(IntEnum):
    """Day of week used by routine recurrence rules"""
    SUNDAY = 1
    MONDAY = 2
    TUESDAY = 3
    WEDNESDAY = 4
    THURSDAY = 5
    FRIDAY = 6
    SATURDAY = 7

    @property
    def short_name(self) -> str:
        """Button label, e.g. "Mon" """
        return self.name[:3].capitalize()

    @property
    def full_name(self) -> str:
        return self.name.capitalize()

    @property
    def chinese_name(self) -> str:
        return _CHINESE_NAMES[self]

    @classmethod
    def from_date(cls, value: datetime) -> "Weekday":
        """Map a date to its weekday"""
        # isoweekday: Monday=1 ... Sunday=7
        return cls(value.isoweekday() % 7 + 1)

    @classmethod
    def today(cls) -> "Weekday":
        return cls.from_date(datetime.now())

    @classmethod
    def monday_first(cls) -> List["Weekday"]:
        """Picker order, independent of locale"""
        return [
            cls.MONDAY, cls.TUESDAY, cls.WEDNESDAY, cls.THURSDAY,
            cls.FRIDAY, cls.SATURDAY, cls.SUNDAY,
        ]


_CHINESE_NAMES = {
    Weekday.SUNDAY: "周日",
    Weekday.MONDAY: "周一",
    Weekday.TUESDAY: "周二",
    Weekday.WEDNESDAY: "周三",
    Weekday.THURSDAY: "周四",
    Weekday.FRIDAY: "周五",
    Weekday.SATURDAY: "周六",
}

_VALID_ORDINALS = {day.value for day in Weekday}


def weekdays_to_list(days: Iterable[Weekday]) -> List[int]:
    """Sorted ordinals for storage"""
    return sorted(int(day) for day in set(days))


def weekdays_from_list(values: Iterable[int]) -> Set[Weekday]:
    """Build a weekday set from stored ordinals, dropping unknown values"""
    return {Weekday(value) for value in values if value in _VALID_ORDINALS}
