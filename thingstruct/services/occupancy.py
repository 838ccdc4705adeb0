"""
Recurrence Occupancy

Which weekdays are already claimed by routine templates. The result is
advisory: callers show it, nothing here blocks an assignment.
"""
from typing import Dict, Iterable, List, Optional, Set, Union

from ..models import RoutineTemplate, Weekday

Excluding = Optional[Union[RoutineTemplate, str]]


def _excluded_id(excluding: Excluding) -> Optional[str]:
    if excluding is None:
        return None
    if isinstance(excluding, RoutineTemplate):
        return excluding.id
    return excluding


def occupied_days(templates: Iterable[RoutineTemplate], excluding: Excluding = None) -> Set[Weekday]:
    """Union of every other template's repeat days.

    `excluding` is matched by id, so a freshly loaded copy of the template
    being edited is still recognised as itself.
    """
    excluded_id = _excluded_id(excluding)
    occupied: Set[Weekday] = set()
    for template in templates:
        if excluded_id is not None and template.id == excluded_id:
            continue
        occupied |= template.repeat_days
    return occupied


def conflicting_days(
    days: Iterable[Weekday],
    templates: Iterable[RoutineTemplate],
    excluding: Excluding = None,
) -> Set[Weekday]:
    """Candidate days that some other template already claims"""
    return set(days) & occupied_days(templates, excluding)


def occupancy_map(templates: Iterable[RoutineTemplate], excluding: Excluding = None) -> Dict[Weekday, List[str]]:
    """Weekday -> titles of the templates claiming it, in Monday-first order"""
    excluded_id = _excluded_id(excluding)
    claims: Dict[Weekday, List[str]] = {}
    templates = list(templates)
    for day in Weekday.monday_first():
        titles = [
            t.title for t in templates
            if day in t.repeat_days and t.id != excluded_id
        ]
        if titles:
            claims[day] = titles
    return claims
