"""Upcoming birthdays, memorial days and wedding anniversaries."""

from datetime import date
import logging

from famgraph.config import settings
from famgraph.dates import next_occurrence
from famgraph.graph import GraphSnapshot
from famgraph.models import EventKind, EventProjection, Person

logger = logging.getLogger(__name__)

KIND_ORDER = {kind: index for index, kind in enumerate(EventKind)}


def _wedding_partner(snapshot: GraphSnapshot, person: Person) -> tuple[int | None, bool]:
    """
    Spouse the marriage date belongs to, and whether this person should report it.

    Both spouses usually carry the same date; only the lower id reports it.
    """
    spouses = snapshot.spouses(person.id)
    sharing = [spouse for spouse in spouses if spouse.marriage == person.marriage]

    if any(spouse.id < person.id for spouse in sharing):
        return None, False
    if sharing:
        return sharing[0].id, True
    if len(spouses) == 1:
        return spouses[0].id, True
    return None, True


def upcoming_events(
    snapshot: GraphSnapshot,
    window_days: int | None = None,
    today: date | None = None,
    include_age: bool = False,
) -> list[EventProjection]:
    """
    Project recurring events onto the next `window_days` days.

    Birthdays are projected for everyone with a full birth date, memorial days
    for everyone with a full death date, and wedding anniversaries once per
    couple. `years_count` is the number of years since the first occurrence;
    for birthdays of living people it is 0 unless `include_age` is set.

    Returns:
        Projections with 0 <= days_until <= window_days, nearest first, then
        by last name, first name and person id
    """
    if window_days is None:
        window_days = settings.event_window_days
    if today is None:
        today = date.today()
    if window_days < 0:
        return []

    events: list[EventProjection] = []

    for person in snapshot:
        # Birthdays
        if person.birth and person.birth.is_full:
            occurrence, days_until = next_occurrence(person.birth.month_day, today)
            if days_until <= window_days:
                years = occurrence.year - person.birth.year
                if person.is_alive and not include_age:
                    years = 0
                events.append(
                    EventProjection(person.id, EventKind.BIRTHDAY, occurrence, years, days_until)
                )

        # Memorial days (death anniversary)
        if person.death and person.death.is_full:
            occurrence, days_until = next_occurrence(person.death.month_day, today)
            if days_until <= window_days:
                events.append(
                    EventProjection(
                        person.id,
                        EventKind.MEMORIAL,
                        occurrence,
                        occurrence.year - person.death.year,
                        days_until,
                    )
                )

        # Wedding anniversaries
        if person.marriage and person.marriage.is_full:
            spouse_id, reports = _wedding_partner(snapshot, person)
            if not reports:
                continue
            occurrence, days_until = next_occurrence(person.marriage.month_day, today)
            if days_until <= window_days:
                events.append(
                    EventProjection(
                        person.id,
                        EventKind.WEDDING_ANNIVERSARY,
                        occurrence,
                        occurrence.year - person.marriage.year,
                        days_until,
                        spouse_id=spouse_id,
                    )
                )

    def sort_key(event: EventProjection):
        person = snapshot.persons[event.person_id]
        return (
            event.days_until,
            person.last_name,
            person.first_name,
            event.person_id,
            KIND_ORDER[event.kind],
        )

    events.sort(key=sort_key)
    logger.debug("%d events within %d days of %s", len(events), window_days, today)
    return events
