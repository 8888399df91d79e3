"""
Event consolidation.

Collapses a user's overlapping events into merged events. Pure: nothing here
touches the database; the caller persists the merged events and deletes the
superseded ones using the returned MergeResult.
"""

import logging
from typing import Dict, List, Sequence

from beanie import PydanticObjectId
from pydantic import BaseModel, Field

from app.models.event import Event, EventStatus

logger = logging.getLogger(__name__)

TITLE_SEPARATOR = " + "
DESCRIPTION_SEPARATOR = " | "

# Higher wins when statuses are combined
STATUS_PRIORITY: Dict[EventStatus, int] = {
    EventStatus.IN_PROGRESS: 3,
    EventStatus.TODO: 2,
    EventStatus.COMPLETED: 1,
}


class MergeResult(BaseModel):
    """
    output: merged events and untouched events, in chronological order.
    superseded: original events absorbed into a merge (each at most once).
    """

    output: List[Event] = Field(default_factory=list)
    superseded: List[Event] = Field(default_factory=list)

    @property
    def merged(self) -> bool:
        return bool(self.superseded)


def events_overlap(a: Event, b: Event) -> bool:
    """Strict overlap: events that only share a boundary instant do not overlap."""
    return a.end_time > b.start_time and a.start_time < b.end_time


def merge_event_group(group: Sequence[Event]) -> Event:
    """
    Build the single event that replaces a group of overlapping events.
    The merged event gets a fresh id; members are left untouched.
    """
    if not group:
        raise ValueError("Cannot merge an empty group of events")

    start_time = min(e.start_time for e in group)
    end_time = max(e.end_time for e in group)
    if start_time >= end_time:
        raise ValueError(f"Merged event would end before it starts ({start_time} >= {end_time})")

    title = TITLE_SEPARATOR.join(e.title for e in group)
    descriptions = [e.description for e in group if e.description]

    status = EventStatus.COMPLETED
    for e in group:
        if STATUS_PRIORITY[e.status] > STATUS_PRIORITY[status]:
            status = e.status

    # Union by id, keeping first-seen order so output is reproducible
    invitee_ids: List[PydanticObjectId] = []
    seen = set()
    for e in group:
        for invitee_id in e.invitee_ids:
            if invitee_id not in seen:
                seen.add(invitee_id)
                invitee_ids.append(invitee_id)

    return Event(
        id=PydanticObjectId(),
        title=title,
        description=DESCRIPTION_SEPARATOR.join(descriptions) if descriptions else None,
        status=status,
        start_time=start_time,
        end_time=end_time,
        invitee_ids=invitee_ids,
    )


def consolidate(events: Sequence[Event]) -> MergeResult:
    """
    Merge every run of overlapping events into one event.

    Events are sorted by start time; equal start times keep their input order.
    Each event is compared with the last member of the current group only, so
    A-B and B-C overlaps chain A, B and C into one group even if A and C are apart.
    """
    if len(events) <= 1:
        return MergeResult(output=list(events))

    # Position in the key makes the tie-break explicit instead of relying on sort stability
    ordered = [e for _, e in sorted(enumerate(events), key=lambda pair: (pair[1].start_time, pair[0]))]

    result = MergeResult()

    def close(group: List[Event]) -> None:
        if len(group) == 1:
            result.output.append(group[0])
            return
        merged = merge_event_group(group)
        logger.debug("Merged %d events into %s (%s)", len(group), merged.id, merged.title)
        result.output.append(merged)
        result.superseded.extend(group)

    group: List[Event] = [ordered[0]]
    for event in ordered[1:]:
        if events_overlap(group[-1], event):
            group.append(event)
        else:
            close(group)
            group = [event]
    close(group)

    return result
