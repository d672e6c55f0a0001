"""
Event index: event_id -> Event, built once before the crosstable is streamed.

Duplicate ids: last row wins. Lookups of unknown ids return an
EventDetails carrying only the id, so enrichment never blocks aggregation.
"""

from __future__ import annotations

from typing import Iterable, Mapping

from cfc_models import Event, EventDetails


def build_event_index(events: Iterable[Event]) -> dict[str, Event]:
    index: dict[str, Event] = {}
    for ev in events:
        index[ev.event_id] = ev
    return index


def lookup(index: Mapping[str, Event], event_id: str) -> EventDetails:
    ev = index.get(event_id)
    if ev is None:
        return EventDetails(event_id=event_id)
    return EventDetails.from_event(ev)
