"""Reservation book: creation, status overwrite and per-day listing."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Iterable
from uuid import uuid4

from tablepos.events import RESERVATION_CREATED, RESERVATION_UPDATED, EventBus, event_bus
from tablepos.models import Reservation, ReservationStatus

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset(
    {"name", "date", "time", "party_size", "phone", "email", "notes", "table_id", "status"}
)


def _calendar_day(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _time_key(value: str) -> tuple[int, int]:
    hours, _, minutes = value.partition(":")
    try:
        return (int(hours), int(minutes or 0))
    except ValueError:
        return (99, 99)


class ReservationBook:
    """Reservations keyed by id, kept in creation order."""

    def __init__(self, reservations: Iterable[Reservation] = (), bus: EventBus | None = None) -> None:
        self._reservations: tuple[Reservation, ...] = tuple(reservations)
        self._bus = bus if bus is not None else event_bus

    def __len__(self) -> int:
        return len(self._reservations)

    def all(self) -> tuple[Reservation, ...]:
        return self._reservations

    def get(self, reservation_id: str) -> Reservation | None:
        for reservation in self._reservations:
            if reservation.reservation_id == reservation_id:
                return reservation
        return None

    def create(
        self,
        name: str,
        on: date,
        time: str,
        party_size: int,
        phone: str,
        email: str | None = None,
        notes: str | None = None,
        table_id: int | None = None,
    ) -> Reservation:
        if party_size < 1:
            raise ValueError("party_size must be at least 1")
        reservation = Reservation(
            reservation_id=uuid4().hex[:8],
            name=name.strip(),
            date=_calendar_day(on),
            time=time,
            party_size=party_size,
            phone=phone.strip(),
            email=email or None,
            notes=notes or None,
            table_id=table_id,
        )
        self._reservations = self._reservations + (reservation,)
        logger.info("reservation=%s created for %s on %s %s", reservation.reservation_id, name, on, time)
        self._bus.emit(RESERVATION_CREATED, {"reservation_id": reservation.reservation_id, "reservation": reservation})
        return reservation

    def update(self, reservation_id: str, **changes: Any) -> Reservation | None:
        """Overwrite fields of a reservation. Unknown ids are ignored."""
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"cannot update {', '.join(sorted(unknown))}")
        current = self.get(reservation_id)
        if current is None:
            logger.debug("update for unknown reservation=%s", reservation_id)
            return None
        if "status" in changes:
            changes["status"] = ReservationStatus(changes["status"])
        if "date" in changes:
            changes["date"] = _calendar_day(changes["date"])

        updated = replace(current, **changes)
        self._reservations = tuple(
            updated if r.reservation_id == reservation_id else r for r in self._reservations
        )
        if updated.status is not current.status:
            logger.info(
                "reservation=%s %s -> %s", reservation_id, current.status.value, updated.status.value
            )
        self._bus.emit(RESERVATION_UPDATED, {"reservation_id": reservation_id, "changes": dict(changes)})
        return updated

    def set_status(self, reservation_id: str, status: ReservationStatus) -> Reservation | None:
        return self.update(reservation_id, status=status)

    def assign_table(self, reservation_id: str, table_id: int) -> Reservation | None:
        return self.update(reservation_id, table_id=table_id)

    def for_date(self, day: date | datetime) -> list[Reservation]:
        """Reservations on the same calendar day, ordered by time."""
        target = _calendar_day(day)
        matches = [r for r in self._reservations if r.date == target]
        return sorted(matches, key=lambda r: _time_key(r.time))

    def upcoming(self, day: date | datetime) -> list[Reservation]:
        return [r for r in self.for_date(day) if r.status is ReservationStatus.CONFIRMED]
