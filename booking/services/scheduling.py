"""
Appointment scheduling rules.

A vendor and a buyer can each hold at most one appointment at any instant.
Every operation re-reads the store; nothing is cached between calls.
"""
import logging
from dataclasses import replace
from datetime import date, datetime, time
from typing import Any, Iterable, Mapping

from booking.core.errors import (
    BUYER_ALREADY_BOOKED,
    END_BEFORE_START,
    NO_APPOINTMENT_FOUND,
    NO_BUYER_FOUND,
    NO_VENDOR_FOUND,
    VENDOR_ALREADY_BOOKED,
    BusinessRuleError,
)
from booking.models.appointment import AppointmentKind
from booking.services.ports import AppointmentRecord, AppointmentStore, PartyDirectory

logger = logging.getLogger(__name__)

SCHEDULE_FIELDS = frozenset({'start_time', 'end_time', 'host_id', 'buyer_id'})


def intervals_overlap(start: datetime, end: datetime, other_start: datetime, other_end: datetime) -> bool:
    """True when the two ranges share an instant; touching endpoints do not count."""
    return start < other_end and other_start < end


def day_bounds(day: date) -> tuple[datetime, datetime]:
    if isinstance(day, datetime):
        day = day.date()
    return datetime.combine(day, time.min), datetime.combine(day, time.max)


def conflict_message(conflicts: Iterable[AppointmentRecord], buyer_id: int) -> str:
    if any(conflict.buyer_id == buyer_id for conflict in conflicts):
        return BUYER_ALREADY_BOOKED
    return VENDOR_ALREADY_BOOKED


class AppointmentSchedulingService:
    def __init__(self, parties: PartyDirectory, appointments: AppointmentStore):
        self.parties = parties
        self.appointments = appointments

    def create(self, request: Mapping[str, Any]) -> AppointmentRecord:
        start_time = request['start_time']
        end_time = request['end_time']
        ensure_interval_order(start_time, end_time)

        self._ensure_buyer_exists(request['buyer_id'], lock=True)
        self._ensure_vendor_exists(request['host_id'], lock=True)
        self._ensure_no_overlap(request['host_id'], request['buyer_id'], start_time, end_time)

        created = self.appointments.create(request)
        logger.info(
            'Created appointment %s for vendor %s and buyer %s (%s - %s)',
            created.id, created.host_id, created.buyer_id, created.start_time, created.end_time,
        )
        return created

    def find_all_by_day(self, day: date) -> list[AppointmentRecord]:
        start, end = day_bounds(day)
        return self.appointments.find_starting_between(start, end)

    def update(self, appointment_id: int, changes: Mapping[str, Any]) -> AppointmentRecord:
        current = self._get_or_fail(appointment_id)

        changes = {name: value for name, value in changes.items() if name != 'id'}
        if 'kind' in changes:
            # An appointment keeps only the address that matches its kind.
            stale_field = 'link' if changes['kind'] == AppointmentKind.PHYSICAL else 'location'
            changes.setdefault(stale_field, None)

        merged = replace(current, **changes)

        if 'start_time' in changes or 'end_time' in changes:
            ensure_interval_order(merged.start_time, merged.end_time)

        if SCHEDULE_FIELDS.intersection(changes):
            self._ensure_buyer_exists(merged.buyer_id, lock=True)
            self._ensure_vendor_exists(merged.host_id, lock=True)
            self._ensure_no_overlap(
                merged.host_id, merged.buyer_id, merged.start_time, merged.end_time, exclude_id=appointment_id,
            )

        updated = self.appointments.update(appointment_id, changes)
        logger.info('Updated appointment %s fields %s', appointment_id, sorted(changes))
        return updated

    def remove(self, appointment_id: int) -> AppointmentRecord:
        current = self._get_or_fail(appointment_id)
        self.appointments.delete(appointment_id)
        logger.info('Removed appointment %s', appointment_id)
        return current

    def _get_or_fail(self, appointment_id: int) -> AppointmentRecord:
        appointment = self.appointments.find_by_id(appointment_id)
        if appointment is None:
            raise_business_error(NO_APPOINTMENT_FOUND)
        return appointment

    def _ensure_buyer_exists(self, buyer_id: int, lock: bool = False) -> None:
        if not self.parties.buyer_exists(buyer_id, lock=lock):
            raise_business_error(NO_BUYER_FOUND)

    def _ensure_vendor_exists(self, vendor_id: int, lock: bool = False) -> None:
        if not self.parties.vendor_exists(vendor_id, lock=lock):
            raise_business_error(NO_VENDOR_FOUND)

    def _ensure_no_overlap(
        self,
        host_id: int,
        buyer_id: int,
        start_time: datetime,
        end_time: datetime,
        exclude_id: int | None = None,
    ) -> None:
        candidates = self.appointments.find_for_parties_between(
            host_id, buyer_id, start_time, end_time, exclude_id=exclude_id,
        )
        # candidates may be a superset; keep only true conflicts
        conflicts = [
            candidate
            for candidate in candidates
            if candidate.id != exclude_id
            and (candidate.host_id == host_id or candidate.buyer_id == buyer_id)
            and intervals_overlap(start_time, end_time, candidate.start_time, candidate.end_time)
        ]
        if conflicts:
            raise_business_error(conflict_message(conflicts, buyer_id))


def ensure_interval_order(start_time: datetime, end_time: datetime) -> None:
    if end_time <= start_time:
        raise_business_error(END_BEFORE_START)


def raise_business_error(message: str) -> None:
    logger.warning('Rejected: %s', message)
    raise BusinessRuleError(message)
