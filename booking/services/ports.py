"""
Storage interfaces used by the scheduling service.

The service only talks to these two contracts; the SQLAlchemy
implementations live in ``booking.services.sql_store``.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from booking.models.appointment import AppointmentKind


@dataclass(frozen=True)
class AppointmentRecord:
    """Detached snapshot of a stored appointment."""

    id: int
    title: str
    kind: AppointmentKind
    location: Optional[str]
    link: Optional[str]
    host_id: int
    buyer_id: int
    start_time: datetime
    end_time: datetime


class PartyDirectory(ABC):
    """Existence lookups for vendors and buyers."""

    @abstractmethod
    def vendor_exists(self, vendor_id: int, lock: bool = False) -> bool:
        """
        Check whether a vendor is registered.

        Args:
            vendor_id: Vendor identifier
            lock: Hold a row lock on the vendor until the current
                transaction ends, so concurrent bookings for the same
                vendor run one after the other

        Returns:
            True when the vendor exists
        """

    @abstractmethod
    def buyer_exists(self, buyer_id: int, lock: bool = False) -> bool:
        """Buyer counterpart of :meth:`vendor_exists`."""


class AppointmentStore(ABC):
    """Persistence for appointments with range and equality filtering."""

    @abstractmethod
    def find_by_id(self, appointment_id: int) -> Optional[AppointmentRecord]:
        pass

    @abstractmethod
    def find_for_parties_between(
        self,
        host_id: int,
        buyer_id: int,
        start_time: datetime,
        end_time: datetime,
        exclude_id: Optional[int] = None,
    ) -> list[AppointmentRecord]:
        """
        Find candidate appointments of the host or the buyer around a window.

        Implementations may over-fetch (a coarser index range, a cached
        day); callers apply the exact overlap and party test themselves.

        Args:
            host_id: Vendor whose appointments are candidates
            buyer_id: Buyer whose appointments are candidates
            start_time: Window start
            end_time: Window end
            exclude_id: Appointment to leave out of the result

        Returns:
            At least every appointment of either party that intersects
            the half-open window, other than ``exclude_id``
        """

    @abstractmethod
    def find_starting_between(self, start_time: datetime, end_time: datetime) -> list[AppointmentRecord]:
        """Appointments whose start lies in the closed range, ordered by start."""

    @abstractmethod
    def create(self, fields: Mapping[str, Any]) -> AppointmentRecord:
        pass

    @abstractmethod
    def update(self, appointment_id: int, changes: Mapping[str, Any]) -> AppointmentRecord:
        pass

    @abstractmethod
    def delete(self, appointment_id: int) -> None:
        pass
