"""Pydantic model for the room reservation being built."""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class BedSize(str, Enum):
    SINGLE = "single"
    DOUBLE = "double"

    @property
    def label(self) -> str:
        """Label shown to the user in the bed size choice list."""
        return f"{self.value} bed"

    @classmethod
    def from_label(cls, label: str) -> "BedSize":
        for size in cls:
            if size.label == label.strip().lower():
                return size
        raise ValueError(f"Unknown bed size label: {label!r}")


class RoomReservation(BaseModel):
    """Slots filled one per turn by the reservation waterfall.

    Fields are populated strictly in declaration order. ``nights`` holds the
    entered stay length minus one: the first night is implied by the
    check-in date.
    """

    start_date: Optional[date] = None
    nights: Optional[int] = None
    occupants: Optional[int] = None
    bed_size: Optional[BedSize] = None
    confirmed: Optional[bool] = None
    order_reference: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return self.confirmed is not None
