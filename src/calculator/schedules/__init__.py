"""Federal schedules: A, B, C, D, E and SE."""

from .schedule_a import ScheduleAResult, compute_salt_cap, compute_schedule_a
from .schedule_b import ScheduleBLineItem, ScheduleBResult, compute_schedule_b
from .schedule_c import ScheduleCBusinessResult, ScheduleCResult, compute_business, compute_schedule_c
from .schedule_d import ScheduleDResult, compute_schedule_d, needs_schedule_d
from .schedule_e import (
    RentalPropertyResult,
    ScheduleEResult,
    compute_rental_property,
    compute_schedule_e,
    compute_special_allowance,
    needs_schedule_e,
)
from .schedule_se import ScheduleSEResult, compute_schedule_se

__all__ = [
    "ScheduleAResult",
    "compute_salt_cap",
    "compute_schedule_a",
    "ScheduleBLineItem",
    "ScheduleBResult",
    "compute_schedule_b",
    "ScheduleCBusinessResult",
    "ScheduleCResult",
    "compute_business",
    "compute_schedule_c",
    "ScheduleDResult",
    "compute_schedule_d",
    "needs_schedule_d",
    "RentalPropertyResult",
    "ScheduleEResult",
    "compute_rental_property",
    "compute_schedule_e",
    "compute_special_allowance",
    "needs_schedule_e",
    "ScheduleSEResult",
    "compute_schedule_se",
]
