from .core import (
    DongleInfo,
    find_dongles,
    find_single_dongle,
    is_matching_dongle,
)
from .errors import DongleNotFoundError, MultipleDonglesError

__all__ = [
    "DongleInfo",
    "find_dongles",
    "find_single_dongle",
    "is_matching_dongle",
    "DongleNotFoundError",
    "MultipleDonglesError",
]
