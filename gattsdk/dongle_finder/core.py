from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from serial.tools import list_ports

from .errors import DongleNotFoundError, MultipleDonglesError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DongleInfo:
    """
    One serial port that may be a BGAPI dongle, as reported by pyserial.

    Attributes:
        port: Port name to open with pyserial (e.g. 'COM3', '/dev/ttyACM0').
        vid: USB Vendor ID (integer) or None for non-USB ports.
        pid: USB Product ID (integer) or None for non-USB ports.
        manufacturer: USB manufacturer string, if available.
        product: USB product string, if available.
        serial_number: USB serial string, if available.
        hwid: Raw hardware ID string from pyserial (for debugging).
    """
    port: str
    vid: Optional[int]
    pid: Optional[int]
    manufacturer: Optional[str]
    product: Optional[str]
    serial_number: Optional[str]
    hwid: str

    @property
    def usb_id(self) -> Optional[str]:
        """``VID:PID`` in hex, or None when either is unknown."""
        if self.vid is None or self.pid is None:
            return None
        return f"{self.vid:04x}:{self.pid:04x}"


def _port_to_info(port) -> DongleInfo:
    """Convert pyserial's ListPortInfo to DongleInfo."""
    return DongleInfo(
        port=port.device,
        vid=port.vid,
        pid=port.pid,
        manufacturer=port.manufacturer,
        product=port.product,
        serial_number=port.serial_number,
        hwid=port.hwid,
    )


def is_matching_dongle(
    info: DongleInfo,
    *,
    expected_vid: Optional[int] = None,
    expected_pid: Optional[int] = None,
    product_substring: Optional[str] = None,
) -> bool:
    """
    Decide whether a port belongs to a dongle we can talk to.

    All checks are AND-combined; a criterion left as None is ignored.

    Args:
        expected_vid: Match this VID (e.g. 0x2458 for Bluegiga), or None.
        expected_pid: Match this PID, or None.
        product_substring: Case-insensitive substring expected in product string.

    Returns:
        True if the port matches all specified criteria.
    """
    if expected_vid is not None and info.vid != expected_vid:
        return False

    if expected_pid is not None and info.pid != expected_pid:
        return False

    if product_substring is not None:
        if not info.product:
            return False
        if product_substring.lower() not in info.product.lower():
            return False

    return True


def find_dongles(
    *,
    matcher: Optional[Callable[[DongleInfo], bool]] = None,
    expected_vid: Optional[int] = None,
    expected_pid: Optional[int] = None,
    product_substring: Optional[str] = None,
) -> List[DongleInfo]:
    """
    List every serial port that looks like a dongle.

    Pass either a custom ``matcher(info) -> bool`` or the built-in criteria.
    """
    results: List[DongleInfo] = []

    for port in list_ports.comports():
        info = _port_to_info(port)
        if matcher is not None:
            matched = matcher(info)
        else:
            matched = is_matching_dongle(
                info,
                expected_vid=expected_vid,
                expected_pid=expected_pid,
                product_substring=product_substring,
            )
        if matched:
            results.append(info)

    logger.debug("Found %d matching port(s)", len(results))
    return results


def find_single_dongle(
    *,
    matcher: Optional[Callable[[DongleInfo], bool]] = None,
    expected_vid: Optional[int] = None,
    expected_pid: Optional[int] = None,
    product_substring: Optional[str] = None,
) -> DongleInfo:
    """
    Find exactly one dongle.

    Behaviour:
        - 0 matches  -> DongleNotFoundError
        - 1 match    -> return it
        - >1 matches -> log error and raise MultipleDonglesError

    Pass an explicit port to the transport instead when several dongles
    are plugged in.
    """
    matches = find_dongles(
        matcher=matcher,
        expected_vid=expected_vid,
        expected_pid=expected_pid,
        product_substring=product_substring,
    )

    if not matches:
        raise DongleNotFoundError("No matching dongle found")

    if len(matches) > 1:
        logger.error(
            "Multiple matching dongles found; refusing to choose automatically. "
            "Ports: %s",
            [info.port for info in matches],
        )
        raise MultipleDonglesError(
            f"Multiple matching dongles found ({len(matches)} devices)",
            devices=matches,
        )

    return matches[0]
