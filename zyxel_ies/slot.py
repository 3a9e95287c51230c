"""
This module provides the Slot class, a model of one line card in an IES.

The card type string reported by the IES decides both the line type of every
port on the card and how many ports the card has. Reading the card type
reconciles the list of Port objects with the hardware.
"""
import logging
import re
import threading
import weakref
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import TYPE_CHECKING

from zyxel_ies.enums import LineType
from zyxel_ies.oid_library import SLOT_OIDS, compose_oid, resolve_oid
from zyxel_ies.port import Port
from zyxel_ies.snmp_gateway import OK, SnmpError, is_error

if TYPE_CHECKING:
    from zyxel_ies.device import Device

logger = logging.getLogger(__name__)

# ALC1248G-51 -> ADSL, 48 ports. The last two digits after the family are the port count.
_CARDTYPE_PATTERNS = (
    (re.compile(r'^VLC\d\d(\d\d)'), LineType.VDSL),
    (re.compile(r'^SLC\d\d(\d\d)'), LineType.SHDSL),
    (re.compile(r'^ALC\d\d(\d\d)'), LineType.ADSL),
)


def parse_cardtype(cardtype: str) -> tuple[LineType, int]:
    """
    Derives the line type and port count from a card type string.
    """
    if cardtype.startswith('MSC'):
        return LineType.MSC, 0
    for pattern, line_type in _CARDTYPE_PATTERNS:
        match = pattern.match(cardtype)
        if match:
            return line_type, int(match.group(1))
    return LineType.UNKNOWN, 0


class Slot:
    """
    Models a slot on a ZyXEL IES. Owns the ports of the card in the slot.
    """

    def __init__(self, slot_id: int, device: 'Device'):
        """
        Initializes the Slot.

        Args:
            slot_id: The hardware slot number.
            device: The owning Device. Only a weak reference is kept.
        """
        self.id = int(slot_id)
        self._device_ref = weakref.ref(device)
        self._lock = threading.RLock()
        self.cardtype: str | None = None
        self.firmware: str | None = None
        self.line_type = LineType.UNKNOWN
        self.ports: list[Port] = []

    def __repr__(self) -> str:
        return f"Slot(id={self.id}, cardtype={self.cardtype!r})"

    @property
    def device(self) -> 'Device':
        device = self._device_ref()
        if device is None:
            raise RuntimeError(f"Slot {self.id} has outlived its device")
        return device

    def get_port(self, port_id: int) -> Port | None:
        with self._lock:
            for port in self.ports:
                if port.id == port_id:
                    return port
        return None

    def read_oid(self, oid_template: str) -> str | SnmpError:
        """
        Reads an OID template for this slot.
        """
        return self.device.read_oid(compose_oid(oid_template, self.id))

    def read_firmware(self) -> str | SnmpError:
        """Reads the firmware version of the card."""
        firmware = self.read_oid(SLOT_OIDS['firmware'])
        if not is_error(firmware):
            self.firmware = firmware
        return firmware

    def read_cardtype(self) -> str | SnmpError:
        """
        Reads the card type, derives the line type and port count from it and
        aligns the ports. Running it again with an unchanged card leaves the
        slot as it is.
        """
        with self._lock:
            cardtype = self.read_oid(SLOT_OIDS['cardtype'])
            if is_error(cardtype):
                self.device.log_manager.log("read_cardtype_failed", {"slot": self.id, "error": str(cardtype)}, level="error")
                return cardtype

            line_type, port_count = parse_cardtype(cardtype)
            self.cardtype = cardtype
            self.line_type = line_type
            self.align_ports(port_count)
            self.device.log_manager.log(
                "cardtype_discovered",
                {"slot": self.id, "cardtype": cardtype, "line_type": line_type.value, "ports": port_count}
            )
            return cardtype

    def ensure_line_type(self) -> LineType | SnmpError:
        """
        Returns the line type, reading the card type first if it is not known.
        If that read fails its error is returned instead.
        """
        with self._lock:
            if not self.cardtype:
                cardtype = self.read_cardtype()
                if is_error(cardtype):
                    return cardtype
            return self.line_type

    def align_ports(self, port_count: int):
        """
        Creates any missing ports so that ids <slot>01 .. <slot><port_count>
        exist, then cuts the list down to port_count entries. The cut is by
        position, which relies on ports being created in ascending order.
        """
        port_count = int(port_count)
        with self._lock:
            existing = {port.id for port in self.ports}
            for number in range(1, port_count + 1):
                port_id = self.id * 100 + number
                if port_id not in existing:
                    self.ports.append(Port(port_id, self))
                    existing.add(port_id)

            if len(self.ports) > port_count:
                removed = [port.id for port in self.ports[port_count:]]
                del self.ports[port_count:]
                logger.info(f"Slot {self.id}: removed ports {removed}")

    READERS = (
        read_cardtype,
        read_firmware,
    )

    def fetch_details(self) -> str | SnmpError:
        """
        Reads every slot attribute. Stops at the first error and returns it.
        """
        for reader in self.READERS:
            result = reader(self)
            if is_error(result):
                return result
        return OK

    def port_inventory(self, max_workers: int = 1) -> str | SnmpError:
        """
        Reads the card type (which creates the ports) and fetches the details
        of every port.

        Args:
            max_workers: Number of ports refreshed in parallel. With 1 the ports
                are refreshed in order and the walk stops at the first failing
                port. With more, every port is refreshed and the error of the
                lowest failing port id is returned.
        """
        cardtype = self.read_cardtype()
        if is_error(cardtype):
            return cardtype

        with self._lock:
            ports = list(self.ports)
            line_type = self.line_type

        # Ports without their own uptime OID derive it from sysUpTime, read fresh once per inventory
        if ports and resolve_oid('uptime', line_type) is None:
            uptime = self.device.read_uptime()
            if is_error(uptime):
                return uptime

        if max_workers <= 1 or len(ports) <= 1:
            for port in ports:
                result = port.fetch_details()
                if is_error(result):
                    return result
            return OK

        results = {}
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {executor.submit(port.fetch_details): port for port in ports}
            for future in as_completed(futures):
                results[futures[future].id] = future.result()

        failed = sorted(port_id for port_id, result in results.items() if is_error(result))
        if failed:
            logger.warning(f"Slot {self.id}: {len(failed)} of {len(ports)} ports failed to refresh")
            return results[failed[0]]
        return OK

    def as_dict(self) -> dict:
        """Returns a snapshot of the slot and its ports."""
        # Port locks are never taken while holding the slot lock
        with self._lock:
            snapshot = {
                'id': self.id,
                'cardtype': self.cardtype,
                'firmware': self.firmware,
                'line_type': self.line_type.value,
            }
            ports = list(self.ports)
        snapshot['ports'] = [port.as_dict() for port in ports]
        return snapshot
