"""
This module provides the Device class, the root of the IES object model.

A Device owns its slots and the SNMP gateway. Slots and ports only hold weak
references upwards and reach the IES through Device.read_oid() and
Device.write_oid().
"""
import re
import threading
from typing import Any

from zyxel_ies.config_loader import ConfigLoader
from zyxel_ies.enums import SnmpType
from zyxel_ies.log_manager import LogManager
from zyxel_ies.oid_library import SYSTEM_OIDS
from zyxel_ies.slot import Slot
from zyxel_ies.snmp_gateway import SnmpError, SnmpGateway, is_error
from zyxel_ies.snmp_manager import SNMPManager
from zyxel_ies.timeticks import UNKNOWN_UPTIME


class Device:
    """
    Models a ZyXEL IES reachable over SNMP.
    """

    def __init__(self, hostname: str, read_community: str | None = None, write_community: str | None = None,
                 gateway: SnmpGateway | None = None, log_manager: LogManager | None = None, **snmp_options):
        """
        Initializes the Device.

        Args:
            hostname: Address of the IES.
            read_community: Community used for reads.
            write_community: Community used for writes. Without it every write
                is refused before anything is sent.
            gateway: The SNMP gateway to use. Defaults to an SNMPManager built
                from the hostname, the communities and snmp_options.
            log_manager: An instance of the LogManager.
            **snmp_options: port, timeout, retries and version for SNMPManager.
        """
        self.hostname = hostname
        self.read_community = read_community
        self.write_community = write_community
        self.log_manager = log_manager or LogManager()
        self.gateway = gateway or SNMPManager(
            self.log_manager,
            hostname,
            read_community=read_community,
            write_community=write_community,
            **snmp_options
        )
        # Timeticks once read, UNKNOWN_UPTIME if the IES did not answer
        self.uptime: int | str | None = None
        self.slots: dict[int, Slot] = {}
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return f"Device(hostname={self.hostname!r})"

    @classmethod
    def from_config(cls, config: ConfigLoader, gateway: SnmpGateway | None = None,
                    log_manager: LogManager | None = None) -> 'Device':
        """
        Builds a Device and its declared slots from a loaded configuration.
        """
        snmp_options = {
            'port': config.get('snmp.port', 161),
            'timeout': config.get('snmp.timeout', 2),
            'retries': config.get('snmp.retries', 3),
            'version': str(config.get('snmp.version', '2c')),
        }
        device = cls(
            config.get('device.hostname'),
            read_community=config.get('device.read_community'),
            write_community=config.get('device.write_community'),
            gateway=gateway,
            log_manager=log_manager,
            **snmp_options
        )
        for slot_id in config.get('device.slots', []):
            device.add_slot(slot_id)
        return device

    def add_slot(self, slot_id: int) -> Slot:
        """Returns the slot with the given id, creating it if needed."""
        with self._lock:
            slot = self.slots.get(slot_id)
            if slot is None:
                slot = Slot(slot_id, self)
                self.slots[slot_id] = slot
            return slot

    def get_slot(self, slot_id: int) -> Slot | None:
        with self._lock:
            return self.slots.get(slot_id)

    def get_port(self, port_id: int):
        """
        Finds a port by its ifIndex-style id, reading the card type of its
        slot if the port does not exist yet.
        """
        slot = self.add_slot(port_id // 100)
        port = slot.get_port(port_id)
        if port is None and not slot.cardtype:
            slot.read_cardtype()
            port = slot.get_port(port_id)
        return port

    def read_oid(self, oid: str) -> str | SnmpError:
        return self.gateway.get(oid)

    def write_oid(self, oid: str, snmp_type: SnmpType, value: Any) -> str | SnmpError:
        """
        Writes a value using the write community. Refused up front when no
        write community is configured.
        """
        if self.write_community is None:
            self.log_manager.log("write_refused", {"host": self.hostname, "oid": oid}, level="warning")
            return SnmpError("NO_WRITE_COMMUNITY", "No set community")
        return self.gateway.set(oid, snmp_type, value)

    def read_uptime(self) -> int | SnmpError:
        """
        Reads sysUpTime. On failure the uptime is marked unknown, which stops
        ports from deriving their uptime from it.
        """
        result = self.read_oid(SYSTEM_OIDS['sysUpTime'])
        with self._lock:
            if is_error(result):
                self.uptime = UNKNOWN_UPTIME
                return result
            match = re.match(r'^\(?(\d+)\)?', result.strip())
            if not match:
                self.uptime = UNKNOWN_UPTIME
                return SnmpError("INVALID_VALUE", f"Unexpected sysUpTime value {result!r}")
            self.uptime = int(match.group(1))
            return self.uptime

    def inventory(self, max_workers: int = 1) -> dict[int, str | SnmpError]:
        """
        Runs a port inventory on every slot and returns the result per slot.
        """
        with self._lock:
            slots = list(self.slots.values())
        return {slot.id: slot.port_inventory(max_workers=max_workers) for slot in slots}
