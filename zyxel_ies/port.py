"""
This module provides the Port class, a model of one DSL line on an IES slot.

Every attribute of a port is backed by an OID that depends on the line type of
the slot the port sits on. Reads refresh the in-memory value from the device.
Writes are two-phase: stage_write() validates the value against the current
line type, commit() sends the SET and only then updates the local value.
"""
import logging
import re
import threading
import weakref
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from zyxel_ies.enums import LineType, SnmpType
from zyxel_ies.oid_library import (
    PORT_OIDS,
    PORT_VALUE_SHAPES,
    PORT_WRITE_RANGES,
    WRITABLE_PORT_ATTRIBUTES,
    compose_oid,
    resolve_oid,
)
from zyxel_ies.snmp_gateway import NOT_APPLICABLE, OK, SnmpError, is_error
from zyxel_ies.timeticks import UNKNOWN_UPTIME, ticks_to_time

if TYPE_CHECKING:
    from zyxel_ies.device import Device
    from zyxel_ies.slot import Slot

logger = logging.getLogger(__name__)

_SHAPE_PATTERNS = {
    'status': re.compile(r'^[12]$'),
    'digits': re.compile(r'^\d+$'),
}


@dataclass(frozen=True)
class StagedWrite:
    """A validated write waiting to be sent to the device."""
    attribute: str
    oid: str
    snmp_type: SnmpType
    value: Any


def _parse_value(shape: str, raw: str) -> Any:
    """Returns the committed form of a raw value, or None if it has the wrong shape."""
    if shape == 'string':
        return raw
    if _SHAPE_PATTERNS[shape].match(raw.strip()):
        return int(raw)
    return None


class Port:
    """
    Models a port on a ZyXEL IES slot. The id matches the ifIndex of the port,
    slot number followed by a 2-digit port number (slot 3, port 1 is 301).
    """

    def __init__(self, port_id: int, slot: 'Slot'):
        """
        Initializes the Port.

        Args:
            port_id: The ifIndex-style id of the port.
            slot: The owning Slot. Only a weak reference is kept.
        """
        self.id = int(port_id)
        self._slot_ref = weakref.ref(slot)
        self._lock = threading.RLock()

        self.admin_status: int | None = None
        self.oper_status: int = 0
        self.uptime: str | None = None
        self.profile: str = ''
        self.if_in_octets: int | None = None
        self.if_out_octets: int | None = None
        self.if_last_change: int | None = None
        self.max_mac: int = 2
        self.user_info: str | None = None
        self.max_down: int | None = None
        self.max_up: int | None = None
        self.down_speed: int | None = None
        self.up_speed: int | None = None
        self.snr_down: int | None = None
        self.snr_up: int | None = None
        self.atn_down: int | None = None
        self.atn_up: int | None = None
        self.inp_down: int | None = None
        self.inp_up: int | None = None
        self.annex_m: int = 0
        self.annex_l: int = 0
        self.wire_pair_mode: int | None = None
        self.vdsl_protocol: int | None = None

    def __repr__(self) -> str:
        return f"Port(id={self.id})"

    @property
    def slot(self) -> 'Slot':
        slot = self._slot_ref()
        if slot is None:
            raise RuntimeError(f"Port {self.id} has outlived its slot")
        return slot

    @property
    def device(self) -> 'Device':
        return self.slot.device

    @property
    def port_number(self) -> int:
        return self.id % 100

    def line_type(self) -> LineType | SnmpError:
        """
        Returns the line type of the port. If the slot has not read its card
        type yet, the card type is read from the IES first, and the error of
        that read is returned if it fails.
        """
        return self.slot.ensure_line_type()

    def oid_for(self, attribute: str) -> str | SnmpError | None:
        """
        Returns the instance OID of an attribute for the current line type,
        or None if the attribute does not apply to this port.
        """
        line_type = self.line_type()
        if is_error(line_type):
            return line_type
        template = resolve_oid(attribute, line_type)
        if template is None:
            return None
        return compose_oid(template, self.id)

    def read_oid(self, oid_template: str | None) -> str | SnmpError:
        """
        Reads an OID template for this port. The port id is appended, or
        substituted when the template has placeholders.
        """
        if not oid_template:
            return SnmpError("INVALID_OID", "invalid oid")
        return self.device.read_oid(compose_oid(oid_template, self.id))

    def write_oid(self, oid_template: str, snmp_type: SnmpType, value: Any) -> str | SnmpError:
        """
        Writes a value into an OID template for this port.
        """
        if not oid_template:
            return SnmpError("INVALID_OID", "invalid oid")
        return self.device.write_oid(compose_oid(oid_template, self.id), snmp_type, value)

    def _read_attribute(self, attribute: str) -> Any:
        with self._lock:
            line_type = self.line_type()
            if is_error(line_type):
                return line_type
            template = resolve_oid(attribute, line_type)
            if template is None:
                return None

            value = self.read_oid(template)
            if is_error(value):
                logger.warning(f"Port {self.id}: reading {attribute} failed: {value}")
                return value

            parsed = _parse_value(PORT_VALUE_SHAPES[attribute], value)
            if parsed is None:
                logger.warning(f"Port {self.id}: ignoring unexpected {attribute} value {value!r}")
                return value
            setattr(self, attribute, parsed)
            return parsed

    # --- Reads ---

    def read_oper_status(self):
        """ifOperStatus, up(1) or down(2)."""
        return self._read_attribute('oper_status')

    def read_admin_status(self):
        """ifAdminStatus, up(1) or down(2)."""
        return self._read_attribute('admin_status')

    def read_profile(self):
        """Name of the configuration profile on the port."""
        return self._read_attribute('profile')

    def read_if_in_octets(self):
        """
        Octets received on the port. Polling the counters of every port on a
        schedule puts a noticeable CPU load on the IES.
        """
        return self._read_attribute('if_in_octets')

    def read_if_out_octets(self):
        return self._read_attribute('if_out_octets')

    def read_if_last_change(self):
        """sysUpTime of the last operational state change, in timeticks."""
        return self._read_attribute('if_last_change')

    def read_max_mac(self):
        """Maximum number of MAC addresses the snoop feature allows on the port."""
        return self._read_attribute('max_mac')

    def read_user_info(self):
        return self._read_attribute('user_info')

    def read_max_down(self):
        return self._read_attribute('max_down')

    def read_max_up(self):
        return self._read_attribute('max_up')

    def read_down_speed(self):
        return self._read_attribute('down_speed')

    def read_up_speed(self):
        return self._read_attribute('up_speed')

    def read_snr_down(self):
        return self._read_attribute('snr_down')

    def read_snr_up(self):
        return self._read_attribute('snr_up')

    def read_atn_down(self):
        return self._read_attribute('atn_down')

    def read_atn_up(self):
        return self._read_attribute('atn_up')

    def read_inp_down(self):
        """Minimum downstream impulse noise protection."""
        return self._read_attribute('inp_down')

    def read_inp_up(self):
        """Minimum upstream impulse noise protection."""
        return self._read_attribute('inp_up')

    def read_annex_m(self):
        return self._read_attribute('annex_m')

    def read_annex_l(self):
        return self._read_attribute('annex_l')

    def read_wire_pair_mode(self):
        return self._read_attribute('wire_pair_mode')

    def read_vdsl_protocol(self):
        return self._read_attribute('vdsl_protocol')

    def read_uptime(self):
        """
        Reads the uptime of the port. ADSL cards report it directly. For other
        line types it is the IES uptime minus ifLastChange, and either value
        is read first if it is not known yet.
        """
        with self._lock:
            line_type = self.line_type()
            if is_error(line_type):
                return line_type
            if resolve_oid('uptime', line_type) is not None:
                return self._read_attribute('uptime')

            device = self.device
            if device.uptime is None:
                result = device.read_uptime()
                if is_error(result):
                    return result
            if device.uptime == UNKNOWN_UPTIME:
                return None

            if self.if_last_change is None:
                result = self.read_if_last_change()
                if is_error(result):
                    return result
                if self.if_last_change is None:
                    return None

            elapsed = device.uptime - self.if_last_change
            if elapsed < 0:
                # The cached sysUpTime predates the last state change
                logger.info(f"Port {self.id}: ifLastChange {self.if_last_change} is newer than sysUpTime {device.uptime}")
                self.uptime = None
                return None
            self.uptime = ticks_to_time(elapsed)
            return self.uptime

    READERS = (
        read_oper_status,
        read_admin_status,
        read_profile,
        read_if_in_octets,
        read_if_out_octets,
        read_if_last_change,
        read_uptime,
        read_max_mac,
        read_user_info,
        read_max_down,
        read_max_up,
        read_down_speed,
        read_up_speed,
        read_snr_down,
        read_snr_up,
        read_atn_down,
        read_atn_up,
        read_inp_down,
        read_inp_up,
        read_annex_m,
        read_annex_l,
        read_wire_pair_mode,
        read_vdsl_protocol,
    )

    def fetch_details(self) -> str | SnmpError:
        """
        Refreshes every attribute of the port. Stops at the first error and
        returns it; attributes read before the failure keep their new values.
        """
        with self._lock:
            for reader in self.READERS:
                result = reader(self)
                if is_error(result):
                    return result
            return OK

    # --- Writes ---

    def stage_write(self, attribute: str, value: Any) -> StagedWrite | SnmpError | str:
        """
        Validates a new value for a writable attribute against the current
        line type.

        Returns:
            A StagedWrite ready for commit(), NOT_APPLICABLE if the attribute
            does not exist on this line type, or an SnmpError if the value is
            invalid or out of range.
        """
        if attribute not in WRITABLE_PORT_ATTRIBUTES:
            raise ValueError(f"{attribute} is not a writable port attribute")
        snmp_type = WRITABLE_PORT_ATTRIBUTES[attribute]

        line_type = self.line_type()
        if is_error(line_type):
            return line_type
        template = resolve_oid(attribute, line_type)
        if template is None:
            logger.info(f"Port {self.id}: {attribute} does not apply to {line_type.value} ports")
            return NOT_APPLICABLE

        if snmp_type is SnmpType.INTEGER:
            try:
                if isinstance(value, bool):
                    raise ValueError(value)
                value = int(value)
            except (TypeError, ValueError):
                return SnmpError("INVALID_VALUE", f"{attribute} must be an integer, got {value!r}")
        else:
            value = str(value)

        bounds = PORT_WRITE_RANGES.get(attribute, {}).get(line_type)
        if bounds is not None:
            low, high = bounds
            if not low <= value <= high:
                return SnmpError(
                    "VALUE_OUT_OF_RANGE",
                    f"{attribute} {value} is outside [{low}, {high}] on {line_type.value} port {self.id}"
                )

        return StagedWrite(attribute, compose_oid(template, self.id), snmp_type, value)

    def commit(self, staged: StagedWrite) -> str | SnmpError:
        """
        Sends a staged write to the IES. The local value is only updated when
        the SET succeeded.
        """
        with self._lock:
            result = self.device.write_oid(staged.oid, staged.snmp_type, staged.value)
            if is_error(result):
                logger.error(f"Port {self.id}: writing {staged.attribute}={staged.value!r} failed: {result}")
                return result
            setattr(self, staged.attribute, staged.value)
            logger.info(f"Port {self.id}: {staged.attribute} set to {staged.value!r}")
            return OK

    def write_attribute(self, attribute: str, value: Any) -> str | SnmpError:
        """Stages and commits a write in one step."""
        with self._lock:
            staged = self.stage_write(attribute, value)
            if not isinstance(staged, StagedWrite):
                return staged
            return self.commit(staged)

    def set_admin_status(self, value):
        return self.write_attribute('admin_status', value)

    def set_profile(self, value):
        return self.write_attribute('profile', value)

    def set_max_mac(self, value):
        return self.write_attribute('max_mac', value)

    def set_inp_down(self, value):
        """ADSL takes 1..7 (zero .. sixteen symbols), VDSL takes 1..160 (tenths of a symbol)."""
        return self.write_attribute('inp_down', value)

    def set_inp_up(self, value):
        return self.write_attribute('inp_up', value)

    def set_annex_m(self, value):
        return self.write_attribute('annex_m', value)

    def set_annex_l(self, value):
        return self.write_attribute('annex_l', value)

    def as_dict(self) -> dict:
        """Returns a snapshot of the port attributes."""
        with self._lock:
            snapshot = {'id': self.id}
            for attribute in PORT_OIDS:
                snapshot[attribute] = getattr(self, attribute)
            return snapshot
