"""
This module contains the library of OIDs used to model a ZyXEL IES.

Port attributes are kept in per-attribute tables keyed by LineType, because the
same logical value (profile, SNR, INP, ...) lives in a different MIB subtree on
ADSL, VDSL and SHDSL cards. An attribute with no entry for a line type is not
applicable to that line type and is never requested from the device.

Templates without a placeholder get ".<id>" appended. A single "%d" is replaced
by the entity id. "%d%02d" encodes a port as slot number and 2-digit port
number, e.g. port 512 (slot 5, port 12) becomes "512".
"""

from zyxel_ies.enums import LineType, SnmpType


def _on_every_line_type(oid: str) -> dict[LineType, str]:
    return {line_type: oid for line_type in LineType}


# Standard SNMP OIDs for system information
SYSTEM_OIDS = {
    'sysUpTime': '1.3.6.1.2.1.1.3.0',
}

# Slot OIDs, ZyXEL slot table
SLOT_OIDS = {
    'cardtype': '1.3.6.1.4.1.890.1.5.13.5.6.3.1.3.0.%d',
    'firmware': '1.3.6.1.4.1.890.1.5.13.5.6.3.1.4.0.%d',
}

PORT_OIDS: dict[str, dict[LineType, str]] = {
    # IF-MIB ifAdminStatus / ifOperStatus / ifLastChange
    'admin_status': _on_every_line_type('1.3.6.1.2.1.2.2.1.7'),
    'oper_status': _on_every_line_type('1.3.6.1.2.1.2.2.1.8'),
    'if_last_change': _on_every_line_type('1.3.6.1.2.1.2.2.1.9'),
    # IF-MIB ifHCInOctets / ifHCOutOctets
    'if_in_octets': _on_every_line_type('1.3.6.1.2.1.31.1.1.1.6'),
    'if_out_octets': _on_every_line_type('1.3.6.1.2.1.31.1.1.1.10'),
    'max_mac': _on_every_line_type('1.3.6.1.4.1.890.1.5.13.5.1.3.1.1.2'),
    'user_info': _on_every_line_type('1.3.6.1.4.1.890.1.5.13.5.8.1.1.1'),
    # Only ADSL cards report a port uptime, the others derive it from ifLastChange
    'uptime': {
        LineType.ADSL: '1.3.6.1.4.1.890.1.5.13.5.8.2.4.1.2',
    },
    'profile': {
        LineType.ADSL: '1.3.6.1.2.1.10.94.1.1.1.1.4',
        LineType.VDSL: '1.3.6.1.2.1.10.97.1.1.1.1.3',
        LineType.SHDSL: '1.3.6.1.2.1.10.48.1.1.1.2',
    },
    'max_down': {
        LineType.ADSL: '1.3.6.1.2.1.10.94.1.1.2.1.8',
        LineType.VDSL: '1.3.6.1.2.1.10.97.1.1.2.1.9.%d.1',
        LineType.SHDSL: '1.3.6.1.2.1.10.48.1.2.1.3',
    },
    'max_up': {
        LineType.ADSL: '1.3.6.1.2.1.10.94.1.1.3.1.8',
        LineType.VDSL: '1.3.6.1.2.1.10.97.1.1.2.1.9.%d.2',
        LineType.SHDSL: '1.3.6.1.2.1.10.48.1.2.1.3',
    },
    'down_speed': {
        LineType.ADSL: '1.3.6.1.2.1.10.94.1.1.4.1.2',
        LineType.VDSL: '1.3.6.1.2.1.10.97.1.1.2.1.10.%d.1',
        LineType.SHDSL: '1.3.6.1.2.1.10.48.1.2.1.3',
    },
    'up_speed': {
        LineType.ADSL: '1.3.6.1.2.1.10.94.1.1.5.1.2',
        LineType.VDSL: '1.3.6.1.2.1.10.97.1.1.2.1.10.%d.2',
        LineType.SHDSL: '1.3.6.1.2.1.10.48.1.2.1.3',
    },
    # SHDSL: network side is "down", customer side is "up"
    'snr_down': {
        LineType.ADSL: '1.3.6.1.2.1.10.94.1.1.3.1.4',
        LineType.VDSL: '1.3.6.1.2.1.10.97.1.1.2.1.5.%d.1',
        LineType.SHDSL: '1.3.6.1.2.1.10.48.1.5.1.2.%d%02d.2.1.1',
    },
    'snr_up': {
        LineType.ADSL: '1.3.6.1.2.1.10.94.1.1.2.1.4',
        LineType.VDSL: '1.3.6.1.2.1.10.97.1.1.2.1.5.%d.2',
        LineType.SHDSL: '1.3.6.1.2.1.10.48.1.5.1.2.%d%02d.1.2.1',
    },
    'atn_down': {
        LineType.ADSL: '1.3.6.1.2.1.10.94.1.1.3.1.5',
        LineType.VDSL: '1.3.6.1.2.1.10.97.1.1.2.1.6.%d.1',
        LineType.SHDSL: '1.3.6.1.2.1.10.48.1.5.1.1.%d%02d.2.1.1',
    },
    'atn_up': {
        LineType.ADSL: '1.3.6.1.2.1.10.94.1.1.2.1.5',
        LineType.VDSL: '1.3.6.1.2.1.10.97.1.1.2.1.6.%d.2',
        LineType.SHDSL: '1.3.6.1.2.1.10.48.1.5.1.1.%d%02d.1.2.1',
    },
    'inp_down': {
        LineType.ADSL: '1.3.6.1.4.1.890.1.5.13.5.8.2.1.1.15',
        LineType.VDSL: '1.3.6.1.4.1.890.1.5.13.5.8.10.1.1.6',
    },
    'inp_up': {
        LineType.ADSL: '1.3.6.1.4.1.890.1.5.13.5.8.2.1.1.14',
        LineType.VDSL: '1.3.6.1.4.1.890.1.5.13.5.8.10.1.1.7',
    },
    'annex_m': {
        LineType.ADSL: '1.3.6.1.4.1.890.1.5.13.5.8.2.1.1.3',
    },
    'annex_l': {
        LineType.ADSL: '1.3.6.1.4.1.890.1.5.13.5.8.2.1.1.2',
    },
    'wire_pair_mode': {
        LineType.SHDSL: '1.3.6.1.4.1.890.1.5.13.5.8.3.3.1.1',
    },
    # none(1), vdsl_8a(2) .. vdsl_30a(9), adsl2plus(10)
    'vdsl_protocol': {
        LineType.VDSL: '1.3.6.1.4.1.890.1.5.13.5.13.8.2.1.33',
    },
}

# Shape a read value must have before it is committed:
#   status - "1" or "2"
#   digits - a non-negative integer
#   string - anything the agent returns
PORT_VALUE_SHAPES = {
    'admin_status': 'status',
    'oper_status': 'status',
    'if_last_change': 'digits',
    'if_in_octets': 'digits',
    'if_out_octets': 'digits',
    'max_mac': 'digits',
    'user_info': 'string',
    'uptime': 'string',
    'profile': 'string',
    'max_down': 'digits',
    'max_up': 'digits',
    'down_speed': 'digits',
    'up_speed': 'digits',
    'snr_down': 'digits',
    'snr_up': 'digits',
    'atn_down': 'digits',
    'atn_up': 'digits',
    'inp_down': 'digits',
    'inp_up': 'digits',
    'annex_m': 'digits',
    'annex_l': 'digits',
    'wire_pair_mode': 'digits',
    'vdsl_protocol': 'digits',
}

WRITABLE_PORT_ATTRIBUTES = {
    'admin_status': SnmpType.INTEGER,
    'profile': SnmpType.OCTET_STRING,
    'max_mac': SnmpType.INTEGER,
    'inp_down': SnmpType.INTEGER,
    'inp_up': SnmpType.INTEGER,
    'annex_m': SnmpType.INTEGER,
    'annex_l': SnmpType.INTEGER,
}

# Inclusive legal ranges for writes. A writable attribute without an entry for
# the current line type only has its type checked.
_ADSL_INP_RANGE = (1, 7)  # zero(1), zero_point_five(2), one(3), two(4), four(5), eight(6), sixteen(7)
_VDSL_INP_RANGE = (1, 160)  # tenths of a DMT symbol
PORT_WRITE_RANGES: dict[str, dict[LineType, tuple[int, int]]] = {
    'admin_status': {line_type: (1, 3) for line_type in LineType},  # up(1), down(2), testing(3)
    'inp_down': {LineType.ADSL: _ADSL_INP_RANGE, LineType.VDSL: _VDSL_INP_RANGE},
    'inp_up': {LineType.ADSL: _ADSL_INP_RANGE, LineType.VDSL: _VDSL_INP_RANGE},
    'annex_m': {LineType.ADSL: (1, 2)},
    'annex_l': {LineType.ADSL: (1, 3)},
}


def resolve_oid(attribute: str, line_type: LineType) -> str | None:
    """
    Returns the OID template of a port attribute for a line type, or None when
    the attribute does not exist on that line type.
    """
    return PORT_OIDS[attribute].get(line_type)


def compose_oid(template: str, entity_id: int) -> str:
    """
    Builds the instance OID for an entity from an OID template.
    """
    placeholders = template.count('%')
    if placeholders == 0:
        return f"{template}.{entity_id}"
    if placeholders == 1:
        return template % entity_id
    return template % divmod(entity_id, 100)
