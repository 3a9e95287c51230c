from enum import Enum

class LineType(Enum):
    """The technology family of a slot and all of its ports."""
    ADSL = "ADSL"
    VDSL = "VDSL"
    SHDSL = "SHDSL"
    MSC = "MSC"
    UNKNOWN = "Unknown"

class SnmpType(Enum):
    """Value type codes understood by snmpset."""
    INTEGER = "i"
    UNSIGNED = "u"
    TIMETICKS = "t"
    OCTET_STRING = "s"
