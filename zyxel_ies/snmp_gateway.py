"""
This module defines the base SNMP gateway used by the IES object model.

The Device, Slot and Port classes never talk to the network directly. Every
remote operation goes through one of the two scalar calls declared here, so a
concrete transport (see snmp_manager.SNMPManager) or a test double can be
plugged in without touching the model.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from zyxel_ies.enums import SnmpType

OK = "OK"
NOT_APPLICABLE = "NOT_APPLICABLE"


@dataclass(frozen=True)
class SnmpError:
    """
    A failed SNMP operation.

    Errors are ordinary return values, never raised. The string form carries
    the "[ERROR]" tag so that logs and CLI output stay greppable.
    """
    code: str
    message: str

    def __str__(self) -> str:
        return f"[ERROR] {self.message}"


def is_error(value: Any) -> bool:
    """Returns True if the value returned by a read or write is an SnmpError."""
    return isinstance(value, SnmpError)


class SnmpGateway(ABC):
    """
    Abstract Base Class for scalar SNMP access to a single IES.
    """

    def __init__(self, host: str):
        """
        Initializes the gateway for the given agent address.
        """
        self.host = host

    @abstractmethod
    def get(self, oid: str) -> str | SnmpError:
        """
        Reads a single OID and returns its value as a string.
        """
        raise NotImplementedError

    @abstractmethod
    def set(self, oid: str, snmp_type: SnmpType, value: Any) -> str | SnmpError:
        """
        Writes a single OID with the write community. Returns OK on success.
        """
        raise NotImplementedError
