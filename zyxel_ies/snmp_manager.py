"""
This module provides the SNMP gateway used to talk to an IES. It wraps the
net-snmp command-line tools snmpget and snmpset using the subprocess module.
"""

import subprocess
import re
from typing import Any

from zyxel_ies.enums import SnmpType
from zyxel_ies.log_manager import LogManager
from zyxel_ies.snmp_gateway import OK, SnmpError, SnmpGateway, is_error

_AUTH_MARKERS = (
    "authentication failure",
    "authorization error",
    "unknown user name",
    "wrong community",
)
_SET_MARKERS = (
    "error in packet",
    "notwritable",
    "badvalue",
    "wrongtype",
    "wrongvalue",
    "readonly",
)
_NO_SUCH_MARKERS = (
    "no such object",
    "no such instance",
    "nosuchname",
    "unknown object identifier",
)
_REACHABILITY_MARKERS = (
    "timeout",
    "no response",
    "no route to host",
    "network is unreachable",
    "connection refused",
    "unknown host",
)


def classify_snmp_error(output: str) -> str:
    """Classifies net-snmp error output into a stable error code."""
    lowered = output.lower()
    if any(marker in lowered for marker in _AUTH_MARKERS):
        return "SNMP_AUTH_FAILED"
    if any(marker in lowered for marker in _SET_MARKERS):
        return "SNMP_SET_FAILED"
    if any(marker in lowered for marker in _NO_SUCH_MARKERS):
        return "SNMP_NO_SUCH_OBJECT"
    if any(marker in lowered for marker in _REACHABILITY_MARKERS):
        return "SNMP_TARGET_UNREACHABLE"
    return "SNMP_UNKNOWN_ERROR"


def redact_command(command: list[str]) -> list[str]:
    """Hides community strings in a command line before it is logged."""
    redacted = command.copy()
    for index, token in enumerate(redacted[:-1]):
        if token == "-c":
            redacted[index + 1] = "******"
    return redacted


class SNMPManager(SnmpGateway):
    """A wrapper class for scalar SNMP GET and SET via command-line tools."""

    def __init__(self, log_manager: LogManager, host, read_community=None, write_community=None,
                 port=161, timeout=2, retries=3, version='2c', write_version='1'):
        """
        Initializes the SNMPManager.

        Args:
            log_manager: An instance of the LogManager.
            host (str): The IP address or hostname of the IES.
            read_community (str): The community used for GET requests.
            write_community (str): The community used for SET requests. Without it
                every SET fails before any command is run.
            port (int): The port number for the SNMP agent.
            timeout (int): The SNMP request timeout in seconds.
            retries (int): The number of retries for an SNMP request.
            version (str): The SNMP version used for reads ('1', '2c').
            write_version (str): The SNMP version used for writes. The IES
                expects version 1 for SET requests.
        """
        super().__init__(host)
        self.log_manager = log_manager
        self.port = port
        self.read_community = read_community
        self.write_community = write_community
        self.version = version
        self.write_version = write_version
        self.timeout = timeout
        self.retries = retries

    def _execute_command(self, command_args) -> subprocess.CompletedProcess | SnmpError:
        """A helper method to run subprocess commands."""
        self.log_manager.log("snmp_command", {"command": " ".join(redact_command(command_args))}, level="debug")
        try:
            return subprocess.run(
                command_args,
                capture_output=True,
                text=True,
                check=True,
                # net-snmp handles its own timeout and retries; this only guards a hung tool
                timeout=self.timeout * (self.retries + 1) + 1
            )
        except subprocess.CalledProcessError as e:
            output = "\n".join(part for part in (e.stdout, e.stderr) if part).strip()
            code = classify_snmp_error(output)
            self.log_manager.log("snmp_command_failed", {"host": self.host, "code": code, "error": output}, level="error")
            return SnmpError(code, output or f"{command_args[0]} exited with status {e.returncode}")
        except subprocess.TimeoutExpired:
            self.log_manager.log("snmp_command_timeout", {"command": " ".join(redact_command(command_args))}, level="error")
            return SnmpError("SNMP_TIMEOUT", f"No response from {self.host}")
        except FileNotFoundError:
            self.log_manager.log("snmp_command_not_found", {"command": command_args[0]}, level="error")
            return SnmpError("SNMP_COMMAND_MISSING", f"{command_args[0]} command not found")

    def get(self, oid):
        """
        Performs an SNMP GET operation.

        Args:
            oid (str): The OID to retrieve.

        Returns:
            The value of the OID as a string, or an SnmpError.
        """
        if not oid:
            return SnmpError("INVALID_OID", "invalid oid")
        if self.read_community is None:
            return SnmpError("NO_READ_COMMUNITY", "No read community")

        command = [
            'snmpget',
            '-Onet',  # numeric OIDs, enums and timeticks
            '-v' + self.version,
            '-c', self.read_community,
            '-t', str(self.timeout),
            '-r', str(self.retries),
            f"{self.host}:{self.port}",
            oid
        ]
        result = self._execute_command(command)
        if is_error(result):
            return result

        stdout = result.stdout or ""
        # Version 2c agents answer missing instances with exit status 0
        if re.search(r'=\s*No Such (Object|Instance)', stdout, re.IGNORECASE):
            self.log_manager.log("snmp_no_such_object", {"host": self.host, "oid": oid}, level="warning")
            return SnmpError("SNMP_NO_SUCH_OBJECT", f"No such object {oid} on {self.host}")

        # Example output: .1.3.6.1.2.1.2.2.1.7.301 = INTEGER: 1
        # Timeticks carry no type prefix with -Ot: .1.3.6.1.2.1.1.3.0 = 4711042
        match = re.search(r'=\s*(?:[A-Za-z][\w-]*:)?[ \t]*(.*)', stdout)
        if match:
            # Return just the value, stripping quotes if they exist
            return match.group(1).strip().strip('"')
        return SnmpError("SNMP_UNKNOWN_ERROR", f"Unparseable response for {oid}: {stdout.strip()}")

    def set(self, oid, snmp_type: SnmpType, value: Any):
        """
        Performs an SNMP SET operation.

        Args:
            oid (str): The OID to set.
            snmp_type (SnmpType): The type of the value.
            value: The value to set for the OID.

        Returns:
            OK if the SET operation was successful, an SnmpError otherwise.
        """
        if self.write_community is None:
            return SnmpError("NO_WRITE_COMMUNITY", "No set community")
        if not oid:
            return SnmpError("INVALID_OID", "invalid oid")

        command = [
            'snmpset',
            '-v' + self.write_version,
            '-c', self.write_community,
            '-t', str(self.timeout),
            '-r', str(self.retries),
            f"{self.host}:{self.port}",
            oid,
            snmp_type.value,
            str(value)
        ]
        result = self._execute_command(command)
        if is_error(result):
            return SnmpError(result.code, f"SNMP set error: {result.message}")
        self.log_manager.log("snmp_set", {"host": self.host, "oid": oid, "value": value})
        return OK
