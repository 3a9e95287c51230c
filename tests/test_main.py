"""
Tests for the zyxel-ies command line, with snmpget/snmpset replaced by a
dictionary of OID values.
"""
import json
from unittest.mock import MagicMock

import pytest

import main
from zyxel_ies.enums import LineType
from zyxel_ies.oid_library import PORT_OIDS, SLOT_OIDS, compose_oid


def _card(slot_id, cardtype, ports, line_type):
    values = {compose_oid(SLOT_OIDS['cardtype'], slot_id): cardtype,
              compose_oid(SLOT_OIDS['firmware'], slot_id): "V3.53(ABL.1)"}
    for port_id in ports:
        for attribute, table in PORT_OIDS.items():
            if line_type in table:
                values[compose_oid(table[line_type], port_id)] = "1"
    return values


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "device:\n"
        "  hostname: 10.0.0.1\n"
        "  read_community: public\n"
        "  write_community: private\n"
        "  slots: [1]\n"
        "snmp:\n"
        "  timeout: 1\n"
        "  retries: 0\n"
    )
    return str(path)


@pytest.fixture
def snmp(mocker):
    """Answers snmpget from a dict of OID values and records snmpset calls."""
    mocker.patch('main.setup_logging_from_config')
    values = {}

    def _run(command, **kwargs):
        if command[0] == 'snmpset':
            return MagicMock(returncode=0, stdout="")
        oid = command[-1]
        if oid not in values:
            return MagicMock(returncode=0, stdout=f".{oid} = No Such Object available on this agent at this OID")
        return MagicMock(returncode=0, stdout=f".{oid} = STRING: \"{values[oid]}\"")

    run = mocker.patch('zyxel_ies.snmp_manager.subprocess.run', side_effect=_run)
    run.values = values
    return run


def test_cardtype(config_file, snmp, capsys):
    snmp.values.update(_card(3, "VLC0824A", [], LineType.VDSL))

    exit_code = main.main(['--config', config_file, 'cardtype', '3'])

    assert exit_code == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary['cardtype'] == "VLC0824A"
    assert summary['line_type'] == "VDSL"
    assert summary['ports'] == list(range(301, 325))


def test_cardtype_unreachable(config_file, snmp, capsys):
    assert main.main(['--config', config_file, 'cardtype', '3']) == 2
    assert "❌" in capsys.readouterr().out


def test_inventory_writes_report(config_file, snmp, tmp_path, capsys):
    snmp.values.update(_card(1, "ALC1202", [101, 102], LineType.ADSL))
    output = tmp_path / "inventory.json"

    exit_code = main.main(['--config', config_file, 'inventory', '--output', str(output)])

    assert exit_code == 0
    assert "✅ Slot 1: ALC1202 with 2 ports" in capsys.readouterr().out
    report = json.loads(output.read_text())
    assert [port['id'] for port in report[0]['ports']] == [101, 102]
    assert report[0]['ports'][1]['oper_status'] == 1


def test_inventory_in_parallel_reports_failure(config_file, snmp, capsys):
    snmp.values.update(_card(1, "ALC1202", [101], LineType.ADSL))

    exit_code = main.main(['--config', config_file, 'inventory', '--slot', '1', '--workers', '2'])

    assert exit_code == 2
    assert "Inventory of slot 1 stopped" in capsys.readouterr().out


def test_port_details(config_file, snmp, capsys):
    snmp.values.update(_card(1, "ALC1202", [101], LineType.ADSL))

    assert main.main(['--config', config_file, 'port', '101']) == 0
    assert json.loads(capsys.readouterr().out)['profile'] == "1"


def test_port_not_on_card(config_file, snmp):
    snmp.values.update(_card(1, "ALC1202", [], LineType.ADSL))

    assert main.main(['--config', config_file, 'port', '112']) == 3


def test_set_sends_snmpset(config_file, snmp, capsys):
    snmp.values.update(_card(1, "ALC1224G", [], LineType.ADSL))

    exit_code = main.main(['--config', config_file, 'set', '101', 'inp_down', '5'])

    assert exit_code == 0
    command = snmp.call_args[0][0]
    assert command[0] == 'snmpset'
    assert command[-3:] == [compose_oid(PORT_OIDS['inp_down'][LineType.ADSL], 101), 'i', '5']


def test_set_out_of_range(config_file, snmp, capsys):
    snmp.values.update(_card(1, "ALC1224G", [], LineType.ADSL))

    assert main.main(['--config', config_file, 'set', '101', 'inp_down', '8']) == 2
    assert "[ERROR]" in capsys.readouterr().out
    assert all(call[0][0][0] == 'snmpget' for call in snmp.call_args_list)


def test_set_not_applicable(config_file, snmp, capsys):
    snmp.values.update(_card(1, "VLC0824A", [], LineType.VDSL))

    assert main.main(['--config', config_file, 'set', '101', 'annex_m', '1']) == 3
    assert "does not apply to VDSL port 101" in capsys.readouterr().out


def test_missing_config(tmp_path, capsys):
    assert main.main(['--config', str(tmp_path / "missing.yaml"), 'cardtype', '1']) == 3
    assert "Invalid configuration" in capsys.readouterr().out


def test_cardtype_logs_to_file_and_keeps_stdout_clean(config_file, mocker, tmp_path, capsys, clean_logging):
    log_dir = tmp_path / "logs"
    with open(config_file, 'a') as f:
        f.write(f"logging:\n  level: WARNING\n  dir: '{log_dir}'\n")
    mocker.patch('zyxel_ies.snmp_manager.subprocess.run',
                 return_value=MagicMock(returncode=0, stdout='.1.3.6.1.4.1.890.1.5.13.5.6.3.1.3.0.2 = STRING: "ALC1202"'))

    assert main.main(['--config', config_file, 'cardtype', '2']) == 0

    assert json.loads(capsys.readouterr().out)['ports'] == [201, 202]
    log_text = (log_dir / "zyxel_ies.log").read_text()
    assert "Event: cardtype_discovered" in log_text
    assert "Event: snmp_command" in log_text
    assert "-c ******" in log_text
    assert "public" not in log_text


def test_unknown_log_level_is_a_config_error(config_file, mocker, tmp_path, capsys):
    with open(config_file, 'a') as f:
        f.write(f"logging:\n  level: chatty\n  dir: '{tmp_path / 'logs'}'\n")
    run = mocker.patch('zyxel_ies.snmp_manager.subprocess.run')

    assert main.main(['--config', config_file, 'cardtype', '2']) == 3
    assert "Unknown log level" in capsys.readouterr().out
    run.assert_not_called()
