"""
zyxel-ies - Inspect and configure the slots and ports of a ZyXEL IES over SNMP
"""
import argparse
import json

from zyxel_ies.config_loader import ConfigLoader
from zyxel_ies.device import Device
from zyxel_ies.logging_config import setup_logging_from_config
from zyxel_ies.oid_library import WRITABLE_PORT_ATTRIBUTES
from zyxel_ies.snmp_gateway import NOT_APPLICABLE, is_error


def _load_device(args) -> Device:
    config = ConfigLoader(args.config)
    setup_logging_from_config(config)
    args.max_workers = getattr(args, 'workers', None) or config.get('inventory.max_workers', 1)
    return Device.from_config(config)


def run_cardtype(args):
    """Reads the card type of a slot and shows the resulting topology."""
    device = _load_device(args)
    slot = device.add_slot(args.slot_id)

    result = slot.fetch_details()
    if is_error(result):
        print(f"❌ Failed to read slot {args.slot_id}: {result}")
        return 2

    summary = slot.as_dict()
    summary['ports'] = [port['id'] for port in summary['ports']]
    print(json.dumps(summary, indent=2))
    return 0


def run_inventory(args):
    """Refreshes every port of the selected (or configured) slots."""
    device = _load_device(args)
    for slot_id in args.slot or []:
        device.add_slot(slot_id)
    if not device.slots:
        print("❌ No slots configured. Use --slot or device.slots in the config file.")
        return 3

    selected = set(args.slot) if args.slot else set(device.slots)
    exit_code = 0
    report = []
    for slot_id in sorted(selected):
        slot = device.get_slot(slot_id)
        result = slot.port_inventory(max_workers=args.max_workers)
        if is_error(result):
            print(f"❌ Inventory of slot {slot_id} stopped: {result}")
            exit_code = 2
        else:
            print(f"✅ Slot {slot_id}: {slot.cardtype} with {len(slot.ports)} ports")
        report.append(slot.as_dict())

    if args.output:
        with open(args.output, 'w') as f:
            json.dump(report, f, indent=2)
        print(f"Inventory written to {args.output}")
    else:
        print(json.dumps(report, indent=2))
    return exit_code


def run_port(args):
    """Shows all attributes of a single port."""
    device = _load_device(args)
    port = device.get_port(args.port_id)
    if port is None:
        print(f"❌ Port {args.port_id} does not exist on slot {args.port_id // 100}.")
        return 3

    result = port.fetch_details()
    print(json.dumps(port.as_dict(), indent=2))
    if is_error(result):
        print(f"❌ Refresh of port {args.port_id} stopped: {result}")
        return 2
    return 0


def run_set(args):
    """Writes one attribute of a port."""
    device = _load_device(args)
    port = device.get_port(args.port_id)
    if port is None:
        print(f"❌ Port {args.port_id} does not exist on slot {args.port_id // 100}.")
        return 3

    result = port.write_attribute(args.attribute, args.value)
    if result == NOT_APPLICABLE:
        print(f"❌ {args.attribute} does not apply to {port.line_type().value} port {args.port_id}.")
        return 3
    if is_error(result):
        print(f"❌ Failed to set {args.attribute} on port {args.port_id}: {result}")
        return 2
    print(f"✅ Port {args.port_id}: {args.attribute} set to {args.value}.")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(description="zyxel-ies - ZyXEL IES slot and port management over SNMP")
    parser.add_argument('--config', default='config/config.yaml', help='Path to the YAML configuration file.')

    subparsers = parser.add_subparsers(dest='mode', required=True, help='The operation to run.')

    parser_cardtype = subparsers.add_parser('cardtype', help='Read the card type and firmware of a slot.')
    parser_cardtype.add_argument('slot_id', type=int, help='The slot number.')
    parser_cardtype.set_defaults(func=run_cardtype)

    parser_inventory = subparsers.add_parser('inventory', help='Refresh every port of one or more slots.')
    parser_inventory.add_argument('--slot', type=int, action='append', help='Slot number to inventory. Repeatable.')
    parser_inventory.add_argument('--workers', type=int, default=None, help='Ports refreshed in parallel per slot.')
    parser_inventory.add_argument('--output', type=str, help='Optional file path to save the JSON inventory.')
    parser_inventory.set_defaults(func=run_inventory)

    parser_port = subparsers.add_parser('port', help='Show the attributes of a port.')
    parser_port.add_argument('port_id', type=int, help='The port id, e.g. 301 for slot 3 port 1.')
    parser_port.set_defaults(func=run_port)

    parser_set = subparsers.add_parser('set', help='Write a port attribute.')
    parser_set.add_argument('port_id', type=int, help='The port id, e.g. 301 for slot 3 port 1.')
    parser_set.add_argument('attribute', choices=sorted(WRITABLE_PORT_ATTRIBUTES), help='The attribute to write.')
    parser_set.add_argument('value', help='The new value.')
    parser_set.set_defaults(func=run_set)

    return parser


def main(argv=None):
    """
    Main entry point for zyxel-ies.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except (FileNotFoundError, ValueError) as e:
        print(f"❌ Invalid configuration: {e}")
        return 3


if __name__ == "__main__":
    raise SystemExit(main())
