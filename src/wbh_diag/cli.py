"""wbh-diag CLI application."""

import logging
from contextlib import contextmanager
from typing import Optional

import typer
from rich.console import Console

from .collectors.actuator import ActuatorDiagnosis
from .collectors.dtc import DTCCollector
from .collectors.measurement import MeasurementCollector
from .collectors.scanner import DeviceScanner
from .config import WBHSettings
from .connection.adapter import PortDetector
from .connection.device import DeviceConnection
from .connection.interface import InterfaceState, WBHInterface
from .display.console import console as display_console
from .display.tables import TableDisplay
from .exceptions import WBHError
from .models.device import BaudRate


app = typer.Typer(
    name="wbh-diag",
    help="WBH-Diag interface tool - read fault codes, measurements and scan ECUs",
    no_args_is_help=True,
)

# Global options set by the callback
_options = {"port": None, "baud": None}
_table_display = TableDisplay(Console())


def parse_id(value: str) -> int:
    """Parse a decimal or 0x-prefixed byte value."""
    try:
        number = int(value, 0)
    except ValueError:
        raise typer.BadParameter(f"'{value}' is not a number")
    if not 0 <= number <= 0xFF:
        raise typer.BadParameter(f"'{value}' is outside 0..255")
    return number


def _announce_state(state: InterfaceState) -> None:
    if state == InterfaceState.IDENTIFYING:
        display_console.info("Identifying interface...")


@contextmanager
def open_interface():
    """Bring up the interface, apply global options and always shut it down."""
    settings = WBHSettings.from_env(port=_options["port"])

    display_console.info(f"Connecting to {settings.port}")
    try:
        iface = WBHInterface.open(settings=settings, on_state_change=_announce_state)
    except WBHError as e:
        display_console.error(f"Interface bring-up failed: {e}")
        raise typer.Exit(1)

    try:
        if _options["baud"] is not None:
            display_console.info(f"Forcing baud rate {_options['baud'].name}")
            iface.force_baud_rate(_options["baud"])
        yield iface
    except WBHError as e:
        display_console.error(str(e))
        raise typer.Exit(1)
    finally:
        iface.shutdown()


@contextmanager
def open_device(iface: WBHInterface, device: str):
    """Connect to an ECU and always hang up afterwards."""
    device_id = parse_id(device)
    display_console.info(f"Connecting to device 0x{device_id:02X}")
    conn = DeviceConnection.connect(iface, device_id)
    display_console.success(f"Connected: {conn.info}")
    with conn:
        yield conn


# ============ Main Commands ============

@app.callback()
def main(
    port: Optional[str] = typer.Option(None, "--port", "-p", help="Serial device (default: $WBH_PORT or /dev/rfcomm1)"),
    baud: Optional[int] = typer.Option(None, "--baud", "-b", help="Force ECU baud rate (0=auto, 1200, 2400, 4800, 9600, 10400)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log wire traffic"),
):
    """Global options."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    _options["port"] = port
    if baud is None:
        _options["baud"] = None
    else:
        try:
            _options["baud"] = BaudRate.from_speed(baud)
        except ValueError as e:
            raise typer.BadParameter(str(e), param_hint="--baud")


@app.command()
def ports():
    """List serial ports a WBH-Diag interface may be attached to."""
    display_console.header("Serial Ports")

    candidates = PortDetector.detect_all()
    if not candidates:
        display_console.warning("No candidate serial ports found")
        return

    _table_display.show(_table_display.ports_table(candidates))
    display_console.info(f"Found {len(candidates)} port(s)")


@app.command()
def info():
    """Identify the interface and show its timing parameters."""
    with open_interface() as iface:
        status = iface.get_status_info()
        status["block delay time"] = f"{iface.get_block_delay_time()} ms"
        status["inter-byte time"] = f"{iface.get_inter_byte_time()} ms"
        display_console.status_panel("Interface", status)


@app.command()
def analog(pin: int = typer.Argument(..., help="Analog pin 0..5")):
    """Read an analog input of the interface."""
    with open_interface() as iface:
        value = iface.get_analog(pin)
        display_console.print(f"Analog pin {pin}: {value}")


@app.command()
def timing(
    bdt: Optional[int] = typer.Option(None, "--bdt", help="Set block delay time (ms)"),
    ibt: Optional[int] = typer.Option(None, "--ibt", help="Set inter-byte time (ms)"),
):
    """Show or change block delay and inter-byte times."""
    with open_interface() as iface:
        if bdt is not None:
            iface.set_block_delay_time(bdt)
        if ibt is not None:
            iface.set_inter_byte_time(ibt)

        display_console.print(f"Block delay time: {iface.get_block_delay_time()} ms")
        display_console.print(f"Inter-byte time: {iface.get_inter_byte_time()} ms")


@app.command()
def dtc(device: str = typer.Argument(..., help="Device address (e.g. 0x01)")):
    """Read diagnostic trouble codes."""
    with open_interface() as iface, open_device(iface, device) as conn:
        display_console.header("Diagnostic Trouble Codes")
        records = DTCCollector(conn).collect()

        if records:
            _table_display.show(_table_display.dtc_table(records))
        else:
            display_console.success("No diagnostic trouble codes found!")


@app.command()
def measure(
    device: str = typer.Argument(..., help="Device address (e.g. 0x01)"),
    group: str = typer.Argument(..., help="Measurement group"),
):
    """Read a measurement group."""
    with open_interface() as iface, open_device(iface, device) as conn:
        group_no = parse_id(group)
        values = MeasurementCollector(conn).collect(group_no)
        _table_display.show(_table_display.measurement_table(values, f"Group {group_no}"))


@app.command()
def actuator(device: str = typer.Argument(..., help="Device address (e.g. 0x35)")):
    """Run actuator diagnosis, one component after another."""
    with open_interface() as iface, open_device(iface, device) as conn:
        diagnosis = ActuatorDiagnosis(conn)
        count = 0
        while True:
            code = diagnosis.step()
            if code == 0:
                break
            count += 1
            display_console.print(f"Actuator diagnosis component code {code:04X}")
        display_console.success(f"Actuator diagnosis finished ({count} component(s))")


@app.command()
def raw(
    device: str = typer.Argument(..., help="Device address"),
    command: str = typer.Argument(..., help="Raw command, e.g. 00"),
    timeout: int = typer.Option(30, "--timeout", "-t", help="Response timeout in seconds"),
):
    """Send a raw command to a device and print the response."""
    with open_interface() as iface, open_device(iface, device) as conn:
        display_console.print(f"result: {conn.send_command(command, timeout=timeout)}")


@app.command()
def scan(
    start: str = typer.Option("0x01", "--start", "-s", help="First device address"),
    end: str = typer.Option("0x7f", "--end", "-e", help="Address to stop before"),
):
    """Scan for reachable devices."""
    start_id, end_id = parse_id(start), parse_id(end)

    with open_interface() as iface:
        display_console.header("Device Scan", f"0x{start_id:02X} to 0x{end_id:02X}")
        scanner = DeviceScanner(iface)
        scanner.on_found(lambda device_id: display_console.success(f"Device {device_id:02X} reachable"))
        found = scanner.scan(start_id, end_id)

        if found:
            _table_display.show(_table_display.devices_table(found))
        else:
            display_console.warning("No devices found")


@app.command()
def reset():
    """Reset the interface."""
    with open_interface() as iface:
        iface.reset()
        display_console.success("Interface reset")


@app.command()
def version():
    """Show version information."""
    from . import __version__
    display_console.print(f"wbh-diag v{__version__}")


if __name__ == "__main__":
    app()
