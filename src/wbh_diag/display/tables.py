"""Table display utilities for wbh-diag."""

from typing import List, Optional
from rich.table import Table
from rich.console import Console

from ..connection.adapter import PortInfo
from ..models.dtc import DTCRecord
from ..models.measurement import Measurement


class TableDisplay:
    """Create and display formatted tables."""

    def __init__(self, console: Optional[Console] = None):
        self._console = console or Console()

    def dtc_table(self, dtcs: List[DTCRecord], title: str = "Diagnostic Trouble Codes") -> Table:
        """Create a table of DTCs."""
        table = Table(title=title, show_header=True, header_style="bold cyan")

        table.add_column("#", style="dim", justify="right")
        table.add_column("Code", style="yellow bold")
        table.add_column("Decimal", justify="right")
        table.add_column("Status", style="cyan")

        for i, dtc in enumerate(dtcs):
            table.add_row(str(i), dtc.code, str(dtc.error_code), f"{dtc.status} ({dtc.status_code})")

        return table

    def measurement_table(self, values: List[Measurement], title: str = "Measurements") -> Table:
        """Create a table of decoded measurement values."""
        table = Table(title=title, show_header=True, header_style="bold cyan")

        table.add_column("#", style="dim", justify="right")
        table.add_column("Value", justify="right", style="green")
        table.add_column("Unit", style="dim")
        table.add_column("Raw", style="dim")

        for i, m in enumerate(values):
            value_str = m.formatted_value if m.is_known else "[red]unknown formula[/red]"
            raw_str = "{:02X} {:02X} {:02X}".format(*m.raw)
            table.add_row(str(i), value_str, m.unit.label, raw_str)

        return table

    def devices_table(self, device_ids: List[int], title: str = "Reachable Devices") -> Table:
        """Create a table of device ids found by a scan."""
        table = Table(title=title, show_header=True, header_style="bold cyan")

        table.add_column("Address", style="cyan bold")
        table.add_column("Decimal", justify="right")

        for device_id in device_ids:
            table.add_row(f"0x{device_id:02X}", str(device_id))

        return table

    def ports_table(self, ports: List[PortInfo], title: str = "Serial Ports") -> Table:
        """Create a table of candidate serial ports."""
        table = Table(title=title, show_header=True, header_style="bold cyan")

        table.add_column("Port", style="cyan bold")
        table.add_column("Type")
        table.add_column("Description", style="dim")
        table.add_column("Manufacturer", style="dim")

        for p in ports:
            table.add_row(p.port, p.port_type.value, p.description or "-", p.manufacturer or "-")

        return table

    def show(self, table: Table) -> None:
        """Display a table."""
        self._console.print(table)
