# calchub/calculators/transfer_time.py
from typing import Dict, Any, NamedTuple
import logging
import math

from calchub.calculators.base import BaseCalculator, InvalidInput
from calchub.core.units import convert_to_base
from calchub.schemas.calculators import (
    CalculatorConfig, CalculatorCategory, CalculatorResult,
    InputField, InputType, ResultField, ResultFormat, Preset,
)

logger = logging.getLogger(__name__)


class Interface(NamedTuple):
    mbps: float
    label: str
    efficiency: float


# Rated speed and typical real-world efficiency
INTERFACES: Dict[str, Interface] = {
    "adsl": Interface(8, "ADSL", 0.85),
    "4g": Interface(50, "4G / LTE", 0.60),
    "cable": Interface(200, "Cable / DOCSIS 3.1", 0.75),
    "5g": Interface(1000, "5G Sub-6", 0.50),
    "5g_mmwave": Interface(4000, "5G mmWave", 0.35),
    "fiber": Interface(1000, "Fiber FTTH", 0.93),
    "fiber10g": Interface(10000, "Fiber 10G GPON", 0.90),
    "wifi5": Interface(867, "Wi-Fi 5 (ac)", 0.45),
    "wifi6": Interface(1200, "Wi-Fi 6 (ax)", 0.50),
    "wifi6e": Interface(2400, "Wi-Fi 6E (6 GHz)", 0.50),
    "wifi7": Interface(5800, "Wi-Fi 7 (be)", 0.45),
    "ethernet": Interface(1000, "Gigabit Ethernet", 0.94),
    "ethernet10g": Interface(10000, "10G Ethernet", 0.93),
    "usb2": Interface(480, "USB 2.0", 0.60),
    "usb3": Interface(5000, "USB 3.2 Gen 1", 0.60),
    "usb32": Interface(20000, "USB 3.2 Gen 2×2", 0.55),
    "usb4": Interface(40000, "USB4 v1", 0.50),
    "usb4v2": Interface(80000, "USB4 v2", 0.45),
    "thunderbolt4": Interface(40000, "Thunderbolt 4", 0.55),
    "thunderbolt5": Interface(80000, "Thunderbolt 5", 0.50),
    "sata3": Interface(6000, "SATA III", 0.88),
    "nvme3": Interface(32000, "NVMe Gen 3", 0.85),
    "nvme4": Interface(64000, "NVMe Gen 4", 0.80),
    "nvme5": Interface(128000, "NVMe Gen 5", 0.70),
}

CHART_INTERFACES = [
    "adsl", "4g", "cable", "5g", "fiber", "wifi6", "wifi7",
    "ethernet", "ethernet10g", "usb3", "usb4", "thunderbolt5", "nvme4",
]

DEFAULT_OVERHEAD = 10.0


def transfer_seconds(size_bytes: float, speed_bps: float, overhead_percent: float = DEFAULT_OVERHEAD) -> float:
    """
    Seconds needed to move ``size_bytes`` over a link rated at ``speed_bps``.

    Protocol overhead reduces the usable throughput by ``overhead_percent``.
    """
    effective_bps = speed_bps * (1 - overhead_percent / 100)
    return size_bytes * 8 / effective_bps


def fmt_num(value: float) -> str:
    if value == 0:
        return "0"
    if value < 0.001:
        return f"{value:.2e}"
    if value < 1000:
        return f"{value:.2f}".rstrip("0").rstrip(".")
    text = f"{value:,.2f}"
    return text.rstrip("0").rstrip(".")


def smart_bytes(size_bytes: float) -> str:
    for factor, unit in ((1e12, "TB"), (1e9, "GB"), (1e6, "MB"), (1e3, "KB")):
        if size_bytes >= factor:
            return f"{fmt_num(size_bytes / factor)} {unit}"
    return f"{fmt_num(size_bytes)} B"


def smart_bits(bits_per_second: float) -> str:
    for factor, unit in ((1e12, "Tbps"), (1e9, "Gbps"), (1e6, "Mbps"), (1e3, "Kbps")):
        if bits_per_second >= factor:
            return f"{fmt_num(bits_per_second / factor)} {unit}"
    return f"{fmt_num(bits_per_second)} bps"


def format_duration(total_seconds: float, t: Dict[str, Any]) -> str:
    """Long form duration, e.g. "37 minutes, 2 seconds". Seconds are dropped once days appear."""
    if total_seconds < 1:
        return BaseCalculator.text(t, "less_than_a_second", "Less than a second")

    days = int(total_seconds // 86400)
    hours = int(total_seconds % 86400 // 3600)
    minutes = int(total_seconds % 3600 // 60)
    seconds = int(total_seconds % 60)

    def part(amount: int, singular: str, plural: str) -> str:
        key = singular if amount == 1 else plural
        return f"{amount} {BaseCalculator.text(t, key, key)}"

    parts = []
    if days > 0:
        parts.append(part(days, "day", "days"))
    if hours > 0:
        parts.append(part(hours, "hour", "hours"))
    if minutes > 0:
        parts.append(part(minutes, "minute", "minutes"))
    if seconds > 0 and days == 0:
        parts.append(part(seconds, "second", "seconds"))
    return ", ".join(parts)


def format_time_compact(total_seconds: float) -> str:
    if total_seconds < 0.01:
        return "instant"
    if total_seconds < 1:
        return f"{round(total_seconds * 1000)} ms"
    if total_seconds < 60:
        return f"{math.ceil(total_seconds)} sec"
    if total_seconds < 3600:
        m, s = int(total_seconds // 60), int(total_seconds % 60)
        return f"{m} min {s} sec" if s > 0 else f"{m} min"
    if total_seconds < 86400:
        h, m = int(total_seconds // 3600), int(total_seconds % 3600 // 60)
        return f"{h} hr {m} min" if m > 0 else f"{h} hr"
    d, h = int(total_seconds // 86400), int(total_seconds % 86400 // 3600)
    return f"{d} d {h} hr" if h > 0 else f"{d} d"


class TransferTimeCalculator(BaseCalculator):
    config = CalculatorConfig(
        id="transfer-time",
        category=CalculatorCategory.TECHNOLOGY,
        icon="📡",
        inputs=[
            InputField(id="file_size", type=InputType.NUMBER, required=True, default=50, min=0,
                       unit_type="data_size", units=["kb", "mb", "gb", "tb"], default_unit="gb"),
            InputField(id="speed", type=InputType.NUMBER, required=True, default=200, min=0,
                       unit_type="data_rate", units=["kbps", "mbps", "gbps"], default_unit="mbps"),
            InputField(id="overhead_percent", type=InputType.PERCENTAGE, default=DEFAULT_OVERHEAD, min=0, max=90, step=1),
            InputField(id="interface", type=InputType.SELECT, options=list(INTERFACES)),
        ],
        results=[
            ResultField(id="transfer_time", type="primary", format=ResultFormat.DURATION),
            ResultField(id="total_seconds", format=ResultFormat.NUMBER),
            ResultField(id="raw_speed_mbps", format=ResultFormat.NUMBER),
            ResultField(id="raw_speed_mbytes", format=ResultFormat.NUMBER),
            ResultField(id="effective_speed_mbytes", format=ResultFormat.NUMBER),
            ResultField(id="file_size_formatted"),
            ResultField(id="data_transferred"),
            ResultField(id="overhead_loss"),
        ],
        presets=[
            Preset(id="movie_4k", icon="🎬", values={"file_size": 15, "speed": 100, "overhead_percent": 10}),
            Preset(id="game_download", icon="🎮", values={"file_size": 80, "speed": 300, "overhead_percent": 10}),
            Preset(id="cloud_backup", icon="☁️", values={"file_size": 500, "speed": 20, "overhead_percent": 15}),
            Preset(id="usb_transfer", icon="💾", values={"file_size": 256, "speed": 5000, "overhead_percent": 5,
                                                        "interface": "usb3"}),
        ],
        related=[],
    )

    def _calculate(self, values: Dict[str, Any], units: Dict[str, str], t: Dict[str, Any]) -> CalculatorResult:
        interface_id = self.option(values, "interface")
        interface = INTERFACES[interface_id] if interface_id else None
        size_unit = units.get("file_size") or "gb"
        speed_unit = units.get("speed") or "mbps"

        file_size = self.require(values, "file_size", positive=True)
        overhead = self.number(values, "overhead_percent", DEFAULT_OVERHEAD)
        speed = self.to_float(values.get("speed"))
        if speed is None and interface is not None:
            # Interface alone: use its rated speed and real-world efficiency
            speed = interface.mbps
            speed_unit = "mbps"
            overhead = (1 - interface.efficiency) * 100
        if speed is None or speed <= 0:
            raise InvalidInput("speed must be greater than zero")
        if not 0 <= overhead < 100:
            raise InvalidInput("overhead must be between 0 and 100")

        size_bytes = convert_to_base(file_size, size_unit, "data_size")
        size_bits = size_bytes * 8
        raw_bps = convert_to_base(speed, speed_unit, "data_rate")
        effective_bps = raw_bps * (1 - overhead / 100)
        total_seconds = transfer_seconds(size_bytes, raw_bps, overhead)

        raw_mbps = raw_bps / 1e6
        raw_mbytes = raw_bps / 8e6
        effective_mbytes = effective_bps / 8e6
        overhead_loss = raw_mbytes - effective_mbytes
        duration = format_duration(total_seconds, t)

        table_data = []
        for key, spec in INTERFACES.items():
            rated_bps = spec.mbps * 1e6
            real_bps = rated_bps * spec.efficiency
            table_data.append({
                "id": key,
                "interface": self.text(t, f"iface_{key}", spec.label),
                "rated_speed": smart_bits(rated_bps),
                "real_world_speed": f"{fmt_num(real_bps / 8e6)} MB/s",
                "transfer_time": format_time_compact(size_bits / real_bps),
            })

        chart_data = []
        for key in CHART_INTERFACES:
            spec = INTERFACES[key]
            seconds = size_bits / (spec.mbps * 1e6 * spec.efficiency)
            chart_data.append({
                "interface": spec.label.split(" (")[0].split(" /")[0],
                "log_seconds": round(math.log10(max(seconds, 0.001)), 2),
            })

        overhead_text = fmt_num(overhead)
        summary = self.template(
            t, "summary",
            "Transferring {file_size} at {speed} ({overhead}% overhead) takes approximately {time}. "
            "Effective throughput: {effective}.",
            file_size=f"{fmt_num(file_size)} {size_unit.upper()}",
            speed=f"{fmt_num(speed)} {self.text(t, speed_unit, speed_unit.capitalize())}",
            overhead=overhead_text,
            time=duration,
            effective=f"{fmt_num(effective_mbytes)} MB/s",
        )

        return CalculatorResult(
            values={
                "transfer_time": total_seconds,
                "total_seconds": total_seconds,
                "raw_speed_mbps": raw_mbps,
                "raw_speed_mbytes": raw_mbytes,
                "effective_speed_mbytes": effective_mbytes,
                "file_size_bytes": size_bytes,
                "data_transferred": size_bits,
                "overhead_loss": overhead_loss,
                "overhead_percent": overhead,
            },
            formatted={
                "transfer_time": duration,
                "total_seconds": f"{fmt_num(round(total_seconds, 2))} sec",
                "raw_speed_mbps": f"{fmt_num(raw_mbps)} Mbps",
                "raw_speed_mbytes": f"{fmt_num(raw_mbytes)} MB/s",
                "effective_speed_mbytes": f"{fmt_num(effective_mbytes)} MB/s",
                "file_size_formatted": smart_bytes(size_bytes),
                "data_transferred": f"{fmt_num(size_bits)} bits",
                "overhead_loss": f"−{fmt_num(overhead_loss)} MB/s ({overhead_text}%)",
            },
            summary=summary,
            metadata={"chart_data": chart_data, "table_data": table_data},
        )
