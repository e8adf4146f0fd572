"""Host CPU / memory snapshot for the console status bar."""

from __future__ import annotations

import logging
from typing import Any

import psutil

logger = logging.getLogger("lcars.monitor")

CPU_WARN_PERCENT = 85.0
MEM_WARN_PERCENT = 85.0


def _level(percent: float, warn: float) -> str:
    if percent >= 95.0:
        return "critical"
    if percent >= warn:
        return "warning"
    return "nominal"


def snapshot() -> dict[str, Any]:
    """Non-blocking CPU/RAM reading with a coarse LCARS power state."""
    vm = psutil.virtual_memory()
    cpu_pct = psutil.cpu_percent(interval=None)

    cpu_level = _level(cpu_pct, CPU_WARN_PERCENT)
    mem_level = _level(vm.percent, MEM_WARN_PERCENT)
    power = "OPTIMAL"
    if "critical" in (cpu_level, mem_level):
        power = "CRITICAL"
    elif "warning" in (cpu_level, mem_level):
        power = "STRAINED"

    if power != "OPTIMAL":
        logger.warning("System load %s: cpu=%.1f%% mem=%.1f%%", power, cpu_pct, vm.percent)

    return {
        "cpu_percent": cpu_pct,
        "cpu_level": cpu_level,
        "ram_total_gb": round(vm.total / (1024**3), 2),
        "ram_used_gb": round(vm.used / (1024**3), 2),
        "ram_percent": vm.percent,
        "ram_level": mem_level,
        "power": power,
    }
