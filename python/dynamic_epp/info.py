"""
One-shot status report of the AMD P-State setup and the active power profile.
"""

import asyncio

from .cpus import possible
from .dbus_interface import PowerProfilesSource
from .errors import Error
from .sysfs import ScalingDriver

UNAVAILABLE = "unavailable"

def _fmt(func, *args):
    try:
        value = func(*args)
    except Error:
        return UNAVAILABLE
    if isinstance(value, frozenset):
        return ", ".join(sorted(item.token for item in value))
    return str(value)

async def get_profile(cfg):
    """Return the active power profile token, or "unknown" if the bus cannot tell."""
    source = PowerProfilesSource(cfg.get_bus_name(), cfg.get_object_path(), cfg.get_queue_size())
    try:
        await source.connect(cfg.get_connect_timeout())
        return str(await source.current())
    except Error:
        return "unknown"
    finally:
        source.close()

def format_info(sysfs, profile):
    lines = [f"amd pstate status: {_fmt(sysfs.amd_pstate_status)}",
             f"Power Profile: {profile}"]
    try:
        cpus = possible(sysfs)
    except Error as e:
        lines.append(f"cpus: {UNAVAILABLE} ({e})")
        return lines

    for cpu in cpus:
        driver = _fmt(sysfs.driver.read_active, cpu)
        lines += [f"{cpu}",
                  f"  scaling driver: {driver}",
                  f"  scaling driver is epp: {driver == ScalingDriver.AMD_PSTATE_EPP.token}",
                  f"  epp active: {_fmt(sysfs.epp.read_active, cpu)}",
                  f"  epp avail: {_fmt(sysfs.epp.read_available, cpu)}",
                  f"  scaling governor active: {_fmt(sysfs.governor.read_active, cpu)}",
                  f"  scaling governor avail: {_fmt(sysfs.governor.read_available, cpu)}"]
    return lines

def print_info(cfg, sysfs):
    profile = asyncio.run(get_profile(cfg))
    print("\n".join(format_info(sysfs, profile)))
