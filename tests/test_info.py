"""Test the status report."""

from dynamic_epp.info import UNAVAILABLE, format_info

def test_format_info(tree, sysfs):
    lines = format_info(sysfs, "balanced")

    assert lines[0] == "amd pstate status: active"
    assert lines[1] == "Power Profile: balanced"
    assert "cpu7" in lines
    assert "  scaling driver is epp: True" in lines
    assert "  epp avail: balance_performance, balance_power, default, performance, power" in lines
    assert not sysfs.writes

def test_format_info_unavailable(tree, sysfs):
    (tree.root / tree.cpufreq(0, "energy_performance_preference")).unlink()
    tree.write(tree.cpufreq(0, "scaling_driver"), "acpi-cpufreq\n")

    lines = format_info(sysfs, "unknown")
    cpu0 = lines[lines.index("cpu0"):lines.index("cpu1")]
    assert f"  epp active: {UNAVAILABLE}" in cpu0
    assert "  scaling driver is epp: False" in cpu0

def test_format_info_no_cpus(tree, sysfs):
    (tree.root / "possible").unlink()
    lines = format_info(sysfs, "unknown")
    assert lines[-1].startswith(f"cpus: {UNAVAILABLE}")
