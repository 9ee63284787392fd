"""Common helpers for the tests: a fake CPU sysfs tree and an in-memory profile source."""

from pathlib import Path

from dynamic_epp.errors import ProfileSourceError
from dynamic_epp.sysfs import Sysfs

ALL_GOVERNORS = "conservative ondemand userspace powersave performance schedutil"
ALL_EPPS = "default performance balance_performance balance_power power"


class RecordingSysfs(Sysfs):
    """A 'Sysfs' that remembers every write it performs."""

    def __init__(self, root):
        super().__init__(root)
        self.writes = []

    def write(self, path, token, cpu=None):
        self.writes.append((path, token))
        super().write(path, token, cpu=cpu)


class FakeSysfsTree:
    """Builds and tweaks a fake CPU sysfs tree under a temporary directory."""

    def __init__(self, root):
        self.root = Path(root)

    def write(self, relpath, text):
        path = self.root / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)

    def read(self, relpath):
        return (self.root / relpath).read_text().strip()

    def cpufreq(self, cpu, fname):
        return f"cpu{cpu}/cpufreq/{fname}"

    def set_cpu(self, cpu, driver="amd-pstate-epp", governor="powersave",
                governors=ALL_GOVERNORS, epp="balance_performance", epps=ALL_EPPS):
        self.write(self.cpufreq(cpu, "scaling_driver"), f"{driver}\n")
        self.write(self.cpufreq(cpu, "scaling_governor"), f"{governor}\n")
        self.write(self.cpufreq(cpu, "scaling_available_governors"), f"{governors}\n")
        if epp is not None:
            self.write(self.cpufreq(cpu, "energy_performance_preference"), f"{epp}\n")
        if epps is not None:
            self.write(self.cpufreq(cpu, "energy_performance_available_preferences"), f"{epps}\n")

    def build(self, ncpus=8, status="active", **kwargs):
        self.write("possible", f"0-{ncpus - 1}\n")
        if status is not None:
            self.write("amd_pstate/status", f"{status}\n")
        for cpu in range(ncpus):
            self.set_cpu(cpu, **kwargs)
        return self


class FakeProfileSource:
    """In-memory stand-in for 'PowerProfilesSource'."""

    def __init__(self, initial="balanced", events=(), connect_error=None, current_error=None):
        self.initial = initial
        self.events = list(events)
        self.connect_error = connect_error
        self.current_error = current_error
        self.connected = False
        self.closed = False

    async def connect(self, timeout):
        if self.connect_error:
            raise ProfileSourceError(self.connect_error)
        self.connected = True

    async def current(self):
        if self.current_error:
            raise ProfileSourceError(self.current_error)
        return self.initial

    async def subscribe(self):
        for token in self.events:
            yield token

    def close(self):
        self.closed = True
