"""
The reconciliation engine: drives every CPU toward the governor/EPP pair of a power profile.

The engine is not thread-safe. It is owned by the single daemon worker, which feeds it one profile
at a time.
"""

from .cpus import possible
from .errors import Error, UnsupportedValue
from .power_profiles import desired_policy
from .debug import debug_log, info_log, warning_log


class CpuFault:
    """A failure to read or set one attribute of one CPU."""

    def __init__(self, cpu, attribute, error):
        self.cpu = cpu
        self.attribute = attribute
        self.error = error

    def __repr__(self):
        return f"CpuFault({self.cpu}, {self.attribute!r}, {self.error!r})"

    def __str__(self):
        where = str(self.cpu) if self.cpu is not None else "all CPUs"
        return f"{where}: {self.attribute}: {self.error}"


class ReconcileResult:
    """What one call to 'ReconciliationEngine.apply()' did."""

    def __init__(self, profile, skipped=False):
        self.profile = profile
        self.skipped = skipped
        self.writes = []
        self.faults = []

    @property
    def ok(self):
        return not self.faults

    def __repr__(self):
        return (f"ReconcileResult({self.profile}, skipped={self.skipped}, "
                f"writes={len(self.writes)}, faults={len(self.faults)})")


class ReconciliationEngine:
    def __init__(self, sysfs):
        self._sysfs = sysfs
        self._last_applied = None

    @property
    def last_applied(self):
        """The last profile that was applied to every CPU without a fault, or None."""
        return self._last_applied

    def _reconcile_attr(self, cpu, attr, desired, result):
        """Move one attribute of one CPU to 'desired'. Errors end up in 'result.faults'."""

        try:
            active = attr.read_active(cpu)
            if active == desired:
                debug_log("engine", f"{cpu}: {attr.name} already '{desired}'")
                return

            available = attr.read_available(cpu)
            if desired not in available:
                avail = ", ".join(sorted(value.token for value in available))
                raise UnsupportedValue(f"'{desired}' is not available (available: {avail})",
                                       cpu=cpu, value=desired)

            attr.write_active(cpu, desired)
        except Error as e:
            warning_log("engine", f"{cpu}: failed to set {attr.name} to '{desired}': {e}")
            result.faults.append(CpuFault(cpu, attr.name, e))
            return

        debug_log("engine", f"{cpu}: {attr.name} '{active}' -> '{desired}'")
        result.writes.append((cpu, attr.name, desired))

    def apply(self, profile):
        """
        Bring all CPUs in line with 'profile'.

        Does nothing if 'profile' is already the last applied one. A fault on one CPU does not stop
        the others, but it leaves 'last_applied' unset, so the next notification is applied again
        whatever profile it carries.
        """

        if profile == self._last_applied:
            debug_log("engine", f"Profile '{profile}' already applied, skipping")
            return ReconcileResult(profile, skipped=True)

        # Sysfs may be left half way between two profiles from here on.
        self._last_applied = None

        governor, epp = desired_policy(profile)
        info_log("engine", f"Applying profile '{profile}': governor '{governor}', EPP '{epp}'")

        result = ReconcileResult(profile)
        try:
            cpus = possible(self._sysfs)
        except Error as e:
            warning_log("engine", f"Cannot enumerate CPUs: {e}")
            result.faults.append(CpuFault(None, "possible CPUs", e))
            return result

        for cpu in cpus:
            self._reconcile_attr(cpu, self._sysfs.governor, governor, result)
            self._reconcile_attr(cpu, self._sysfs.epp, epp, result)

        if result.faults:
            warning_log("engine", f"Profile '{profile}' applied with {len(result.faults)} "
                                  f"fault(s), will retry on the next notification")
        else:
            self._last_applied = profile
            info_log("engine", f"Profile '{profile}' applied to {len(cpus)} CPUs "
                               f"({len(result.writes)} writes)")
        return result
