"""
Typed access to the cpufreq sysfs attributes dynamic_epp cares about.

Every attribute value belongs to a closed vocabulary. The token table of each vocabulary is the enum
itself: the member value is the exact string the kernel reads and writes. Driver, governor and
status tokens use hyphens, EPP tokens use underscores, because that is what the kernel uses.
"""

from enum import Enum

from .errors import SysfsIOError, SysfsPermissionError, ParseError
from .debug import debug_log

DEFAULT_SYSFS_ROOT = "/sys/devices/system/cpu"


class TokenEnum(Enum):
    """Base for closed vocabularies whose member values are the exact tokens."""

    @classmethod
    def from_token(cls, token):
        for member in cls:
            if member.value == token:
                return member
        raise ParseError(f"'{token}' is not a known {cls.__name__} value", token=token,
                         reason="unknown-token")

    @property
    def token(self):
        return self.value

    def __str__(self):
        return self.value


class AmdPstateStatus(TokenEnum):
    ACTIVE = "active"
    GUIDED = "guided"
    PASSIVE = "passive"


class ScalingDriver(TokenEnum):
    ACPI_CPUFREQ = "acpi-cpufreq"
    AMD_PSTATE = "amd-pstate"
    AMD_PSTATE_EPP = "amd-pstate-epp"
    CPPC_CPUFREQ = "cppc-cpufreq"
    INTEL_CPUFREQ = "intel-cpufreq"
    INTEL_PSTATE = "intel-pstate"
    SPEEDSTEP_LIB = "speedstep-lib"


class ScalingGovernor(TokenEnum):
    CONSERVATIVE = "conservative"
    ONDEMAND = "ondemand"
    PERFORMANCE = "performance"
    POWERSAVE = "powersave"
    SCHEDUTIL = "schedutil"
    USERSPACE = "userspace"


class EnergyPerformancePreference(TokenEnum):
    DEFAULT = "default"
    PERFORMANCE = "performance"
    BALANCE_PERFORMANCE = "balance_performance"
    BALANCE_POWER = "balance_power"
    POWER = "power"


class SysfsAttribute:
    """
    One per-CPU cpufreq attribute: an active value file and, optionally, a file listing the
    available values.
    """

    def __init__(self, sysfs, name, vocabulary, active_file, available_file=None):
        self._sysfs = sysfs
        self.name = name
        self.vocabulary = vocabulary
        self.active_file = active_file
        self.available_file = available_file

    def _path(self, cpu, fname):
        return f"{cpu.path(self._sysfs.root)}/cpufreq/{fname}"

    def read_active(self, cpu):
        token = self._sysfs.read(self._path(cpu, self.active_file), cpu=cpu)
        return self.vocabulary.from_token(token)

    def read_available(self, cpu):
        if not self.available_file:
            raise SysfsIOError(f"{self.name} has no list of available values", cpu=cpu)

        raw = self._sysfs.read(self._path(cpu, self.available_file), cpu=cpu)
        return frozenset(self.vocabulary.from_token(token) for token in raw.split())

    def write_active(self, cpu, value):
        if not isinstance(value, self.vocabulary):
            raise TypeError(f"expected {self.vocabulary.__name__}, got {value!r}")
        self._sysfs.write(self._path(cpu, self.active_file), value.token, cpu=cpu)


class Sysfs:
    """The CPU part of sysfs, rooted at '/sys/devices/system/cpu' by default."""

    def __init__(self, root=DEFAULT_SYSFS_ROOT):
        self.root = str(root).rstrip("/")
        self.driver = SysfsAttribute(self, "scaling driver", ScalingDriver, "scaling_driver")
        self.governor = SysfsAttribute(self, "scaling governor", ScalingGovernor,
                                       "scaling_governor", "scaling_available_governors")
        self.epp = SysfsAttribute(self, "EPP", EnergyPerformancePreference,
                                  "energy_performance_preference",
                                  "energy_performance_available_preferences")

    def read(self, path, cpu=None):
        """Return the contents of 'path' with surrounding whitespace trimmed."""
        try:
            with open(path, "r") as f:
                return f.read().strip()
        except PermissionError as e:
            raise SysfsPermissionError(f"Permission denied reading {path}", path=path,
                                       cpu=cpu) from e
        except OSError as e:
            raise SysfsIOError(f"Failed to read {path}: {e.strerror or e}", path=path,
                               cpu=cpu) from e

    def write(self, path, token, cpu=None):
        """Write a single token to 'path'."""
        debug_log("sysfs", f"Writing '{token}' to {path}")
        try:
            with open(path, "w") as f:
                f.write(token)
        except PermissionError as e:
            raise SysfsPermissionError(f"Permission denied writing '{token}' to {path}",
                                       path=path, cpu=cpu) from e
        except OSError as e:
            raise SysfsIOError(f"Failed to write '{token}' to {path}: {e.strerror or e}",
                               path=path, cpu=cpu) from e

    def possible_cpus_text(self):
        return self.read(f"{self.root}/possible")

    def amd_pstate_status(self):
        return AmdPstateStatus.from_token(self.read(f"{self.root}/amd_pstate/status"))
