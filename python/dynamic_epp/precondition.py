from .cpus import possible
from .errors import Error, PreconditionFailed
from .sysfs import AmdPstateStatus, ScalingDriver
from .debug import debug_log, info_log

def verify(sysfs):
    """
    Make sure AMD P-State runs in active (EPP) mode and every possible CPU is driven by
    'amd-pstate-epp'. Raises PreconditionFailed on the first problem found.
    """

    try:
        status = sysfs.amd_pstate_status()
    except Error as e:
        raise PreconditionFailed(f"Cannot determine AMD P-State status: {e}",
                                 reason="amd-pstate-status-unreadable") from e

    if status != AmdPstateStatus.ACTIVE:
        raise PreconditionFailed(f"AMD P-State is '{status}', expected "
                                 f"'{AmdPstateStatus.ACTIVE}'", reason="amd-pstate-not-active")

    try:
        cpus = possible(sysfs)
    except Error as e:
        raise PreconditionFailed(f"Cannot enumerate CPUs: {e}",
                                 reason="cpu-enumeration-failed") from e

    for cpu in cpus:
        try:
            driver = sysfs.driver.read_active(cpu)
        except Error as e:
            raise PreconditionFailed(f"{cpu}: cannot read scaling driver: {e}",
                                     reason="wrong-driver", cpu=cpu) from e
        if driver != ScalingDriver.AMD_PSTATE_EPP:
            raise PreconditionFailed(f"{cpu} is not using the '{ScalingDriver.AMD_PSTATE_EPP}' "
                                     f"scaling driver (found '{driver}')",
                                     reason="wrong-driver", cpu=cpu)
        debug_log("precondition", f"{cpu}: scaling driver is '{driver}'")

    info_log("precondition", f"AMD P-State EPP active on {len(cpus)} CPUs")
