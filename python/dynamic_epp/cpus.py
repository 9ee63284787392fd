"""
CPU enumeration from the kernel's compact CPU list notation, e.g. "0-3,6,8-11".
"""

import re

from .errors import ParseError

_NUMBER_RE = re.compile(r"[0-9]+")


class Cpu(int):
    """A logical CPU number. Compares equal to the plain integer."""

    def __new__(cls, index):
        if index < 0:
            raise ValueError(f"CPU number must be non-negative, got {index}")
        return super().__new__(cls, index)

    def __str__(self):
        return f"cpu{int(self)}"

    def __repr__(self):
        return f"Cpu({int(self)})"

    def path(self, root):
        return f"{root}/cpu{int(self)}"


def _parse_bound(group, text):
    if not _NUMBER_RE.fullmatch(text):
        raise ParseError(f"CPU list group '{group}' contains non-numeric bound '{text}'",
                         token=group, reason="non-numeric")
    return int(text)


def parse_possible(text):
    """
    Expand a CPU list into a list of Cpu objects.

    Groups are expanded left to right and every range low to high. Duplicates across groups are
    kept, mirroring what the kernel lists. Raises ParseError with 'reason' set to
    "malformed-range", "non-numeric" or "right-less-than-left".
    """

    cpus = []
    for group in text.strip().split(","):
        if not group:
            raise ParseError(f"Empty group in CPU list '{text.strip()}'",
                             token=group, reason="malformed-range")

        bounds = group.split("-")
        if len(bounds) > 2:
            raise ParseError(f"CPU list group '{group}' has more than one '-'",
                             token=group, reason="malformed-range")

        left = _parse_bound(group, bounds[0])
        right = _parse_bound(group, bounds[1]) if len(bounds) == 2 else left
        if right < left:
            raise ParseError(f"CPU range '{group}' ends before it starts",
                             token=group, reason="right-less-than-left")

        cpus.extend(Cpu(index) for index in range(left, right + 1))

    return cpus


def possible(sysfs):
    """Enumerate the CPUs listed in the platform's 'possible' file."""
    return parse_possible(sysfs.possible_cpus_text())
