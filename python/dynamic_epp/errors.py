"""
Exception types raised by dynamic_epp.

Per-CPU problems (SysfsIOError, ParseError, UnsupportedValue) are recoverable and get recorded by
the reconciliation engine. PreconditionFailed and ProfileSourceError abort startup.
"""


class Error(Exception):
    """Base class for all dynamic_epp exceptions."""

    def __init__(self, msg, **kwargs):
        super().__init__(str(msg))
        self.msg = str(msg)
        for key, val in kwargs.items():
            setattr(self, key, val)

    def __str__(self):
        return self.msg


class SysfsIOError(Error):
    """A sysfs file is missing, unreadable or unwritable."""

    def __init__(self, msg, path=None, cpu=None):
        super().__init__(msg, path=path, cpu=cpu)


class SysfsPermissionError(SysfsIOError):
    """Access to a sysfs file was denied, usually because we are not root."""


class ParseError(Error):
    """A token is outside the closed vocabulary, or a CPU list is malformed."""

    def __init__(self, msg, token=None, reason=None):
        super().__init__(msg, token=token, reason=reason)


class PreconditionFailed(Error):
    """The platform is not running AMD P-State in EPP mode."""

    def __init__(self, msg, reason, cpu=None):
        super().__init__(msg, reason=reason, cpu=cpu)


class UnsupportedValue(Error):
    """The desired governor or EPP is missing from the CPU's available set."""

    def __init__(self, msg, cpu=None, value=None):
        super().__init__(msg, cpu=cpu, value=value)


class ProfileSourceError(Error):
    """The power profiles service could not be reached or queried."""


class ConfigError(Error):
    """The configuration file is malformed."""
