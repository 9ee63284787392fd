import asyncio
import signal
from inotify_simple import INotify, flags

from . import precondition
from .config import Config
from .dbus_interface import PowerProfilesSource
from .engine import ReconciliationEngine
from .errors import ConfigError, ParseError, PreconditionFailed, ProfileSourceError
from .power_profiles import parse_profile
from .sysfs import Sysfs
from .debug import debug_log, info_log, warning_log, error_log, set_debug


def apply_token(engine, token):
    """Parse one raw profile token and hand it to the engine. Unknown tokens are skipped."""
    try:
        profile = parse_profile(token)
    except ParseError as e:
        error_log("main", f"Ignoring profile notification: {e}")
        return None

    result = engine.apply(profile)
    for fault in result.faults:
        warning_log("main", f"Fault while applying '{profile}': {fault}")
    return result

async def run(cfg, source=None, sysfs=None):
    """
    Gate on the platform precondition, apply the current power profile and then every profile
    change until the subscription ends. Returns the process exit status.
    """

    if sysfs is None:
        sysfs = Sysfs(cfg.get_sysfs_root())

    try:
        precondition.verify(sysfs)
    except PreconditionFailed as e:
        error_log("main", f"Unsupported platform: {e}")
        return 1

    if source is None:
        source = PowerProfilesSource(cfg.get_bus_name(), cfg.get_object_path(),
                                     cfg.get_queue_size())
    try:
        await source.connect(cfg.get_connect_timeout())
    except ProfileSourceError as e:
        error_log("main", f"Cannot subscribe to power profile changes: {e}")
        return 1

    engine = ReconciliationEngine(sysfs)
    try:
        try:
            token = await source.current()
        except ProfileSourceError as e:
            error_log("main", f"Cannot read the active power profile: {e}")
            return 1

        info_log("main", f"Initial power profile: {token}")
        apply_token(engine, token)

        async for token in source.subscribe():
            debug_log("main", f"Power profile notification: {token}")
            apply_token(engine, token)
    finally:
        source.close()

    info_log("main", "Power profile subscription ended")
    return 0

# ───────────────────────────────────────── config watching ───
def _on_config_event(inotify, cfg, cli_debug):
    for event in inotify.read(timeout=0):
        if event.mask & flags.MODIFY:
            debug_log("main", "Config file modified – reloading")
            try:
                cfg.load()
                set_debug(cli_debug or cfg.get_debug())
            except ConfigError as e:
                error_log("main", f"Keeping previous config: {e}")

def _watch_config(loop, cfg, cli_debug):
    try:
        inotify = INotify()
        inotify.add_watch(cfg.path, flags.MODIFY)
    except OSError as e:
        debug_log("main", f"Not watching {cfg.path}: {e}")
        return None
    loop.add_reader(inotify.fileno(), _on_config_event, inotify, cfg, cli_debug)
    return inotify

# ───────────────────────────────────────── daemon ───
def _handle_term(signum, task):
    info_log("main", f"Received signal {signum}, shutting down...")
    task.cancel()

async def serve(cfg, cli_debug=False):
    """Run the daemon until the subscription ends or SIGTERM/SIGINT arrives."""

    info_log("main", "dynamic_epp: starting daemon loop")
    loop = asyncio.get_running_loop()
    task = asyncio.create_task(run(cfg))
    for signum in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(signum, _handle_term, signum, task)

    inotify = _watch_config(loop, cfg, cli_debug)
    try:
        status = await task
    except asyncio.CancelledError:
        if not task.cancelled():
            raise
        status = 0
    finally:
        for signum in (signal.SIGTERM, signal.SIGINT):
            loop.remove_signal_handler(signum)
        if inotify is not None:
            loop.remove_reader(inotify.fileno())
            inotify.close()

    info_log("main", "dynamic_epp shut down cleanly." if status == 0 else
                     f"dynamic_epp exiting with status {status}")
    return status

__all__ = [
    "apply_token",
    "run",
    "serve",
    "Config",
]
