# dynamic_epp/dbus_interface.py
# -*- coding: utf-8 -*-
"""
dbus_interface.py

Client for the power-profiles service on the system bus, using dbus-next.
Reads the active profile and turns ActiveProfile changes into a stream of raw profile tokens that
the daemon worker consumes in order.
"""

import asyncio

from dbus_next.aio import MessageBus
from dbus_next.constants import BusType
from dbus_next.errors import DBusError

from .config import DEFAULT_BUS_NAME, DEFAULT_OBJECT_PATH, DEFAULT_QUEUE_SIZE
from .errors import ProfileSourceError
from .debug import debug_log, info_log, warning_log

LEGACY_BUS_NAME = "net.hadess.PowerProfiles"
LEGACY_OBJECT_PATH = "/net/hadess/PowerProfiles"
PROPERTIES_IFACE = "org.freedesktop.DBus.Properties"

# Pushed into the queue when the bus goes away.
_END = object()


class PowerProfilesSource:
    def __init__(self, bus_name=DEFAULT_BUS_NAME, object_path=DEFAULT_OBJECT_PATH,
                 queue_size=DEFAULT_QUEUE_SIZE):
        self.bus_name = bus_name
        self.object_path = object_path
        self.queue_size = queue_size
        self._bus = None
        self._iface = None
        self._queue = None
        self._disconnect_task = None

    def _candidates(self):
        yield self.bus_name, self.object_path
        if self.bus_name == DEFAULT_BUS_NAME:
            yield LEGACY_BUS_NAME, LEGACY_OBJECT_PATH

    async def _connect(self):
        self._bus = await MessageBus(bus_type=BusType.SYSTEM).connect()

        last_error = None
        for bus_name, object_path in self._candidates():
            try:
                introspection = await self._bus.introspect(bus_name, object_path)
            except DBusError as e:
                debug_log("dbus", f"{bus_name} not available: {e}")
                last_error = e
                continue

            obj = self._bus.get_proxy_object(bus_name, object_path, introspection)
            self._iface = obj.get_interface(bus_name)
            props = obj.get_interface(PROPERTIES_IFACE)
            props.on_properties_changed(self._on_properties_changed)
            self.bus_name = bus_name
            self.object_path = object_path
            info_log("dbus", f"Subscribed to {bus_name} at {object_path}")
            return

        raise ProfileSourceError(f"No power profiles service on the system bus: {last_error}")

    async def connect(self, timeout):
        """Connect to the system bus and subscribe to profile changes within 'timeout' seconds."""

        self._queue = asyncio.Queue(maxsize=self.queue_size)
        try:
            await asyncio.wait_for(self._connect(), timeout)
        except asyncio.TimeoutError as e:
            self.close()
            raise ProfileSourceError(f"Timed out after {timeout}s connecting to "
                                     f"{self.bus_name}") from e
        except (DBusError, OSError) as e:
            self.close()
            raise ProfileSourceError(f"Failed to connect to the system bus: {e}") from e
        except ProfileSourceError:
            self.close()
            raise

        self._disconnect_task = asyncio.create_task(self._watch_disconnect())

    async def _watch_disconnect(self):
        try:
            await self._bus.wait_for_disconnect()
        except Exception as e:
            warning_log("dbus", f"System bus connection lost: {e}")
        else:
            info_log("dbus", "System bus connection closed")
        self._enqueue(_END)

    def _enqueue(self, item):
        # On overflow only the end state is kept: the oldest pending profile is dropped, so the
        # daemon still converges on the newest one but skips the transitions in between.
        if self._queue.full():
            dropped = self._queue.get_nowait()
            warning_log("dbus", f"Profile queue full, dropping stale notification {dropped!r}")
        self._queue.put_nowait(item)

    def _on_properties_changed(self, interface_name, changed_properties, invalidated_properties):
        if interface_name != self.bus_name:
            return
        if "ActiveProfile" in changed_properties:
            token = changed_properties["ActiveProfile"].value
            debug_log("dbus", f"ActiveProfile changed: {token!r}")
            self._enqueue(token)
        elif "ActiveProfile" in invalidated_properties:
            debug_log("dbus", "ActiveProfile invalidated without a value, ignoring")

    async def current(self):
        """Return the raw token of the currently active profile."""
        try:
            return await self._iface.get_active_profile()
        except DBusError as e:
            raise ProfileSourceError(f"Failed to read ActiveProfile: {e}") from e

    async def subscribe(self):
        """Yield raw profile tokens in the order they were emitted until the bus goes away."""
        while True:
            item = await self._queue.get()
            if item is _END:
                return
            yield item

    def close(self):
        if self._disconnect_task is not None:
            self._disconnect_task.cancel()
            self._disconnect_task = None
        if self._bus is not None:
            self._bus.disconnect()
            self._bus = None
