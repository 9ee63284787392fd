import os
import shutil
import yaml

from .errors import ConfigError
from .sysfs import DEFAULT_SYSFS_ROOT
from .debug import debug_log, info_log, error_log

DEFAULT_CONFIG_PATH = "/etc/dynamic-epp.yaml"
DEFAULT_TEMPLATE_PATH = "/usr/share/dynamic-epp/dynamic-epp.yaml"

DEFAULT_BUS_NAME = "org.freedesktop.UPower.PowerProfiles"
DEFAULT_OBJECT_PATH = "/org/freedesktop/UPower/PowerProfiles"
DEFAULT_CONNECT_TIMEOUT = 5.0
DEFAULT_QUEUE_SIZE = 16

class Config:
    def __init__(self, path=DEFAULT_CONFIG_PATH, template_path=DEFAULT_TEMPLATE_PATH):
        self.path = path
        self.template_path = template_path
        self.data = {}
        self.last_loaded = 0
        self.load()

    # ───────────────────────────────────────── internal helpers ───
    def _generate_from_default(self):
        try:
            shutil.copy(self.template_path, self.path)
            info_log("config", f"Default config copied to {self.path}")
        except OSError as e:
            error_log("config", f"Failed to copy default config: {e}")

    def load(self):
        if not os.path.exists(self.path):
            if os.path.exists(self.template_path):
                info_log("config", "No config found. Generating from default.")
                self._generate_from_default()
            if not os.path.exists(self.path):
                debug_log("config", f"No config at {self.path}, using built-in defaults")
                self.data = {}
                self.last_loaded = 0
                return

        try:
            with open(self.path, "r") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse {self.path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to read {self.path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"{self.path}: top level must be a mapping, "
                              f"got {type(data).__name__}")

        self.data = data
        self.last_loaded = os.path.getmtime(self.path)
        debug_log("config", f"Config loaded from {self.path}")

    def reload_if_needed(self):
        try:
            mtime = os.path.getmtime(self.path)
        except FileNotFoundError:
            return False
        if mtime > self.last_loaded:
            self.load()
            return True
        return False

    def _merge(self, key_path):
        d = self.data
        for k in key_path.split("."):
            if not isinstance(d, dict):
                return {}
            d = d.get(k, {})
        return d

    def _section(self, name):
        section = self._merge(name)
        if section is None:
            return {}
        if not isinstance(section, dict):
            raise ConfigError(f"{self.path}: '{name}' must be a mapping")
        return section

    # ───────────────────────────────────────── public accessors ───
    def get_debug(self):
        return bool(self._section("general").get("debug", False))

    def get_sysfs_root(self):
        return str(self._section("sysfs").get("root", DEFAULT_SYSFS_ROOT))

    def get_bus_name(self):
        return str(self._section("dbus").get("bus_name", DEFAULT_BUS_NAME))

    def get_object_path(self):
        return str(self._section("dbus").get("object_path", DEFAULT_OBJECT_PATH))

    def get_connect_timeout(self):
        value = self._section("dbus").get("connect_timeout", DEFAULT_CONNECT_TIMEOUT)
        try:
            timeout = float(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"dbus.connect_timeout must be a number, got {value!r}") from e
        if timeout <= 0:
            raise ConfigError(f"dbus.connect_timeout must be positive, got {timeout}")
        return timeout

    def get_queue_size(self):
        value = self._section("daemon").get("queue_size", DEFAULT_QUEUE_SIZE)
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ConfigError(f"daemon.queue_size must be a positive integer, got {value!r}")
        return value
