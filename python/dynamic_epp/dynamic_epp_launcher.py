#!/usr/bin/env python3
import os
import sys
import asyncio
import argparse
from setproctitle import setproctitle

from dynamic_epp import serve
from dynamic_epp.config import Config, DEFAULT_CONFIG_PATH
from dynamic_epp.errors import ConfigError
from dynamic_epp.info import print_info
from dynamic_epp.sysfs import Sysfs
from dynamic_epp.debug import error_log, set_debug

def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="dynamic_epp",
        description="Keep AMD P-State EPP governor and EPP in sync with the power profile.")
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH,
                        help=f"configuration file (default: {DEFAULT_CONFIG_PATH})")
    parser.add_argument("--info", action="store_true",
                        help="print the current CPU frequency policy state and exit")
    return parser.parse_args(argv)

def load_config(path):
    cfg = Config(path)
    # Validate everything up front, a bad value is a startup error.
    cfg.get_debug()
    cfg.get_sysfs_root()
    cfg.get_bus_name()
    cfg.get_object_path()
    cfg.get_connect_timeout()
    cfg.get_queue_size()
    return cfg

def main(argv=None):
    args = parse_args(argv)

    # Prevent running as non-root
    if not args.info and os.geteuid() != 0:
        print("Error: dynamic_epp must be run as root.", file=sys.stderr)
        return 1

    setproctitle("dynamic_epp")

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        error_log("main", str(e))
        return 1
    set_debug(args.debug or cfg.get_debug())

    if args.info:
        print_info(cfg, Sysfs(cfg.get_sysfs_root()))
        return 0

    return asyncio.run(serve(cfg, cli_debug=args.debug))

if __name__ == "__main__":
    sys.exit(main())
