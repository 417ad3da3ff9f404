#!/usr/bin/env python3
"""
laptop-wifi-priority — keeps a laptop on its best known Wi-Fi network
Requires: PyQt6, numpy, PyYAML
Data source: nmcli (NetworkManager CLI)
"""

import sys
import signal
import argparse
import logging
from pathlib import Path

from wifipriority_app.core import *
from wifipriority_app.config import load_config
from wifipriority_app.preup import run_preup

logger = logging.getLogger("wifipriority")

EXIT_OK = 0
EXIT_UNAVAILABLE = 1
EXIT_CONFIG = 2


def setup_logging(verbose: bool = False) -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.DEBUG if verbose else logging.INFO)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="laptop-wifi-priority",
        description="Rank visible Wi-Fi networks and keep NetworkManager on the best one.",
    )
    parser.add_argument(
        "-c", "--config", type=Path, default=DEFAULT_CONFIG_PATH,
        help=f"YAML configuration file (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {VERSION}")
    sub = parser.add_subparsers(dest="command")

    run_p = sub.add_parser("run", help="run the priority daemon (default)")
    run_p.add_argument("--once", action="store_true", help="run a single cycle and exit")

    pre_p = sub.add_parser("pre-up", help="patch DNS/IPv6 settings of saved profiles once")
    pre_p.add_argument("--dry-run", action="store_true", help="log planned changes only")
    return parser


# ─────────────────────────────────────────────────────────────────────────────
# Commands
# ─────────────────────────────────────────────────────────────────────────────


def cmd_run(config, once: bool = False) -> int:
    directory = NetworkDirectory(
        Nmcli(config.daemon.nmcli), activation_wait=config.daemon.activation_wait
    )
    if once:
        run_cycle(directory, BackoffState(), config.daemon)
        return EXIT_OK

    app = QCoreApplication(sys.argv[:1])
    app.setApplicationName(APP_NAME)
    app.setApplicationVersion(VERSION)

    worker = PriorityWorker(directory, config.daemon)
    worker.cycle_error.connect(lambda msg: logger.error("cycle failed: %s", msg))
    app.aboutToQuit.connect(worker.stop)

    def _quit(signum, _frame):
        logger.info("received signal %d, stopping after the current cycle", signum)
        app.quit()

    signal.signal(signal.SIGINT, _quit)
    signal.signal(signal.SIGTERM, _quit)
    # Python signal handlers only run when the interpreter gets control back
    # from Qt's event loop; a periodic no-op timer provides that.
    tick = QTimer()
    tick.timeout.connect(lambda: None)
    tick.start(500)

    logger.info("%s %s started (interval %.0fs)", APP_NAME, VERSION, config.daemon.interval)
    worker.start()
    return app.exec()


def cmd_preup(config, dry_run: bool = False) -> int:
    directory = NetworkDirectory(Nmcli(config.daemon.nmcli))
    try:
        updated, failed = run_preup(directory, config.preup, dry_run=dry_run)
    except DirectoryUnavailable as e:
        logger.error("cannot connect to NetworkManager: %s", e)
        return EXIT_UNAVAILABLE
    logger.info("pre-up finished: %d updated, %d failed", updated, failed)
    return EXIT_OK


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    command = args.command or "run"
    try:
        config = load_config(args.config, required=(command == "pre-up"))
    except ConfigError as e:
        logger.error("failed to load config: %s", e)
        return EXIT_CONFIG

    if command == "pre-up":
        return cmd_preup(config, dry_run=args.dry_run)
    return cmd_run(config, once=getattr(args, "once", False))


if __name__ == "__main__":
    sys.exit(main())
