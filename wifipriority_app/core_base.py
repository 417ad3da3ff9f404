"""Core base definitions.

Contains imports, constants, the error hierarchy, band helpers
and low-level utility functions used across the application.
"""

import re
import logging
import threading
import subprocess
from pathlib import Path
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Set, Tuple

import numpy as np

from PyQt6.QtCore import (
    QCoreApplication,
    QThread,
    QTimer,
    pyqtSignal,
)


# ─────────────────────────────────────────────────────────────────────────────
# Constants
# ─────────────────────────────────────────────────────────────────────────────

VERSION = "1.0.0"
APP_NAME = "WiFiPriority"

DEFAULT_CONFIG_PATH = Path("/etc/laptop_wifi_priority.yml")

LOOP_INTERVAL_SECONDS = 30.0  # cadence while candidates are visible
BACKOFF_INITIAL_SECONDS = 0.5  # first non-zero no-network delay
BACKOFF_FACTOR = 1.2
BACKOFF_MAX_SECONDS = 100.0
PRIORITY_OFFSET = 10  # lowest ranked candidate gets offset + 1

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

# NetworkManager vocabulary as printed by nmcli
NM_TYPE_WIRELESS = "802-11-wireless"
NM_TYPE_ETHERNET = "802-3-ethernet"
NM_DEVICE_WIFI = "wifi"
NM_DEVICE_ACTIVATED = "connected"


# ─────────────────────────────────────────────────────────────────────────────
# Errors
# ─────────────────────────────────────────────────────────────────────────────


class WifiPriorityError(Exception):
    """Base exception for all daemon errors."""


class ConfigError(WifiPriorityError):
    """Invalid configuration file."""


class NmcliError(WifiPriorityError):
    """nmcli exited with a non-zero status."""

    def __init__(self, args: Sequence[str], returncode: int, stderr: str = ""):
        self.command = list(args)
        self.returncode = returncode
        self.stderr = stderr.strip()
        detail = self.stderr or f"exit status {returncode}"
        super().__init__(f"nmcli {' '.join(self.command)}: {detail}")


class DirectoryUnavailable(WifiPriorityError):
    """NetworkManager cannot be reached at all."""


class ProfileReadError(WifiPriorityError):
    """A single saved profile could not be read or decoded."""


class ProfileWriteError(WifiPriorityError):
    """A single saved profile could not be updated."""


class ActivationError(WifiPriorityError):
    """NetworkManager refused to bring a profile up."""


class ScanRequestError(WifiPriorityError):
    """The rescan request was rejected (often: a scan is already running)."""


# ─────────────────────────────────────────────────────────────────────────────
# Band helpers
# ─────────────────────────────────────────────────────────────────────────────


def freq_to_band(freq_mhz: int) -> str:
    if 2400 <= freq_mhz < 2500:
        return "2.4 GHz"
    if 5000 <= freq_mhz < 5900:
        return "5 GHz"
    if 5925 <= freq_mhz <= 7125:
        return "6 GHz"
    return "?"


def ssid_text(ssid: bytes) -> str:
    """Printable form of a raw SSID."""
    return ssid.decode("utf-8", errors="replace")


def ssid_band_score(ssid: bytes) -> int:
    """Band weight guessed from the network *name*, not its frequency.

    Routers commonly advertise one SSID per band ("Home-5G", "Cafe 2.4GHz").
    The first matching row wins, so "6g" beats "5g" in "mesh-6g-5g".
    """
    name = ssid_text(ssid).lower()
    if "6ghz" in name or "6g" in name:
        return 60
    if "5ghz" in name or "5g" in name:
        return 50
    if "2.4ghz" in name or "2ghz" in name or "2g" in name:
        return 24
    return 0


def check_int32(value: int) -> int:
    if not INT32_MIN <= value <= INT32_MAX:
        raise ValueError(f"{value} does not fit a signed 32-bit integer")
    return value
