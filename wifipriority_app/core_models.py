"""Domain models.

Contains the typed views of access points and saved profiles the engine
works with, plus the per-cycle backoff and report values.
"""

from .core_base import *


@dataclass
class AccessPointObservation:
    # ── Ranking inputs ──────────────────────────────────────────────────────
    ssid: bytes
    frequency_mhz: int
    signal: int  # 0-100 (nmcli)
    is_known: bool = False
    # ── Where it was seen (activation needs both) ──────────────────────────
    bssid: str = ""
    device: str = ""
    in_use: bool = False

    @property
    def display_ssid(self) -> str:
        return ssid_text(self.ssid) if self.ssid else f"<hidden> ({self.bssid})"

    @property
    def band(self) -> str:
        return freq_to_band(self.frequency_mhz)


@dataclass(frozen=True)
class SavedProfile:
    """Handle to one NetworkManager connection profile."""

    uuid: str
    name: str
    type: str
    ssid: bytes = b""
    timestamp: int = 0  # 0 when NM has never activated the profile

    @property
    def is_wireless(self) -> bool:
        return self.type == NM_TYPE_WIRELESS

    @property
    def is_known(self) -> bool:
        return self.is_wireless and self.timestamp > 0


@dataclass(frozen=True)
class WifiDevice:
    name: str
    state: str

    @property
    def is_activated(self) -> bool:
        return self.state == NM_DEVICE_ACTIVATED


@dataclass(frozen=True)
class BackoffState:
    """No-network retry delay, threaded through consecutive cycles."""

    delay: float = 0.0

    def grow(
        self,
        initial: float = BACKOFF_INITIAL_SECONDS,
        factor: float = BACKOFF_FACTOR,
        maximum: float = BACKOFF_MAX_SECONDS,
    ) -> "BackoffState":
        nxt = initial if self.delay == 0 else self.delay * factor
        return BackoffState(min(nxt, maximum))

    def reset(self) -> "BackoffState":
        return BackoffState(0.0)


@dataclass
class CycleReport:
    ranked: List[AccessPointObservation] = field(default_factory=list)
    current_ssid: Optional[bytes] = None
    writes_ok: int = 0
    writes_failed: int = 0
    activation_attempted: bool = False
    activated: bool = False
    sleep_seconds: float = LOOP_INTERVAL_SECONDS
    backoff: BackoffState = field(default_factory=BackoffState)

    @property
    def best(self) -> Optional[AccessPointObservation]:
        return self.ranked[0] if self.ranked else None
