"""nmcli subsystem.

Contains the nmcli command wrapper and the terse-output parsers that turn
NetworkManager's text into the typed models from core_models.
"""

from .core_models import *

logger = logging.getLogger(__name__)

# nmcli exits with 8 when the NetworkManager daemon is not running
NMCLI_EXIT_NM_NOT_RUNNING = 8

CONNECTION_LIST_FIELDS = "NAME,UUID,TYPE,TIMESTAMP"
CONNECTION_DETAIL_FIELDS = "connection.id,connection.uuid,connection.type,connection.timestamp"
WIRELESS_DETAIL_FIELDS = CONNECTION_DETAIL_FIELDS + ",802-11-wireless.ssid"
DEVICE_STATUS_FIELDS = "DEVICE,TYPE,STATE"
WIFI_LIST_FIELDS = "IN-USE,SSID-HEX,BSSID,FREQ,SIGNAL"

# Pretty-mode aliases, in case an nmcli build prints them in terse mode too
_TYPE_ALIASES = {"wifi": NM_TYPE_WIRELESS, "ethernet": NM_TYPE_ETHERNET}


def _split_terse(line: str) -> List[str]:
    """Split a nmcli terse line on unescaped ':' characters."""
    fields: List[str] = []
    cur: List[str] = []
    i = 0
    while i < len(line):
        if line[i] == "\\" and i + 1 < len(line) and line[i + 1] in ":\\":
            cur.append(line[i + 1])
            i += 2
        elif line[i] == ":":
            fields.append("".join(cur))
            cur = []
            i += 1
        else:
            cur.append(line[i])
            i += 1
    fields.append("".join(cur))
    return fields


def _parse_int(text: str, default: int = 0) -> int:
    m = re.search(r"-?\d+", text)
    return int(m.group(0)) if m else default


def _normalize_type(raw: str) -> str:
    raw = raw.strip()
    return _TYPE_ALIASES.get(raw, raw)


class Nmcli:
    """Thin wrapper around the nmcli binary.

    `runner` has the signature of subprocess.run; tests pass a fake one.
    """

    def __init__(self, command: str = "nmcli", runner: Optional[Callable] = None):
        self.command = command
        self._runner = runner or subprocess.run

    def run(self, *args: str) -> str:
        cmd = [self.command, *args]
        logger.debug("exec %s", " ".join(cmd))
        try:
            result = self._runner(cmd, capture_output=True, text=True)
        except FileNotFoundError:
            raise DirectoryUnavailable(
                "nmcli not found — is NetworkManager installed?"
            ) from None
        except OSError as e:
            raise DirectoryUnavailable(f"cannot run nmcli: {e}") from e
        if result.returncode == NMCLI_EXIT_NM_NOT_RUNNING:
            raise DirectoryUnavailable("NetworkManager is not running")
        if result.returncode != 0:
            raise NmcliError(args, result.returncode, result.stderr or "")
        return result.stdout or ""


# ─────────────────────────────────────────────────────────────────────────────
# Parsers
# ─────────────────────────────────────────────────────────────────────────────


def parse_connection_list(output: str) -> List[SavedProfile]:
    """Parse `connection show` summary rows (NAME,UUID,TYPE,TIMESTAMP).

    The SSID is not part of the summary; callers fill it in from the
    per-profile detail view.
    """
    profiles: List[SavedProfile] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        parts = _split_terse(line)
        if len(parts) < 4:
            logger.debug("skipping short connection row %r", line)
            continue
        name, uuid, ctype, ts = parts[:4]
        if not uuid.strip():
            continue
        profiles.append(
            SavedProfile(
                uuid=uuid.strip(),
                name=name,
                type=_normalize_type(ctype),
                timestamp=_parse_int(ts),
            )
        )
    return profiles


def parse_settings(output: str) -> Dict[str, str]:
    """Parse multi-line `key:value` terse output into a flat dict."""
    settings: Dict[str, str] = {}
    for line in output.splitlines():
        if not line.strip():
            continue
        parts = _split_terse(line)
        if len(parts) < 2:
            continue
        settings[parts[0].strip()] = ":".join(parts[1:])
    return settings


def decode_profile(settings: Dict[str, str]) -> SavedProfile:
    """Build a SavedProfile from a detail view, validating each field."""
    uuid = settings.get("connection.uuid", "").strip()
    ctype = _normalize_type(settings.get("connection.type", ""))
    if not uuid:
        raise ProfileReadError("profile has no connection.uuid")
    if not ctype:
        raise ProfileReadError(f"profile {uuid} has no connection.type")
    raw_ts = settings.get("connection.timestamp", "").strip() or "0"
    if not re.fullmatch(r"\d+", raw_ts):
        raise ProfileReadError(
            f"profile {uuid}: connection.timestamp is not an integer: {raw_ts!r}"
        )
    ssid = b""
    if ctype == NM_TYPE_WIRELESS:
        raw_ssid = settings.get("802-11-wireless.ssid")
        if raw_ssid is None:
            raise ProfileReadError(f"wireless profile {uuid} has no SSID")
        ssid = raw_ssid.encode("utf-8")
    return SavedProfile(
        uuid=uuid,
        name=settings.get("connection.id", ""),
        type=ctype,
        ssid=ssid,
        timestamp=int(raw_ts),
    )


def parse_device_status(output: str) -> List[WifiDevice]:
    """Return the wireless devices from `device status` rows."""
    devices: List[WifiDevice] = []
    for line in output.splitlines():
        parts = _split_terse(line)
        if len(parts) < 3:
            continue
        name, dtype, state = (p.strip() for p in parts[:3])
        if dtype == NM_DEVICE_WIFI and name:
            devices.append(WifiDevice(name=name, state=state))
    return devices


def parse_wifi_list(output: str, device: str = "") -> List[AccessPointObservation]:
    """Parse `device wifi list` rows (IN-USE,SSID-HEX,BSSID,FREQ,SIGNAL)."""
    aps: List[AccessPointObservation] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        parts = _split_terse(line)
        if len(parts) < 5:
            continue
        try:
            ssid_hex = parts[1].strip()
            ssid = bytes.fromhex(ssid_hex) if ssid_hex not in ("", "--") else b""
            signal = max(0, min(100, _parse_int(parts[4])))
            aps.append(
                AccessPointObservation(
                    ssid=ssid,
                    frequency_mhz=_parse_int(parts[3]),
                    signal=signal,
                    bssid=parts[2].strip(),
                    device=device,
                    in_use=parts[0].strip() == "*",
                )
            )
        except ValueError:
            logger.debug("skipping malformed wifi row %r", line)
            continue
    return aps
