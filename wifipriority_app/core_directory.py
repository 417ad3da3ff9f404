"""Network directory adapter.

The only place that knows how NetworkManager represents profiles, devices
and access points. Everything above it sees typed models and the error
kinds from core_base.
"""

from .core_nmcli import *

logger = logging.getLogger(__name__)


class NetworkDirectory:
    """Read and write access to NetworkManager through nmcli.

    Saved profiles are snapshotted by `refresh_profiles()` (called from
    `list_known_ssids()`); `profiles_for_ssid()` answers from that
    snapshot so a cycle sees one consistent profile set.
    """

    def __init__(self, nmcli: Optional[Nmcli] = None, activation_wait: float = 0):
        self._nmcli = nmcli or Nmcli()
        self._activation_wait = activation_wait
        self._profiles: Optional[List[SavedProfile]] = None

    # ── Profiles ────────────────────────────────────────────────────────────

    def list_profiles(self, types: Iterable[str] = (NM_TYPE_WIRELESS,)) -> List[SavedProfile]:
        """Saved profiles of the given types, with their details loaded.

        Raises DirectoryUnavailable when the profile list itself cannot be
        fetched; a profile whose details fail is logged and skipped.
        """
        wanted = set(types)
        try:
            out = self._nmcli.run("-t", "-f", CONNECTION_LIST_FIELDS, "connection", "show")
        except NmcliError as e:
            raise DirectoryUnavailable(f"cannot list connections: {e}") from e

        profiles: List[SavedProfile] = []
        for summary in parse_connection_list(out):
            if summary.type not in wanted:
                continue
            try:
                profiles.append(self._load_profile(summary))
            except ProfileReadError as e:
                logger.warning("skipping profile %s (%s): %s", summary.name, summary.uuid, e)
        return profiles

    def _load_profile(self, summary: SavedProfile) -> SavedProfile:
        fields = WIRELESS_DETAIL_FIELDS if summary.is_wireless else CONNECTION_DETAIL_FIELDS
        try:
            out = self._nmcli.run(
                "-t", "-f", fields, "connection", "show", "uuid", summary.uuid
            )
        except NmcliError as e:
            raise ProfileReadError(str(e)) from e
        return decode_profile(parse_settings(out))

    def refresh_profiles(self) -> List[SavedProfile]:
        self._profiles = None  # a failed refresh must not leave a stale snapshot
        self._profiles = self.list_profiles()
        return self._profiles

    def list_known_ssids(self) -> Set[bytes]:
        """SSIDs of wireless profiles NetworkManager has connected before."""
        return {p.ssid for p in self.refresh_profiles() if p.is_known}

    def profiles_for_ssid(self, ssid: bytes) -> List[SavedProfile]:
        if self._profiles is None:
            self.refresh_profiles()
        return [p for p in self._profiles if p.is_wireless and p.ssid == ssid]

    def set_priority(self, profile: SavedProfile, priority: int) -> None:
        """Write connection.autoconnect-priority, leaving other settings alone."""
        check_int32(priority)
        try:
            self._nmcli.run(
                "connection", "modify", "uuid", profile.uuid,
                "connection.autoconnect-priority", str(priority),
            )
        except (NmcliError, DirectoryUnavailable) as e:
            raise ProfileWriteError(f"{profile.name} ({profile.uuid}): {e}") from e

    def modify(self, profile: SavedProfile, properties: Dict[str, str]) -> None:
        """Write several properties of one profile in a single nmcli call."""
        args: List[str] = ["connection", "modify", "uuid", profile.uuid]
        for key, value in properties.items():
            args.extend([key, value])
        try:
            self._nmcli.run(*args)
        except (NmcliError, DirectoryUnavailable) as e:
            raise ProfileWriteError(f"{profile.name} ({profile.uuid}): {e}") from e

    # ── Devices / access points ────────────────────────────────────────────

    def wifi_devices(self) -> List[WifiDevice]:
        try:
            out = self._nmcli.run("-t", "-f", DEVICE_STATUS_FIELDS, "device", "status")
        except NmcliError as e:
            raise DirectoryUnavailable(f"cannot list devices: {e}") from e
        return parse_device_status(out)

    def _access_points(self, device: str) -> List[AccessPointObservation]:
        out = self._nmcli.run(
            "-t", "-f", WIFI_LIST_FIELDS, "device", "wifi", "list",
            "ifname", device, "--rescan", "no",
        )
        return parse_wifi_list(out, device=device)

    def scan_visible(self) -> List[AccessPointObservation]:
        """Visible access points on every wireless device, not deduplicated."""
        aps: List[AccessPointObservation] = []
        for dev in self.wifi_devices():
            try:
                aps.extend(self._access_points(dev.name))
            except NmcliError as e:
                logger.warning("cannot list access points on %s: %s", dev.name, e)
        return aps

    def current_ssid(self) -> Optional[bytes]:
        """SSID in use on the first activated wireless device, if any."""
        for dev in self.wifi_devices():
            if not dev.is_activated:
                continue
            try:
                aps = self._access_points(dev.name)
            except NmcliError as e:
                logger.warning("cannot read active access point on %s: %s", dev.name, e)
                continue
            for ap in aps:
                if ap.in_use:
                    return ap.ssid
        return None

    # ── Actions ─────────────────────────────────────────────────────────────

    def activate(self, profile: SavedProfile, device: str, bssid: str = "") -> None:
        args: List[str] = []
        if self._activation_wait > 0:
            args.extend(["-w", str(int(self._activation_wait))])
        args.extend(["connection", "up", "uuid", profile.uuid, "ifname", device])
        if bssid:
            args.extend(["ap", bssid])
        try:
            self._nmcli.run(*args)
        except (NmcliError, DirectoryUnavailable) as e:
            raise ActivationError(f"{profile.name} on {device}: {e}") from e

    def request_scan(self) -> None:
        try:
            self._nmcli.run("device", "wifi", "rescan")
        except (NmcliError, DirectoryUnavailable) as e:
            raise ScanRequestError(str(e)) from e
