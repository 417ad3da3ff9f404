"""Configuration loading.

One YAML file serves both tools: daemon tuning under a `daemon:` mapping,
pre-up DNS/token settings at the top level.
"""

import ipaddress

import yaml

from .core_base import *

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DaemonConfig:
    interval: float = LOOP_INTERVAL_SECONDS
    backoff_initial: float = BACKOFF_INITIAL_SECONDS
    backoff_factor: float = BACKOFF_FACTOR
    backoff_max: float = BACKOFF_MAX_SECONDS
    priority_offset: int = PRIORITY_OFFSET
    nmcli: str = "nmcli"
    activation_wait: float = 0  # nmcli --wait; 0 keeps nmcli's default


@dataclass(frozen=True)
class PreUpConfig:
    prefixes: Tuple[str, ...] = ()
    priv_ipv6: Tuple[str, ...] = ()
    priv_ipv4: Tuple[str, ...] = ()
    pub_ipv6: Tuple[str, ...] = ()
    pub_ipv4: Tuple[str, ...] = ()
    ipv6_token: str = ""


@dataclass(frozen=True)
class Config:
    daemon: DaemonConfig = field(default_factory=DaemonConfig)
    preup: PreUpConfig = field(default_factory=PreUpConfig)


def _number(section: dict, key: str, default, minimum: float = 0):
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"daemon.{key} must be a number, got {value!r}")
    if value < minimum:
        raise ConfigError(f"daemon.{key} must be >= {minimum}, got {value!r}")
    return value


def _str_list(data: dict, key: str) -> Tuple[str, ...]:
    value = data.get(key) or []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{key} must be a list of strings")
    return tuple(v.strip() for v in value)


def _addresses(data: dict, key: str, version: int) -> Tuple[str, ...]:
    addrs = _str_list(data, key)
    for addr in addrs:
        try:
            parsed = ipaddress.ip_address(addr)
        except ValueError:
            raise ConfigError(f"invalid IPv{version} address in {key}: {addr}") from None
        if parsed.version != version:
            raise ConfigError(f"invalid IPv{version} address in {key}: {addr}")
    return addrs


def parse_daemon(section) -> DaemonConfig:
    if section is None:
        return DaemonConfig()
    if not isinstance(section, dict):
        raise ConfigError("daemon must be a mapping")
    d = DaemonConfig()
    interval = _number(section, "interval", d.interval)
    if interval <= 0:
        raise ConfigError("daemon.interval must be positive")
    factor = _number(section, "backoff_factor", d.backoff_factor, minimum=1)
    initial = _number(section, "backoff_initial", d.backoff_initial)
    if initial <= 0:
        raise ConfigError("daemon.backoff_initial must be positive")
    maximum = _number(section, "backoff_max", d.backoff_max)
    if maximum < initial:
        raise ConfigError(
            f"daemon.backoff_max ({maximum}) must not be below backoff_initial ({initial})"
        )
    offset = section.get("priority_offset", d.priority_offset)
    if isinstance(offset, bool) or not isinstance(offset, int):
        raise ConfigError(f"daemon.priority_offset must be an integer, got {offset!r}")
    try:
        check_int32(offset)
    except ValueError as e:
        raise ConfigError(f"daemon.priority_offset: {e}") from None
    nmcli = section.get("nmcli", d.nmcli)
    if not isinstance(nmcli, str) or not nmcli:
        raise ConfigError("daemon.nmcli must be a command name or path")
    return DaemonConfig(
        interval=float(interval),
        backoff_initial=float(initial),
        backoff_factor=float(factor),
        backoff_max=float(maximum),
        priority_offset=offset,
        nmcli=nmcli,
        activation_wait=float(_number(section, "activation_wait", d.activation_wait)),
    )


def parse_preup(data: dict) -> PreUpConfig:
    token = data.get("ipv6_token") or ""
    if not isinstance(token, str):
        raise ConfigError("ipv6_token must be a string")
    token = token.strip()
    if token:
        try:
            ipaddress.IPv6Address(token)
        except ValueError:
            raise ConfigError(f"invalid ipv6_token: {token}") from None
    return PreUpConfig(
        prefixes=tuple(p for p in _str_list(data, "prefixes") if p),
        priv_ipv6=_addresses(data, "priv_ipv6", 6),
        priv_ipv4=_addresses(data, "priv_ipv4", 4),
        pub_ipv6=_addresses(data, "pub_ipv6", 6),
        pub_ipv4=_addresses(data, "pub_ipv4", 4),
        ipv6_token=token,
    )


def parse_config(data) -> Config:
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("configuration root must be a mapping")
    return Config(daemon=parse_daemon(data.get("daemon")), preup=parse_preup(data))


def load_config(path: Path = DEFAULT_CONFIG_PATH, required: bool = False) -> Config:
    """Read the YAML file at `path`.

    A missing file yields defaults unless `required` is set.
    """
    path = Path(path)
    if not path.exists():
        if required:
            raise ConfigError(f"config file not found: {path}")
        logger.debug("no config at %s, using defaults", path)
        return Config()
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"cannot read {path}: {e}") from e
    return parse_config(data)
