"""One-shot profile patcher ("pre-up").

Rewrites the IPv4/IPv6 DNS, address-generation, privacy and token settings
of every saved wireless and ethernet profile. Profiles whose name starts
with a configured prefix are treated as private networks.
"""

from .core_directory import *
from .config import PreUpConfig

logger = logging.getLogger(__name__)

PATCHED_TYPES = (NM_TYPE_WIRELESS, NM_TYPE_ETHERNET)

# Settings every patched profile receives
_COMMON = {
    "ipv6.method": "auto",
    "ipv6.addr-gen-mode": "eui64",
    "ipv6.ip6-privacy": "2",  # prefer temporary addresses
    "ipv6.dns-priority": "1",
    "ipv4.method": "auto",
    "ipv4.dns-priority": "2",
}


def is_private(name: str, prefixes: Iterable[str]) -> bool:
    return any(p and name.startswith(p) for p in prefixes)


def plan_patch(profile: SavedProfile, cfg: PreUpConfig) -> Dict[str, str]:
    """Properties to write for `profile`; empty for untouched types."""
    if profile.type not in PATCHED_TYPES:
        return {}
    props = dict(_COMMON)
    if is_private(profile.name, cfg.prefixes):
        props["ipv6.dns"] = " ".join(cfg.priv_ipv6)
        props["ipv4.dns"] = " ".join(cfg.priv_ipv4)
        props["ipv6.token"] = cfg.ipv6_token
    elif profile.type == NM_TYPE_ETHERNET:
        props["ipv6.dns"] = ""
        props["ipv4.dns"] = ""
        props["ipv6.token"] = ""
    else:
        props["ipv6.dns"] = " ".join(cfg.pub_ipv6)
        props["ipv4.dns"] = " ".join(cfg.pub_ipv4)
        props["ipv6.token"] = ""
    return props


def run_preup(directory: NetworkDirectory, cfg: PreUpConfig, dry_run: bool = False) -> Tuple[int, int]:
    """Patch every profile; returns (updated, failed).

    Raises DirectoryUnavailable if the profile list cannot be read.
    """
    updated = failed = 0
    for profile in directory.list_profiles(PATCHED_TYPES):
        props = plan_patch(profile, cfg)
        kind = "private" if is_private(profile.name, cfg.prefixes) else "public"
        logger.info("Modifying connection: %s (%s network)", profile.name, kind)
        for key, value in props.items():
            logger.debug("  %s = %r", key, value)
        if dry_run:
            continue
        try:
            directory.modify(profile, props)
        except ProfileWriteError as e:
            logger.warning(" ✗ failed to update %s: %s", profile.name, e)
            failed += 1
            continue
        logger.info(" ✓ updated %s", profile.name)
        updated += 1
    return updated, failed
