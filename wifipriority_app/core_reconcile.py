"""Priority reconciliation and activation.

Pushes a ranked list back into NetworkManager: autoconnect priorities for
every matching saved profile, then activation of the top candidate.
"""

from .core_directory import *

logger = logging.getLogger(__name__)


def priority_for_rank(index: int, total: int, offset: int = PRIORITY_OFFSET) -> int:
    """Autoconnect priority for the entry at `index` of a `total`-long list."""
    return check_int32((total - index) + offset)


def reconcile_priorities(
    directory: NetworkDirectory,
    ranked: Sequence[AccessPointObservation],
    offset: int = PRIORITY_OFFSET,
) -> Tuple[int, int]:
    """Write rank-derived priorities; returns (written, failed).

    Duplicate SSIDs each get their own write; the later (lower) one wins.
    Failures never abort the pass, the next cycle rewrites everything.
    """
    written = failed = 0
    total = len(ranked)
    for idx, obs in enumerate(ranked):
        priority = priority_for_rank(idx, total, offset)
        try:
            profiles = directory.profiles_for_ssid(obs.ssid)
        except DirectoryUnavailable as e:
            logger.warning("cannot look up profiles for %s: %s", obs.display_ssid, e)
            failed += 1
            continue
        for profile in profiles:
            logger.info("Setting priority for %s (%s) to %d", profile.name, profile.uuid, priority)
            try:
                directory.set_priority(profile, priority)
            except ProfileWriteError as e:
                logger.warning("  → priority update failed: %s", e)
                failed += 1
                continue
            logger.info("  ✓ priority set for %s to %d", profile.name, priority)
            written += 1
    return written, failed


def activate_best(
    directory: NetworkDirectory,
    ranked: Sequence[AccessPointObservation],
    current_ssid: Optional[bytes],
) -> Tuple[bool, bool]:
    """Bring up the top candidate unless it is already current.

    Returns (attempted, succeeded). Nothing is retried here.
    """
    if not ranked:
        return False, False
    best = ranked[0]
    if best.ssid == current_ssid:
        logger.info("Already connected to best network %s", best.display_ssid)
        return False, False

    try:
        profiles = directory.profiles_for_ssid(best.ssid)
    except DirectoryUnavailable as e:
        logger.warning("cannot look up profiles for %s: %s", best.display_ssid, e)
        return False, False
    if not profiles:
        logger.info("No saved profile for best network %s", best.display_ssid)
        return False, False
    if not best.device:
        logger.warning("No wireless interface sees %s", best.display_ssid)
        return False, False

    profile = profiles[0]
    logger.info(
        "Connecting to %s via %s (%s, ap %s)",
        best.display_ssid, profile.name, best.device, best.bssid or "any",
    )
    try:
        directory.activate(profile, best.device, best.bssid)
    except ActivationError as e:
        logger.warning("  ✗ activation failed: %s", e)
        return True, False
    logger.info("  ✓ activation of %s requested", profile.name)
    return True, True
