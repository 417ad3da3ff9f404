"""Ranking engine.

Pure ordering of visible access points; no I/O.
"""

from .core_models import *

logger = logging.getLogger(__name__)


def rank(
    observations: Sequence[AccessPointObservation],
    known_ssids: Set[bytes],
    current_ssid: Optional[bytes] = None,
) -> List[AccessPointObservation]:
    """Return observations best-first.

    Keys, most significant first: known before unknown, signal descending,
    SSID band hint descending (see ssid_band_score). The measured frequency
    is deliberately not a key. Entries equal on all three keep their input
    order. Results are copies with `is_known` filled in; the inputs are not
    modified.

    `current_ssid` does not affect the order; it is only reported.
    """
    if not observations:
        return []
    annotated = [replace(o, is_known=o.ssid in known_ssids) for o in observations]

    known = np.array([o.is_known for o in annotated], dtype=bool)
    signal = np.array([o.signal for o in annotated], dtype=np.int64)
    band = np.array([ssid_band_score(o.ssid) for o in annotated], dtype=np.int64)
    # lexsort is stable and treats the last key as primary
    order = np.lexsort((-band, -signal, ~known))
    ranked = [annotated[i] for i in order]

    if current_ssid is not None:
        for pos, obs in enumerate(ranked):
            if obs.ssid == current_ssid:
                logger.debug("current network %s ranked #%d", obs.display_ssid, pos + 1)
                break
    return ranked


def log_candidates(ranked: Sequence[AccessPointObservation]) -> None:
    logger.info("Available networks:")
    for obs in ranked:
        logger.info(
            "  %s: frequency=%d MHz (%s) strength=%d known=%s",
            obs.display_ssid,
            obs.frequency_mhz,
            obs.band,
            obs.signal,
            obs.is_known,
        )
