"""
Steam CM MikroTik Sync - Address Normalization
"""

from typing import Iterable, Set


def strip_port(endpoint: str) -> str:
    """Return the part of ``endpoint`` before the first colon.

    ``"1.2.3.4:27017"`` -> ``"1.2.3.4"``. Malformed input is passed through
    rather than rejected, so ``""`` stays ``""``.
    """
    return endpoint.split(":", 1)[0]


def normalize(endpoints: Iterable[str]) -> Set[str]:
    """Strip ports and deduplicate endpoints into a set of bare addresses.

    The result may contain ``""`` for pathological input. Ordering is
    unspecified.
    """
    return {strip_port(endpoint) for endpoint in endpoints}
