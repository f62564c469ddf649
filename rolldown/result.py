from typing import Any, NamedTuple


class DeltaV(NamedTuple):
    """Potential difference estimate ``dV`` and its relative error ``err``."""

    dV: Any
    err: Any


__all__ = ["DeltaV"]
