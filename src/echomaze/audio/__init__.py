"""
Audio and haptic seams of the core.

Exposes:
- CueKind / HapticKind: what the core can ask for.
- ICueBackend / IHapticBackend: interfaces a platform layer implements.
- CueDispatcher: best-effort wrapper the runtime talks to.
- ProximityMonitor: goblin distance -> loop volume.
"""
from .interfaces import CueKind, HapticKind, ICueBackend, IHapticBackend
from .dispatch import CueDispatcher, clamp_volume
from .proximity import ProximityMonitor, proximity_volume

__all__ = [
    "CueKind",
    "HapticKind",
    "ICueBackend",
    "IHapticBackend",
    "CueDispatcher",
    "clamp_volume",
    "ProximityMonitor",
    "proximity_volume",
]
