from __future__ import annotations

import hashlib
import json
import logging
import random
import secrets
from dataclasses import dataclass
from typing import Any, Union

logger = logging.getLogger(__name__)

Seed = Union[int, str, bytes, None]


def _to_stable_json(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


@dataclass(frozen=True)
class RNGManager:
    """Derives independent random streams from one master seed.

    Each concern gets its own ``random.Random`` keyed by a domain and the level number, so
    replaying a seed reproduces the same layout, placement and goblin wandering even if one
    stream is consumed more or less than in a previous run:

        rngm = RNGManager(1234)
        layout_rng = rngm.context_rng("layout", level)
        motion_rng = rngm.context_rng("goblin_motion", level)

    The master seed can be an int, str, or bytes. Without one, a random seed is drawn and
    logged so the run can still be reproduced.
    """

    master_seed: Seed = None

    def __post_init__(self) -> None:
        if self.master_seed is None:
            raw = secrets.token_bytes(8)
            logger.info("No master seed provided; generated random seed: 0x%s", raw.hex())
        else:
            raw = self._canonicalize_seed(self.master_seed)
            logger.debug("Using master seed: %r", self.master_seed)
        object.__setattr__(self, "_master_seed_bytes", raw)

    @staticmethod
    def _canonicalize_seed(seed: Seed) -> bytes:
        if isinstance(seed, bytes):
            return seed
        if isinstance(seed, bool):
            raise TypeError("Unsupported seed type: bool")
        if isinstance(seed, int):
            length = (seed.bit_length() + 7) // 8 or 1
            return seed.to_bytes(length, "big", signed=seed < 0)
        if isinstance(seed, str):
            s = seed.strip()
            if s.lower().startswith("0x"):
                try:
                    val = int(s, 16)
                except ValueError:
                    return s.encode("utf-8")
                length = (val.bit_length() + 7) // 8 or 1
                return val.to_bytes(length, "big")
            return s.encode("utf-8")
        raise TypeError("Unsupported seed type: %r" % (type(seed),))

    def derive_seed(self, domain: str, *identifiers: Any) -> int:
        """64-bit seed for ``domain`` and identifiers such as the level number."""
        payload = {
            "domain": domain,
            "ids": identifiers,
            "master": self._master_seed_bytes.hex(),  # type: ignore[attr-defined]
        }
        digest = hashlib.blake2b(_to_stable_json(payload).encode("utf-8"), digest_size=8).digest()
        return int.from_bytes(digest, "big")

    def context_rng(self, domain: str, *identifiers: Any) -> random.Random:
        return random.Random(self.derive_seed(domain, *identifiers))

    @property
    def master_seed_hex(self) -> str:
        return self._master_seed_bytes.hex()  # type: ignore[attr-defined]
