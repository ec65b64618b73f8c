"""
Deterministic content hashing.

The explainability layer needs pseudo-random but reproducible jitter for
region placement and attention baselines. It is seeded from the image
content identifier through a 32-bit rolling hash, so the same image always
produces the same layout.

Text is read as UTF-16 code units, so a character outside the Basic
Multilingual Plane contributes its two surrogate halves and counts twice
toward the prefix length.
"""

from typing import Union

import numpy as np

# Only the leading code units feed the hash; long base64 payloads are cut here.
HASH_PREFIX_LENGTH = 1000


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _code_units(content: Union[str, bytes]):
    if isinstance(content, (bytes, bytearray)):
        return content[:HASH_PREFIX_LENGTH]
    encoded = str(content).encode('utf-16-le', 'surrogatepass')
    return np.frombuffer(encoded, dtype='<u2')[:HASH_PREFIX_LENGTH].tolist()


def simple_hash(content: Union[str, bytes]) -> int:
    """
    Rolling 31-multiplier hash over the content prefix.

    Each step computes h = h * 31 + code wrapped to a signed 32-bit integer.
    Bytes contribute one code per byte; text one code per UTF-16 unit.

    Returns:
        Non-negative integer in [0, 2**31]
    """
    h = 0
    for code in _code_units(content):
        h = _to_int32((h << 5) - h + code)
    return abs(h)
