from __future__ import annotations

import numpy as np

from ftlab.dataio.model_config import SamplingConfig
from ftlab.errors import InvalidInputError
from ftlab.features.byte_source import ByteSource


def middle_offset(length: int, mid_size: int) -> int:
    """Start of the middle window: round_half_up(length / 2) - mid_size // 2, clamped at 0."""
    half = (length + 1) // 2
    return max(0, half - mid_size // 2)


def _pad_right(chunk: bytes, size: int, pad: int) -> bytes:
    return chunk[:size] + bytes([pad]) * (size - len(chunk[:size]))


def _pad_left(chunk: bytes, size: int, pad: int) -> bytes:
    tail = chunk[-size:] if size else b""
    return bytes([pad]) * (size - len(tail)) + tail


def sample_windows(source: ByteSource, sampling: SamplingConfig) -> tuple[bytes, bytes, bytes]:
    """
    Read the beginning, middle and end windows of a non-empty source.

    beginning: first bytes, padding appended
    middle:    read from middle_offset(), padding appended when the read runs short
    end:       last bytes, right-aligned, padding prepended
    """
    length = source.size()
    if length <= 0:
        raise InvalidInputError("cannot sample windows from an empty source")

    pad = sampling.padding_token & 0xFF

    beg = b""
    if sampling.beg_size > 0:
        beg = _pad_right(source.read_at(0, sampling.beg_size), sampling.beg_size, pad)

    mid = b""
    if sampling.mid_size > 0:
        offset = middle_offset(length, sampling.mid_size)
        mid = _pad_right(source.read_at(offset, sampling.mid_size), sampling.mid_size, pad)

    end = b""
    if sampling.end_size > 0:
        n = min(sampling.end_size, length)
        end = _pad_left(source.read_at(length - n, n), sampling.end_size, pad)

    return beg, mid, end


def build_feature_vector(beg: bytes, mid: bytes, end: bytes, sampling: SamplingConfig) -> np.ndarray:
    """Concatenate the windows as unsigned ints: [beginning][middle][end]."""
    expected = (sampling.beg_size, sampling.mid_size, sampling.end_size)
    got = (len(beg), len(mid), len(end))
    if got != expected:
        raise InvalidInputError(f"window sizes {got} do not match configuration {expected}")

    # uint8 first so values are never sign-extended
    raw = np.frombuffer(beg + mid + end, dtype=np.uint8)
    return raw.astype(np.int32)


def extract_features(source: ByteSource, sampling: SamplingConfig) -> np.ndarray:
    beg, mid, end = sample_windows(source, sampling)
    return build_feature_vector(beg, mid, end, sampling)
