"""Per-pixel random streams for reproducible Monte Carlo sampling.

Every pixel owns one 32-bit PCG state stored in a Taichi field, so parallel
threads never share generator state and a render is fully determined by its
seed. Stream states are seeded by hashing the stream index with the render seed:

    state[i] = pcg_hash(i ^ pcg_hash(seed))

Each draw advances the stream's LCG and applies the PCG output permutation
(RXS-M-XS), keeping the top 24 bits as an f32 in [0, 1).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.lux.core.sampler import random_f32, seed_streams
    >>> seed_streams(seed=7, count=16)
    >>> # Inside a kernel: xi = random_f32(stream)
"""

import taichi as ti

# One stream per pixel of the largest supported render target
MAX_STREAMS = 2048 * 2048

_PCG_MULTIPLIER = 747796405
_PCG_INCREMENT = 2891336453
_PCG_WORD_MULTIPLIER = 277803737

# 2^-24, maps a 24-bit integer onto [0, 1)
_INV_2_POW_24 = 1.0 / 16777216.0

_stream_states = ti.field(dtype=ti.u32, shape=MAX_STREAMS)


@ti.func
def _permute(state: ti.u32) -> ti.u32:
    """PCG RXS-M-XS output permutation of a 32-bit state."""
    shift = ti.bit_shr(state, ti.u32(28)) + ti.u32(4)
    word = (ti.bit_shr(state, shift) ^ state) * ti.u32(_PCG_WORD_MULTIPLIER)
    return ti.bit_shr(word, ti.u32(22)) ^ word


@ti.func
def pcg_hash(value: ti.u32) -> ti.u32:
    """Hash a 32-bit value with one PCG step.

    Args:
        value: The value to hash.

    Returns:
        A well-mixed 32-bit hash of the value.
    """
    state = value * ti.u32(_PCG_MULTIPLIER) + ti.u32(_PCG_INCREMENT)
    return _permute(state)


@ti.func
def random_f32(stream: ti.i32) -> ti.f32:
    """Draw a uniform random number in [0, 1) from a stream.

    The stream's state is advanced in place. A stream must only be used by
    one thread at a time; renders use the pixel index as the stream.

    Args:
        stream: Index of the random stream.

    Returns:
        A uniformly distributed f32 in [0, 1).
    """
    state = _stream_states[stream] * ti.u32(_PCG_MULTIPLIER) + ti.u32(_PCG_INCREMENT)
    _stream_states[stream] = state
    bits = ti.bit_shr(_permute(state), ti.u32(8))
    return ti.cast(bits, ti.f32) * _INV_2_POW_24


@ti.kernel
def _seed_streams(seed: ti.u32, count: ti.i32):
    base = pcg_hash(seed)
    for stream in range(count):
        _stream_states[stream] = pcg_hash(ti.cast(stream, ti.u32) ^ base)


def seed_streams(seed: int, count: int) -> None:
    """Seed the first ``count`` random streams from a single seed.

    Args:
        seed: Render seed. Only the low 32 bits are used.
        count: Number of streams to seed (max MAX_STREAMS).

    Raises:
        ValueError: If count exceeds MAX_STREAMS.
    """
    if count > MAX_STREAMS:
        raise ValueError(f"Stream count {count} exceeds maximum supported ({MAX_STREAMS})")
    _seed_streams(seed & 0xFFFFFFFF, count)


def get_stream_state(stream: int) -> int:
    """Get the raw state of a stream (for debugging and tests)."""
    return int(_stream_states[stream])
