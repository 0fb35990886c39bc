"""Content generator — deterministic synthetic payloads.

A payload of ``length`` bytes looks like::

    |ABCDEFGH|

The first and last byte are the boundary marker ``|``.  The filler byte at
position ``i`` (counting the opening marker as position 0) is
``CHARSET[i % len(CHARSET)]``, so a client can verify any payload without
knowing how it was produced.

Lengths are final byte counts.  Unit scaling and clamping of negative
values happen in the caller.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from whisker._types import ByteCount

if TYPE_CHECKING:
    from whisker.content.pool import BufferPool, PooledBuffer

CHARSET = b"-ABCDEFGHIJKLMNOPQRSTUVWXYZ"
MARKER = ord("|")

# Filler starts at position 1, so one period of the cycle begins at CHARSET[1]
_PERIOD = CHARSET[1:] + CHARSET[:1]

# Filler is appended in blocks of whole periods to bound temporary copies
_BLOCK = _PERIOD * (64 * 1024 // len(_PERIOD))


def fill(buffer: PooledBuffer, length: ByteCount) -> None:
    """Write exactly *length* bytes of generated content into *buffer*."""
    if length <= 0:
        return
    buffer.write_byte(MARKER)
    remaining = length - 2
    while remaining > 0:
        # Every block is a whole number of periods, so the cycle phase
        # stays aligned from one block to the next.
        chunk = _BLOCK if remaining >= len(_BLOCK) else _BLOCK[:remaining]
        buffer.write(chunk)
        remaining -= len(chunk)
    if length > 1:
        buffer.write_byte(MARKER)


def fill_pooled(pool: BufferPool, length: ByteCount) -> PooledBuffer:
    """Acquire a buffer from *pool* and fill it.

    The caller owns the buffer and must hand it back with
    ``pool.release()``.  Prefer ``pool.borrow()`` + ``fill()`` where a
    ``with`` block fits.
    """
    buffer = pool.acquire(skip=1)
    try:
        fill(buffer, length)
    except BaseException:
        pool.release(buffer)
        raise
    return buffer
