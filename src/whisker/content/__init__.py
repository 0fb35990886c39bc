"""Content — pooled buffers and the synthetic payload generator."""

from whisker.content.generator import CHARSET, MARKER, fill, fill_pooled
from whisker.content.pool import DEFAULT_POOL_NAME, BufferPool, PooledBuffer

__all__ = [
    "CHARSET",
    "DEFAULT_POOL_NAME",
    "MARKER",
    "BufferPool",
    "PooledBuffer",
    "fill",
    "fill_pooled",
]
