"""Reusable scratch buffers for document assembly and compression."""

from mezmo_exporter.buffers.pool import BufferPool, get_default_pool, reset_buffer

__all__ = ["BufferPool", "get_default_pool", "reset_buffer"]
