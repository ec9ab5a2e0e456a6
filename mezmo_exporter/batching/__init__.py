from mezmo_exporter.batching.assembler import (
    MAX_BODY_SIZE,
    AssemblyStats,
    encode_line,
    push_lines,
)

__all__ = ["MAX_BODY_SIZE", "AssemblyStats", "encode_line", "push_lines"]
