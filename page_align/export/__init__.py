"""Export writer package."""

from .writers import write_pages_csv, write_pages_srt, write_timestamps_json

__all__ = [
    "write_pages_csv",
    "write_pages_srt",
    "write_timestamps_json",
]
