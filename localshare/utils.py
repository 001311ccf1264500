"""Formatting helpers for the shell."""

from datetime import datetime
from typing import Iterable

from localshare.constants import DIM, RESET
from localshare.schemas import FileEntry


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in bytes to a human-readable string.

    Uses 1024-based units (B, KB, MB, GB) with at most two decimals and
    no trailing zeros.

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string with size and unit (e.g., "1.5 MB", "512 B")
    """
    if size_bytes <= 0:
        return "0 B"

    units = ['B', 'KB', 'MB', 'GB']
    size = float(size_bytes)
    for unit in units[:-1]:
        if size < 1024:
            return f"{round(size, 2):g} {unit}"
        size /= 1024
    return f"{round(size, 2):g} {units[-1]}"


def format_timestamp(moment: datetime) -> str:
    """Render a timestamp in the local timezone."""
    if moment.tzinfo is not None:
        moment = moment.astimezone()
    return moment.strftime('%Y-%m-%d %H:%M:%S')


def format_listing(files: Iterable[FileEntry]) -> str:
    """
    Render the file listing, one entry per line, in server order.

    Args:
        files: Entries as held by the registry

    Returns:
        Multi-line listing, or a placeholder when empty
    """
    entries = list(files)
    if not entries:
        return "No files shared yet."

    width = max(len(entry.name) for entry in entries)
    lines = [f"{len(entries)} file(s):"]
    for entry in entries:
        name = f"{entry.name}/" if entry.is_dir else entry.name
        lines.append(
            f"  {name.ljust(width + 1)}  {format_file_size(entry.size):>10}  "
            f"{DIM}{format_timestamp(entry.modified_time)}{RESET}"
        )
    return '\n'.join(lines)
