"""Utility functions."""

import re

_ISO_DURATION_RE = re.compile(r"^P(?:(\d+)D)?T?(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?$")


def extract_video_id(url_or_id: str) -> str | None:
    """Extract YouTube video ID from URL or return as-is if valid ID."""
    patterns = [
        r"(?:v=|/v/|youtu\.be/)([a-zA-Z0-9_-]{11})",
        r"(?:embed/)([a-zA-Z0-9_-]{11})",
        r"(?:shorts/)([a-zA-Z0-9_-]{11})",
    ]
    for pattern in patterns:
        match = re.search(pattern, url_or_id)
        if match:
            return match.group(1)
    if re.match(r"^[a-zA-Z0-9_-]{11}$", url_or_id):
        return url_or_id
    return None


def watch_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id}"


def format_timestamp(seconds: float) -> str:
    """Format seconds to H:MM:SS or M:SS."""
    h = int(seconds // 3600)
    m = int((seconds % 3600) // 60)
    s = int(seconds % 60)
    if h > 0:
        return f"{h}:{m:02d}:{s:02d}"
    return f"{m}:{s:02d}"


def parse_timestamp(value: str) -> int:
    """Parse "S", "M:SS" or "H:MM:SS" (minutes may exceed 59) into seconds."""
    parts = value.strip().split(":")
    if not 1 <= len(parts) <= 3 or not all(p.isdigit() for p in parts):
        raise ValueError(f"Invalid timestamp: {value!r}")
    total = 0
    for part in parts:
        total = total * 60 + int(part)
    return total


def parse_iso_duration(duration: str) -> str:
    """Convert an ISO 8601 duration (PT4M13S) to display form (4:13)."""
    match = _ISO_DURATION_RE.match(duration or "")
    if not match:
        return "0:00"
    days, hours, minutes, seconds = (int(g or 0) for g in match.groups())
    return format_timestamp(((days * 24 + hours) * 60 + minutes) * 60 + seconds)


def safe_filename(title: str | None, suffix: str, extension: str = "srt") -> str:
    """Lowercase, non-alphanumerics replaced by underscores.

    The result is ASCII so it can go into a Content-Disposition header.
    """
    suffix = re.sub(r"[^A-Za-z0-9_-]", "_", suffix)
    if not title:
        return f"transcript_{suffix}.{extension}"
    stem = re.sub(r"[^a-z0-9]", "_", title.lower())
    return f"{stem}_{suffix}.{extension}"
