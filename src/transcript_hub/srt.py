"""SubRip (SRT) conversion for transcript segments.

Segments carry a display time ("1:23" or "1:02:03") and text. SRT blocks carry
an index, a "HH:MM:SS,mmm --> HH:MM:SS,mmm" range and one or more text lines.
Milliseconds are dropped when parsing, since segments have whole-second
resolution.
"""

import logging
import re

from transcript_hub.errors import SrtFormatError
from transcript_hub.models import Segment
from transcript_hub.utils import format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)

# A segment with no later successor lasts this long
DEFAULT_SEGMENT_SECONDS = 5

_SRT_TIME = r"\d{1,2}:\d{2}:\d{2}[,.]\d{3}|\d{1,3}:\d{2}[,.]\d{3}"
_RANGE_RE = re.compile(rf"({_SRT_TIME})\s*-->\s*({_SRT_TIME})")
_BLOCK_SPLIT_RE = re.compile(r"\n\s*\n")
_HTML_TAG_RE = re.compile(r"<[^>]*>")
_OVERRIDE_RE = re.compile(r"\{[^}]*\}")
_ANNOTATION_RE = re.compile(r"\[[^\]]*\]")
_WHITESPACE_RE = re.compile(r"\s+")
_TIMESTAMPED_RE = re.compile(
    r"\((\d+:\d{2}(?::\d{2})?)\)\s*(.*?)(?=\(\d+:\d{2}(?::\d{2})?\)|$)",
    re.DOTALL,
)


def to_srt_time(seconds: float) -> str:
    """Format seconds as HH:MM:SS,mmm."""
    millis = int(round(seconds * 1000))
    h, rem = divmod(millis, 3_600_000)
    m, rem = divmod(rem, 60_000)
    s, ms = divmod(rem, 1000)
    return f"{h:02d}:{m:02d}:{s:02d},{ms:03d}"


def from_srt_time(value: str) -> int:
    """Parse HH:MM:SS,mmm (or the short MMM:SS,mmm form) into whole seconds."""
    whole = re.split(r"[,.]", value.strip(), maxsplit=1)[0]
    return parse_timestamp(whole)


def validate_srt(content: str | None) -> None:
    if not content or not content.strip():
        raise SrtFormatError("SRT content is empty")
    if not _RANGE_RE.search(content):
        raise SrtFormatError("Invalid SRT format - no valid timestamps found")


def clean_text(text: str) -> str:
    """Strip markup tags, {override} codes and [annotations]."""
    text = _HTML_TAG_RE.sub("", text)
    text = _OVERRIDE_RE.sub("", text)
    text = _ANNOTATION_RE.sub("", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def parse_srt(content: str, clean: bool = False) -> list[Segment]:
    """Parse SRT text into segments.

    Blocks with fewer than three lines, an unrecognizable time range or no
    text are skipped.
    """
    segments = []
    normalized = content.replace("\r\n", "\n").replace("\r", "\n").strip()
    if not normalized:
        return segments

    for block in _BLOCK_SPLIT_RE.split(normalized):
        lines = block.strip().split("\n")
        if len(lines) < 3:
            continue
        match = _RANGE_RE.search(lines[1])
        if not match:
            continue
        text_lines = [line.rstrip() for line in lines[2:]]
        if clean:
            text = clean_text(" ".join(text_lines))
        else:
            text = "\n".join(text_lines).strip()
        if not text:
            continue
        start = from_srt_time(match.group(1))
        segments.append(Segment(time=format_timestamp(start), text=text))

    return segments


def format_srt(
    segments: list[Segment], default_duration: int = DEFAULT_SEGMENT_SECONDS
) -> str:
    """Render segments as SRT.

    A segment ends where the next one starts; when the next one does not start
    later (or there is none) it lasts ``default_duration`` seconds. Segments
    without text are left out, since SRT cannot represent them.
    """
    timed = []
    for seg in segments:
        if not seg.text.strip():
            continue
        try:
            timed.append((parse_timestamp(seg.time), seg.text))
        except ValueError:
            logger.warning(f"Skipping segment with invalid time {seg.time!r}")

    blocks = []
    for i, (start, text) in enumerate(timed):
        end = start + default_duration
        if i + 1 < len(timed) and timed[i + 1][0] > start:
            end = timed[i + 1][0]
        blocks.append(
            f"{i + 1}\n{to_srt_time(start)} --> {to_srt_time(end)}\n{text}"
        )

    if not blocks:
        return ""
    return "\n\n".join(blocks) + "\n"


def parse_timestamped_text(content: str) -> list[Segment]:
    """Parse the inline "(0:02) text (0:22) more text" representation."""
    segments = []
    for match in _TIMESTAMPED_RE.finditer(content or ""):
        text = match.group(2).strip()
        if text:
            segments.append(Segment(time=match.group(1), text=text))
    return segments


def format_timestamped_text(segments: list[Segment]) -> str:
    return " ".join(f"({seg.time}) {seg.text}" for seg in segments)


def out_of_order_indices(segments: list[Segment]) -> list[int]:
    """Indices of segments that start earlier than their predecessor."""
    indices = []
    previous = None
    for i, seg in enumerate(segments):
        try:
            current = parse_timestamp(seg.time)
        except ValueError:
            continue
        if previous is not None and current < previous:
            indices.append(i)
        previous = current
    return indices
