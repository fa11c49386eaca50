"""WEBVTT meeting transcript parser.

Turns caption cues into time-windowed, speaker-attributed
:class:`~knowledge_base.models.document.KnowledgeDocument` chunks.

Expected input::

    WEBVTT

    00:00:00.000 --> 00:00:05.000
    <v Speaker Name>Hello everyone, let's get started.</v>

Cues are grouped into windows of four minutes measured from the first cue
of each window.  A cue is never split, so one long cue can make a window
run past four minutes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

import structlog

from knowledge_base.models.document import KnowledgeDocument, TranscriptMetadata

logger = structlog.get_logger(logger_name=__name__)

UNKNOWN_SPEAKER = "Unknown"
CHUNK_WINDOW_MS = 4 * 60 * 1000

# HH:MM:SS.mmm, with MM:SS.mmm also accepted.
_TIMESTAMP = r"(?:\d{2}:)?\d{2}:\d{2}\.\d{3}"
_CUE_RE = re.compile(rf"({_TIMESTAMP})\s*-->\s*({_TIMESTAMP})")
_VOICE_RE = re.compile(r"<v\s+([^>]+)>(.+?)</v>")


@dataclass(frozen=True)
class Utterance:
    start_time: str
    end_time: str
    speaker: str
    text: str


def timestamp_to_ms(timestamp: str) -> int:
    """Convert ``HH:MM:SS.mmm`` (or ``MM:SS.mmm``) to milliseconds."""
    clock, millis = timestamp.split(".")
    parts = [int(p) for p in clock.split(":")]
    if len(parts) == 2:
        parts.insert(0, 0)
    hours, minutes, seconds = parts
    return ((hours * 60 + minutes) * 60 + seconds) * 1000 + int(millis)


def parse_vtt(vtt_content: str) -> list[Utterance]:
    """Parse WEBVTT text into an ordered list of utterances.

    Text lines following a cue header are collected until a blank line or
    the next cue header and joined with single spaces.  A ``<v Name>``
    voice span supplies the speaker; without one the speaker is
    ``"Unknown"`` and the raw text is kept.
    """
    utterances: list[Utterance] = []
    lines = vtt_content.splitlines()
    i = 0
    while i < len(lines):
        match = _CUE_RE.search(lines[i].strip())
        i += 1
        if match is None:
            continue

        text_lines: list[str] = []
        while i < len(lines) and lines[i].strip() and "-->" not in lines[i]:
            text_lines.append(lines[i].strip())
            i += 1
        raw_text = " ".join(text_lines)

        voice = _VOICE_RE.search(raw_text)
        if voice is not None:
            speaker, text = voice.group(1).strip(), voice.group(2).strip()
        else:
            speaker, text = UNKNOWN_SPEAKER, raw_text
        utterances.append(Utterance(match.group(1), match.group(2), speaker, text))

    return utterances


def group_utterances(
    utterances: list[Utterance], window_ms: int = CHUNK_WINDOW_MS
) -> list[list[Utterance]]:
    """Group *utterances* into consecutive windows of *window_ms*.

    A new group starts when an utterance begins more than ``window_ms`` after
    the first utterance of the current group.
    """
    groups: list[list[Utterance]] = []
    current: list[Utterance] = []
    group_start_ms = 0

    for utterance in utterances:
        start_ms = timestamp_to_ms(utterance.start_time)
        if current and start_ms - group_start_ms > window_ms:
            groups.append(current)
            current = []
        if not current:
            group_start_ms = start_ms
        current.append(utterance)

    if current:
        groups.append(current)
    return groups


class TranscriptParser:
    """Converts one meeting's WEBVTT transcript into knowledge documents."""

    def __init__(self, window_ms: int = CHUNK_WINDOW_MS) -> None:
        self._window_ms = window_ms

    def parse(
        self,
        vtt_content: str,
        meeting_subject: str,
        meeting_date: str,
        meeting_id: str,
        attendees: list[str] | None = None,
    ) -> list[KnowledgeDocument]:
        """Parse *vtt_content* into one document per time window.

        Returns an empty list when the transcript has no cues.
        """
        utterances = parse_vtt(vtt_content)
        if not utterances:
            logger.info("transcript_no_utterances", meeting_id=meeting_id)
            return []

        documents: list[KnowledgeDocument] = []
        for group in group_utterances(utterances, self._window_ms):
            content = "\n".join(f"[{u.speaker}] ({u.start_time}): {u.text}" for u in group)
            metadata = TranscriptMetadata(
                meeting_subject=meeting_subject,
                meeting_date=meeting_date,
                meeting_id=meeting_id,
                speakers=list(dict.fromkeys(u.speaker for u in group)),
                timestamp_start=group[0].start_time,
                timestamp_end=group[-1].end_time,
                attendees=list(attendees or []),
            )
            documents.append(KnowledgeDocument(content=content, metadata=metadata))

        logger.debug(
            "transcript_parsed",
            meeting_id=meeting_id,
            utterances=len(utterances),
            chunks=len(documents),
        )
        return documents
