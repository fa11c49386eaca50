"""Microsoft Graph meeting transcript extractor.

``extract`` lists call records started since a given time and their
``transcripts_v2`` entries.  A failure listing call records propagates
(fatal for the run); a call record whose transcripts cannot be listed is
logged and skipped.  ``fetch`` reads one transcript's WEBVTT content and
online-meeting details and raises :class:`ExtractionError` on failure, so
the orchestrator counts it against that transcript.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import structlog

from knowledge_base.interfaces.extractor import ITranscriptExtractor
from knowledge_base.mappers.microsoft import meeting_from_graph, transcript_from_graph
from knowledge_base.models.ingest import RawTranscript, TranscriptItem
from knowledge_base.providers.extractors.graph_client import GraphClient
from knowledge_base.utils.errors import ExtractionError

logger = structlog.get_logger(logger_name=__name__)


def _graph_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class GraphTranscriptExtractor(ITranscriptExtractor):
    """Lists meeting transcripts and fetches their VTT content and meeting details."""

    def __init__(self, graph: GraphClient) -> None:
        self._graph = graph

    async def extract(self, **options: Any) -> list[RawTranscript]:
        since: datetime | None = options.get("since")
        transcripts = await self._list_transcripts(since)
        logger.info("graph_transcripts_listed", count=len(transcripts))
        return transcripts

    async def fetch(self, transcript: RawTranscript) -> TranscriptItem:
        meeting_path = (
            f"/users/{transcript.meeting_organizer_id}/onlineMeetings/{transcript.meeting_id}"
        )
        vtt = await self._graph.get_text(
            f"{meeting_path}/transcripts/{transcript.id}/content", accept="text/vtt"
        )
        response = await self._graph.get_json(
            meeting_path,
            params={"$select": "id,subject,startDateTime,endDateTime,attendees"},
        )
        try:
            meeting = meeting_from_graph(response)
        except KeyError as exc:
            raise ExtractionError(
                message=f"Meeting details for transcript {transcript.id} lack field {exc}",
                provider_name="graph",
            ) from exc
        return TranscriptItem(transcript=transcript, vtt_content=vtt, meeting=meeting)

    async def _list_transcripts(self, since: datetime | None) -> list[RawTranscript]:
        params: dict[str, str] | None = None
        if since is not None:
            params = {
                "$filter": f"startDateTime ge {_graph_timestamp(since)}",
                "$orderby": "startDateTime desc",
            }

        transcripts: list[RawTranscript] = []
        async for records in self._graph.iter_pages("/communications/callRecords", params=params):
            for record in records:
                try:
                    response = await self._graph.get_json(
                        f"/communications/callRecords/{record['id']}/transcripts_v2"
                    )
                except ExtractionError as exc:
                    logger.warning(
                        "graph_call_record_transcripts_failed",
                        call_record_id=record.get("id"),
                        error=str(exc),
                    )
                    continue
                transcripts.extend(
                    transcript_from_graph(item, record) for item in response.get("value") or []
                )
        return transcripts
