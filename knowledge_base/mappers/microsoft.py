"""Pure mappers from Microsoft Graph payloads to internal shapes.

Graph uses camelCase keys and leaves many fields null or absent; these
functions normalise both at the boundary so nothing downstream touches a
raw Graph dict.  No I/O happens here.
"""

from __future__ import annotations

from typing import Any

from knowledge_base.models.ingest import (
    RawDistributionList,
    RawDLMember,
    RawMeetingDetails,
    RawTranscript,
)

UNTITLED_MEETING = "Untitled Meeting"


def transcript_from_graph(item: dict[str, Any], call_record: dict[str, Any]) -> RawTranscript:
    """Map a ``transcripts_v2`` item of *call_record* to :class:`RawTranscript`."""
    organizer = ((call_record.get("organizer") or {}).get("user") or {}).get("id") or ""
    return RawTranscript(
        id=item["id"],
        meeting_id=call_record["id"],
        meeting_organizer_id=organizer,
        created_at=item.get("createdDateTime"),
    )


def meeting_from_graph(response: dict[str, Any]) -> RawMeetingDetails:
    """Map an ``onlineMeetings`` response to :class:`RawMeetingDetails`."""
    attendees = [
        ((attendee or {}).get("emailAddress") or {}).get("name") or ""
        for attendee in response.get("attendees") or []
    ]
    return RawMeetingDetails(
        id=response["id"],
        subject=response.get("subject") or UNTITLED_MEETING,
        start_time=response.get("startDateTime") or "",
        end_time=response.get("endDateTime") or "",
        attendees=attendees,
    )


def meeting_to_metadata(meeting: RawMeetingDetails) -> dict[str, Any]:
    """Return the meeting-level transcript metadata fields for the parser."""
    return {
        "meeting_subject": meeting.subject or UNTITLED_MEETING,
        "meeting_date": meeting.start_time,
        "meeting_id": meeting.id,
        "attendees": list(meeting.attendees),
    }


def distribution_list_from_graph(
    response: dict[str, Any], members: list[RawDLMember] | None = None
) -> RawDistributionList:
    """Map a ``groups`` item (plus its resolved *members*) to :class:`RawDistributionList`."""
    return RawDistributionList(
        id=response["id"],
        display_name=response.get("displayName") or "",
        mail=response.get("mail") or "",
        description=response.get("description") or None,
        members=list(members or []),
    )


def member_from_graph(response: dict[str, Any]) -> RawDLMember:
    """Map a ``transitiveMembers`` user entry to :class:`RawDLMember`."""
    return RawDLMember(
        id=response["id"],
        display_name=response.get("displayName") or "",
        mail=response.get("mail") or "",
        job_title=response.get("jobTitle") or None,
    )
