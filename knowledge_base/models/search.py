"""Search request / result models shared by every vector store backend."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from knowledge_base.models.document import KnowledgeDocument, SourceType

# Metadata fields that support equality filtering, in translation order.
EQUALITY_FILTER_FIELDS: tuple[str, ...] = (
    "source_type",
    "meeting_subject",
    "dl_name",
    "pdf_filename",
)

# Metadata field the ``date_from`` / ``date_to`` range applies to.
DATE_FILTER_FIELD = "meeting_date"


class SearchFilters(BaseModel):
    """Optional metadata constraints for search and delete.

    Equality constraints apply to nested metadata fields.  ``date_from`` /
    ``date_to`` bound ``meeting_date`` (inclusive, compared as ISO strings)
    and are honoured by search only; delete ignores them.
    """

    model_config = ConfigDict(frozen=True)

    source_type: SourceType | None = None
    meeting_subject: str | None = None
    dl_name: str | None = None
    pdf_filename: str | None = None
    date_from: str | None = None
    date_to: str | None = None

    def equality_fields(self) -> dict[str, str]:
        """Return the set equality constraints as ``{field: value}``."""
        fields: dict[str, str] = {}
        for name in EQUALITY_FILTER_FIELDS:
            value = getattr(self, name)
            if value:
                fields[name] = value.value if isinstance(value, SourceType) else value
        return fields

    def is_empty(self) -> bool:
        """``True`` when no equality constraint is set."""
        return not self.equality_fields()


class SearchOptions(BaseModel):
    """Options for a similarity search.

    ``min_score`` has no default: the threshold is caller-specific and is
    applied as a post-filter on computed similarity by every backend.
    """

    model_config = ConfigDict(frozen=True)

    limit: int = Field(default=5, ge=1)
    min_score: float = Field(ge=0.0, le=1.0)
    filter: SearchFilters | None = None


class SearchResult(BaseModel):
    """A document returned by similarity search with its cosine-derived score."""

    model_config = ConfigDict(frozen=True)

    document: KnowledgeDocument
    score: float = Field(ge=0.0, le=1.0)
