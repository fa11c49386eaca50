"""Distribution-list parser: one roster document per list."""

from __future__ import annotations

from knowledge_base.models.document import DistributionListMetadata, KnowledgeDocument
from knowledge_base.models.ingest import RawDistributionList


class DistributionListParser:
    """Renders a distribution list and its members as a single document."""

    def parse(self, dl: RawDistributionList) -> KnowledgeDocument:
        roster = ", ".join(
            f"{m.display_name} ({m.job_title})" if m.job_title else m.display_name
            for m in dl.members
        )
        content = " ".join(
            [
                f"Distribution List: {dl.display_name} ({dl.mail}).",
                f"Description: {dl.description or 'No description'}.",
                f"Members ({len(dl.members)}): {roster or 'No members'}.",
            ]
        )
        return KnowledgeDocument(
            content=content,
            metadata=DistributionListMetadata(
                dl_name=dl.display_name,
                dl_email=dl.mail,
                dl_id=dl.id,
                member_count=len(dl.members),
            ),
        )
