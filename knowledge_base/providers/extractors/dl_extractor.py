"""Microsoft Graph distribution-list extractor.

Distribution lists are mail-enabled, non-security groups.  Members are
resolved transitively (nested groups flattened) and only user objects are
kept.  A failed member lookup yields an empty roster for that list rather
than failing the run.
"""

from __future__ import annotations

from typing import Any

import structlog

from knowledge_base.interfaces.extractor import IExtractor
from knowledge_base.mappers.microsoft import distribution_list_from_graph, member_from_graph
from knowledge_base.models.ingest import RawDistributionList, RawDLMember
from knowledge_base.providers.extractors.graph_client import GraphClient
from knowledge_base.utils.errors import ExtractionError

logger = structlog.get_logger(logger_name=__name__)

_USER_ODATA_TYPE = "#microsoft.graph.user"


class GraphDistributionListExtractor(IExtractor[RawDistributionList]):
    """Extracts every distribution list with its transitive user members."""

    def __init__(self, graph: GraphClient) -> None:
        self._graph = graph

    async def extract(self, **options: Any) -> list[RawDistributionList]:
        lists: list[RawDistributionList] = []
        params = {
            "$filter": "mailEnabled eq true and securityEnabled eq false",
            "$select": "id,displayName,mail,description",
        }
        async for groups in self._graph.iter_pages("/groups", params=params):
            for group in groups:
                try:
                    members = await self._fetch_members(group["id"])
                except ExtractionError as exc:
                    logger.warning("graph_dl_members_failed", group_id=group["id"], error=str(exc))
                    members = []
                lists.append(distribution_list_from_graph(group, members))

        logger.info("graph_distribution_lists_fetched", count=len(lists))
        return lists

    async def _fetch_members(self, group_id: str) -> list[RawDLMember]:
        members: list[RawDLMember] = []
        async for page in self._graph.iter_pages(
            f"/groups/{group_id}/transitiveMembers",
            params={"$select": "id,displayName,mail,jobTitle"},
        ):
            members.extend(
                member_from_graph(entry)
                for entry in page
                if entry.get("@odata.type") == _USER_ODATA_TYPE
            )
        return members
