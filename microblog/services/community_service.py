"""
Community Service - community listing and membership.
"""

import logging
from typing import Optional

from supabase import Client

from microblog.db.supabase import TABLES
from microblog.services import fixtures

logger = logging.getLogger(__name__)


class CommunityService:

    def __init__(self, client: Client):
        self.client = client

    def _members(self):
        return self.client.table(TABLES["community_members"])

    def list_communities(self, user_id: Optional[str]) -> dict:
        """
        All communities, biggest first, split into the ones the user has
        joined (mine) and the rest (discover).
        """
        try:
            communities = (
                self.client.table(TABLES["communities"])
                .select("*")
                .order("member_count", desc=True)
                .execute()
                .data or []
            )
        except Exception as e:
            logger.error("Error fetching communities: %s", e)
            discover = [dict(c, is_member=False) for c in fixtures.FALLBACK_COMMUNITIES]
            return {"discover": discover, "mine": [], "is_fallback": True}

        memberships = set()
        if user_id:
            try:
                rows = self._members().select("community_id").eq("user_id", user_id).execute().data or []
                memberships = {row["community_id"] for row in rows}
            except Exception as e:
                logger.error("Error fetching memberships: %s", e)

        discover, mine = [], []
        for community in communities:
            community = dict(community, is_member=community["id"] in memberships)
            (mine if community["is_member"] else discover).append(community)
        return {"discover": discover, "mine": mine, "is_fallback": False}

    def join_community(self, user_id: str, community_id: str) -> dict:
        try:
            existing = (
                self._members().select("id")
                .eq("community_id", community_id).eq("user_id", user_id)
                .execute()
            )
            if existing.data:
                return {"success": True, "message": "Already a member"}
            self._members().insert({"community_id": community_id, "user_id": user_id}).execute()
        except Exception as e:
            logger.error("Error joining community: %s", e)
            raise
        return {"success": True, "message": "Joined community"}

    def leave_community(self, user_id: str, community_id: str) -> dict:
        try:
            self._members().delete().eq("community_id", community_id).eq("user_id", user_id).execute()
        except Exception as e:
            logger.error("Error leaving community: %s", e)
            raise
        return {"success": True, "message": "Left community"}
