"""
Job Service - the job board.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Union

from supabase import Client

from microblog.db.supabase import TABLES

logger = logging.getLogger(__name__)

ALL_TYPES = "All"


def parse_timestamp(value: Union[str, datetime]) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_posted_date(created_at: Union[str, datetime], now: Optional[datetime] = None) -> str:
    """Human posting age: Today, Yesterday, 3 days ago, 2 weeks ago, or 'Mar 4'."""
    posted = parse_timestamp(created_at)
    now = now or datetime.now(timezone.utc)
    days = (now - posted).days

    if days <= 0:
        return "Today"
    if days == 1:
        return "Yesterday"
    if days < 7:
        return f"{days} days ago"
    if days < 30:
        weeks = days // 7
        return f"{weeks} {'week' if weeks == 1 else 'weeks'} ago"
    return f"{posted.strftime('%b')} {posted.day}"


class JobService:

    def __init__(self, client: Client):
        self.client = client

    def list_jobs(self, job_type: Optional[str] = None, now: Optional[datetime] = None) -> dict:
        """
        Newest job is featured, the rest are listed (optionally one type).

        A failed read leaves the board empty.
        """
        try:
            jobs = (
                self.client.table(TABLES["jobs"])
                .select("*")
                .order("created_at", desc=True)
                .execute()
                .data or []
            )
        except Exception as e:
            logger.error("Error fetching jobs: %s", e)
            return {"featured": None, "jobs": []}

        for job in jobs:
            if job.get("created_at"):
                job["posted"] = format_posted_date(job["created_at"], now)

        featured, rest = (jobs[0], jobs[1:]) if jobs else (None, [])
        if job_type and job_type != ALL_TYPES:
            rest = [job for job in rest if job.get("type") == job_type]
        return {"featured": featured, "jobs": rest}
