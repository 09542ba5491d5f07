"""
Job Routes

GET /jobs - Job board (type=Full-time|Part-time|Contract|Remote|All)
"""

from typing import Optional

from fastapi import APIRouter, Depends
from supabase import Client

from microblog.db.supabase import get_db
from microblog.schemas.schemas import JobBoardResponse
from microblog.services.job_service import JobService

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.get("", response_model=JobBoardResponse)
async def list_jobs(type: Optional[str] = None, db: Client = Depends(get_db)):
    """Newest job is featured; an unreadable board is simply empty."""
    return JobService(db).list_jobs(type)
