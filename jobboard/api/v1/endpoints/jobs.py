import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from jobboard.api.deps import get_job_post_service
from jobboard.core.auth import get_current_user
from jobboard.core.exceptions import JobPostNotFound
from jobboard.models.job_post import JobStatus, JobType
from jobboard.schemas.auth import CurrentUser
from jobboard.schemas.job_post import (
    JobPostCreate,
    JobPostFilters,
    JobPostResponse,
    JobPostUpdate,
    PaginatedJobPosts,
)
from jobboard.schemas.response import (
    CreateResponse,
    DeleteResponse,
    Messages,
    PaginatedResponse,
    SuccessResponse,
    UpdateResponse,
)
from jobboard.services.job_post_service import JobPostService

logger = logging.getLogger(__name__)

router = APIRouter()


def get_filters(
    type: Optional[JobType] = Query(None, description="Filter by job type"),
    status: Optional[JobStatus] = Query(None, description="Filter by status"),
    company: Optional[str] = Query(None, description="Company name contains"),
    location: Optional[str] = Query(None, description="Location contains"),
    search: Optional[str] = Query(
        None, description="Search in title, description and company"
    ),
) -> JobPostFilters:
    return JobPostFilters(
        type=type, status=status, company=company, location=location, search=search
    )


def _paginated_response(result: PaginatedJobPosts) -> Any:
    if result.error:
        logger.warning(f"Serving empty job postings page: {result.error}")
        body = PaginatedResponse[JobPostResponse](
            success=False,
            message=Messages.JOB_POSTS_UNAVAILABLE,
            data=[],
            errors=[result.error],
            pagination=result.pagination,
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=body.model_dump(mode="json"),
        )
    return PaginatedResponse[JobPostResponse](
        message=Messages.JOB_POSTS_RETRIEVED,
        data=result.data,
        pagination=result.pagination,
    )


@router.get("/", response_model=PaginatedResponse[JobPostResponse])
async def read_job_posts(
    page: Optional[int] = Query(None, description="Page number, clamped to >= 1"),
    limit: Optional[int] = Query(None, description="Page size, clamped to [1, 50]"),
    filters: JobPostFilters = Depends(get_filters),
    service: JobPostService = Depends(get_job_post_service),
) -> Any:
    """
    Public job postings, newest first. Only active postings unless a status
    filter is given.
    """
    result = await service.get_page(filters, page=page, limit=limit)
    return _paginated_response(result)


@router.get("/mine", response_model=PaginatedResponse[JobPostResponse])
async def read_my_job_posts(
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    filters: JobPostFilters = Depends(get_filters),
    current_user: CurrentUser = Depends(get_current_user),
    service: JobPostService = Depends(get_job_post_service),
) -> Any:
    """
    The current user's job postings of any status.
    """
    result = await service.get_page(
        filters, page=page, limit=limit, owner_id=current_user.id
    )
    return _paginated_response(result)


@router.post(
    "/",
    response_model=CreateResponse[JobPostResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_job_post(
    *,
    job_post_in: JobPostCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: JobPostService = Depends(get_job_post_service),
) -> Any:
    job_post = await service.create_job_post(current_user.id, job_post_in)
    return CreateResponse(message=Messages.JOB_POST_CREATED, data=job_post)


@router.get("/{job_post_id}", response_model=SuccessResponse[JobPostResponse])
async def read_job_post(
    job_post_id: str,
    service: JobPostService = Depends(get_job_post_service),
) -> Any:
    job_post = await service.get_job_post(job_post_id)
    if job_post is None:
        raise JobPostNotFound(job_post_id)
    return SuccessResponse(message=Messages.DATA_RETRIEVED, data=job_post)


@router.put("/{job_post_id}", response_model=UpdateResponse[JobPostResponse])
async def update_job_post(
    *,
    job_post_id: str,
    job_post_in: JobPostUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    service: JobPostService = Depends(get_job_post_service),
) -> Any:
    """
    Update a job posting owned by the current user.
    """
    job_post = await service.update_job_post(job_post_id, current_user.id, job_post_in)
    return UpdateResponse(message=Messages.JOB_POST_UPDATED, data=job_post)


@router.patch(
    "/{job_post_id}/toggle-status", response_model=UpdateResponse[JobPostResponse]
)
async def toggle_job_post_status(
    job_post_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: JobPostService = Depends(get_job_post_service),
) -> Any:
    job_post = await service.toggle_job_post_status(job_post_id, current_user.id)
    return UpdateResponse(message=Messages.JOB_POST_STATUS_TOGGLED, data=job_post)


@router.delete("/{job_post_id}", response_model=DeleteResponse)
async def delete_job_post(
    job_post_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: JobPostService = Depends(get_job_post_service),
) -> Any:
    await service.delete_job_post(job_post_id, current_user.id)
    return DeleteResponse(message=Messages.JOB_POST_DELETED)
