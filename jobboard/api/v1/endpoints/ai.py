from typing import Any

from fastapi import APIRouter, Depends

from jobboard.api.deps import get_description_generator
from jobboard.core.auth import get_current_user
from jobboard.schemas.auth import CurrentUser
from jobboard.schemas.job_post import GenerateDescriptionRequest
from jobboard.services.description_service import (
    DescriptionGenerator,
    GenerateDescriptionResult,
)

router = APIRouter()


@router.post("/job-description", response_model=GenerateDescriptionResult)
async def generate_job_description(
    *,
    request_in: GenerateDescriptionRequest,
    current_user: CurrentUser = Depends(get_current_user),
    generator: DescriptionGenerator = Depends(get_description_generator),
) -> Any:
    """
    Draft a job description for the posting form.
    """
    return await generator.generate(
        request_in.job_title,
        company=request_in.company,
        location=request_in.location,
        job_type=request_in.job_type.value if request_in.job_type else None,
    )
