from fastapi import Request

from jobboard.cache.client import RedisCache
from jobboard.services.description_service import DescriptionGenerator
from jobboard.services.job_post_service import JobPostService


def get_job_post_service(request: Request) -> JobPostService:
    return request.app.state.job_post_service


def get_cache(request: Request) -> RedisCache:
    return request.app.state.cache


def get_description_generator(request: Request) -> DescriptionGenerator:
    return request.app.state.description_generator
