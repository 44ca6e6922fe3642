from jobboard.models.job_post import JobPost, JobStatus, JobType

__all__ = ["JobPost", "JobStatus", "JobType"]
