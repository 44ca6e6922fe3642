from fastapi import HTTPException, status


class CacheUnavailable(Exception):
    """The key-value store could not serve an operation."""


class BackingStoreError(Exception):
    """A query against the relational store failed."""


class JobPostNotFound(HTTPException):
    def __init__(self, job_post_id: str):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Job posting with id {job_post_id} not found",
        )


class InvalidJobPostData(HTTPException):
    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
        )


class AuthenticationRequired(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )


class DuplicateEmail(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="An account with this email already exists",
        )


class InvalidCredentials(HTTPException):
    def __init__(self, detail: str = "Invalid credentials"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class SignUpFailed(HTTPException):
    def __init__(self, detail: str = "Sign up failed"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
