from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel

from jobboard.common.pagination import PaginationEnvelope

# Generic type for data payload
T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response schema with message support"""

    success: bool = True
    message: str
    data: Optional[T] = None
    errors: Optional[List[str]] = None
    meta: Optional[Dict[str, Any]] = None


class SuccessResponse(APIResponse[T]):
    """Success response with data"""

    success: bool = True
    message: str = "Operation completed successfully"


class ErrorResponse(APIResponse[None]):
    """Error response with error details"""

    success: bool = False
    message: str = "An error occurred"
    data: None = None


class CreateResponse(APIResponse[T]):
    """Response for create operations"""

    success: bool = True
    message: str = "Created successfully"


class UpdateResponse(APIResponse[T]):
    """Response for update operations"""

    success: bool = True
    message: str = "Updated successfully"


class DeleteResponse(APIResponse[None]):
    """Response for delete operations"""

    success: bool = True
    message: str = "Deleted successfully"
    data: None = None


class PaginatedResponse(APIResponse[List[T]]):
    """Response for paginated list operations"""

    success: bool = True
    message: str = "Data retrieved successfully"
    data: List[T] = []
    pagination: PaginationEnvelope


class Messages:
    # Job posting messages
    JOB_POST_CREATED = "Job posting created successfully"
    JOB_POST_UPDATED = "Job posting updated successfully"
    JOB_POST_DELETED = "Job posting deleted successfully"
    JOB_POST_STATUS_TOGGLED = "Job posting status updated successfully"
    JOB_POSTS_RETRIEVED = "Job postings retrieved successfully"
    JOB_POSTS_UNAVAILABLE = "Job postings are temporarily unavailable"

    # Authentication messages
    REGISTER_SUCCESS = "Registration successful, check your email to confirm"
    LOGIN_SUCCESS = "Login successful"
    LOGOUT_SUCCESS = "Logout successful"

    # General messages
    DATA_RETRIEVED = "Data retrieved successfully"
    SERVICE_UNAVAILABLE = "Service temporarily unavailable"
