"""Typed result returned across the service boundary.

A ``ServiceResult`` is either ``{success: True, data}`` or
``{success: False, error}``; the tag decides which field is present.
"""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, model_validator

T = TypeVar("T")


class ServiceResult(BaseModel, Generic[T]):
    """Success/failure envelope produced by every growth service query.

    Example:
        result = ServiceResult.ok([record])
        if result.success:
            render(result.data)

        ServiceResult.fail("Failed to retrieve marketing dashboard data")
    """

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def check_tag(self) -> "ServiceResult[T]":
        """Failures carry an error message and no data; successes never carry an error."""
        if self.success and self.error is not None:
            raise ValueError("successful result must not carry an error")
        if not self.success:
            if not self.error:
                raise ValueError("failed result requires an error message")
            if self.data is not None:
                raise ValueError("failed result must not carry data")
        return self

    @classmethod
    def ok(cls, data: T) -> "ServiceResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "ServiceResult[T]":
        return cls(success=False, error=error)
