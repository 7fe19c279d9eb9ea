from pydantic import Field, field_validator
from typing import Any, Dict, Optional
from app.schemas.base import CamelModel, MAX_INT, reject_null


class JobCreateRequest(CamelModel):
    """Schema for creating a new job"""
    title: str = Field(..., min_length=1)
    salary: Optional[int] = Field(None, ge=0, le=MAX_INT)
    equity: Optional[float] = Field(None, ge=0, le=1)
    company_handle: str = Field(..., min_length=1, max_length=25)

    class Config:
        extra = "forbid"


class JobUpdateRequest(CamelModel):
    """Partial update; id and companyHandle cannot be changed."""
    title: Optional[str] = Field(None, min_length=1)
    salary: Optional[int] = Field(None, ge=0, le=MAX_INT)
    equity: Optional[float] = Field(None, ge=0, le=1)

    @field_validator("title")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)

    class Config:
        extra = "forbid"


class JobFilter(CamelModel):
    """
    Optional search criteria for listing jobs.

    has_equity=False means the same as leaving it out: it does not
    restrict results to jobs without equity.
    """
    title: Optional[str] = Field(None, min_length=1)
    min_salary: Optional[int] = Field(None, ge=0, le=MAX_INT)
    has_equity: Optional[bool] = None

    def criteria(self) -> Dict[str, Any]:
        """Supplied criteria keyed by their camelCase names."""
        return self.model_dump(by_alias=True, exclude_none=True)


class JobResponse(CamelModel):
    """Schema for job response"""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[float] = None
    company_handle: str
