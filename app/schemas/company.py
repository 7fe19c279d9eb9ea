"""
Pydantic schemas for Company API requests/responses.
"""

from typing import Any, Dict, List, Optional
from pydantic import Field, field_validator
from app.schemas.base import CamelModel, MAX_INT, reject_null


class CompanyCreateRequest(CamelModel):
    """Schema for creating a new company"""
    handle: str = Field(..., min_length=1, max_length=25)
    name: str = Field(..., min_length=1)
    description: str
    num_employees: Optional[int] = Field(None, ge=0, le=MAX_INT)
    logo_url: Optional[str] = Field(None, max_length=2048)

    class Config:
        extra = "forbid"


class CompanyUpdateRequest(CamelModel):
    """Partial update; the handle cannot be changed."""
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    num_employees: Optional[int] = Field(None, ge=0, le=MAX_INT)
    logo_url: Optional[str] = Field(None, max_length=2048)

    @field_validator("name", "description")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)

    class Config:
        extra = "forbid"


class CompanyFilter(CamelModel):
    """Optional search criteria for listing companies."""
    name: Optional[str] = Field(None, min_length=1)
    min_employees: Optional[int] = Field(None, ge=0, le=MAX_INT)
    max_employees: Optional[int] = Field(None, ge=0, le=MAX_INT)

    def criteria(self) -> Dict[str, Any]:
        """Supplied criteria keyed by their camelCase names."""
        return self.model_dump(by_alias=True, exclude_none=True)


class CompanyResponse(CamelModel):
    """Schema for company response"""
    handle: str
    name: str
    description: str
    num_employees: Optional[int] = None
    logo_url: Optional[str] = None


class CompanyJobResponse(CamelModel):
    """A job as listed on its company's page."""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[float] = None


class CompanyDetailResponse(CompanyResponse):
    """Company with the jobs it offers."""
    jobs: List[CompanyJobResponse] = []
