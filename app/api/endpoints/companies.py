import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import CurrentUser, ensure_admin
from app.core.exceptions import BadRequestError
from app.crud import company as company_crud
from app.schemas.base import MAX_INT
from app.schemas.company import (
    CompanyCreateRequest,
    CompanyUpdateRequest,
    CompanyFilter,
    CompanyResponse,
    CompanyDetailResponse,
)

router = APIRouter(prefix="/companies", tags=["Companies"])
logger = logging.getLogger(__name__)


@router.post("", status_code=201, response_model=CompanyResponse)
def create_company(
    request: CompanyCreateRequest,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(ensure_admin)
):
    """
    Create a company.

    Authorization required: admin
    """
    company = company_crud.create(db, request)
    logger.info(f"Admin {admin.username} created company {company['handle']}")
    return company


@router.get("", response_model=list[CompanyResponse])
def list_companies(
    name: Optional[str] = Query(None, min_length=1),
    min_employees: Optional[int] = Query(None, alias="minEmployees", ge=0, le=MAX_INT),
    max_employees: Optional[int] = Query(None, alias="maxEmployees", ge=0, le=MAX_INT),
    db: Session = Depends(get_db)
):
    """
    List companies, optionally filtered.

    Args:
        name: Case-insensitive substring of the company name
        minEmployees: Minimum number of employees
        maxEmployees: Maximum number of employees

    An empty list is returned when nothing matches.
    """
    if min_employees is not None and max_employees is not None and min_employees > max_employees:
        raise BadRequestError("minEmployees cannot be greater than maxEmployees")

    filters = CompanyFilter(
        name=name,
        min_employees=min_employees,
        max_employees=max_employees
    )
    return company_crud.find_all(db, filters)


@router.get("/{handle}", response_model=CompanyDetailResponse)
def get_company(handle: str, db: Session = Depends(get_db)):
    """Retrieve a company and its jobs."""
    return company_crud.get(db, handle)


@router.patch("/{handle}", response_model=CompanyResponse)
def update_company(
    handle: str,
    request: CompanyUpdateRequest,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(ensure_admin)
):
    """
    Update some of a company's fields: name, description, numEmployees, logoUrl.

    Authorization required: admin
    """
    data = request.model_dump(by_alias=True, exclude_unset=True)
    return company_crud.update(db, handle, data)


@router.delete("/{handle}")
def delete_company(
    handle: str,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(ensure_admin)
):
    """
    Delete a company and its jobs.

    Authorization required: admin
    """
    company_crud.remove(db, handle)
    return {"deleted": handle}
