import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import CurrentUser, ensure_admin
from app.crud import job as job_crud
from app.schemas.base import MAX_INT
from app.schemas.job import JobCreateRequest, JobUpdateRequest, JobFilter, JobResponse

router = APIRouter(prefix="/jobs", tags=["Jobs"])
logger = logging.getLogger(__name__)


@router.post("", status_code=201, response_model=JobResponse)
def create_job(
    request: JobCreateRequest,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(ensure_admin)
):
    """
    Create a job posting for an existing company.

    Authorization required: admin
    """
    return job_crud.create(db, request)


@router.get("/{job_id}", response_model=JobResponse)
def get_job(job_id: int, db: Session = Depends(get_db)):
    """Retrieve a job by ID."""
    return job_crud.get(db, job_id)


@router.get("", response_model=list[JobResponse])
def list_jobs(
    title: Optional[str] = Query(None, min_length=1),
    min_salary: Optional[int] = Query(None, alias="minSalary", ge=0, le=MAX_INT),
    has_equity: Optional[bool] = Query(None, alias="hasEquity"),
    db: Session = Depends(get_db)
):
    """
    List jobs with optional filtering.

    Args:
        title: Case-insensitive substring of the job title
        minSalary: Minimum salary
        hasEquity: If true, only jobs offering non-zero equity;
            false is the same as not filtering
    """
    filters = JobFilter(title=title, min_salary=min_salary, has_equity=has_equity)
    return job_crud.find_all(db, filters)


@router.patch("/{job_id}", response_model=JobResponse)
def update_job(
    job_id: int,
    request: JobUpdateRequest,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(ensure_admin)
):
    """
    Update a job's title, salary or equity.

    Authorization required: admin
    """
    data = request.model_dump(by_alias=True, exclude_unset=True)
    return job_crud.update(db, job_id, data)


@router.delete("/{job_id}")
def delete_job(
    job_id: int,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(ensure_admin)
):
    """
    Delete a job by ID.

    Authorization required: admin
    """
    job_crud.remove(db, job_id)
    return {"deleted": job_id}
