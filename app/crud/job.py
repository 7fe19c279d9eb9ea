"""
CRUD operations for jobs.

Implements the Repository pattern for the jobs table using raw
parameterized SQL; searches and partial updates come from app.core.sql.
"""

from typing import Any, Dict, List
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database import run_query, dialect_name
from app.core.exceptions import BadRequestError, NotFoundError
from app.core.logging_config import get_logger
from app.core.sql import sql_for_partial_update, sql_for_filtered_jobs
from app.schemas.job import JobCreateRequest, JobFilter

logger = get_logger(__name__)

JOB_COLUMNS = "id, title, salary, equity, company_handle"

JS_TO_SQL = {
    "companyHandle": "company_handle",
}


def create(db: Session, job_data: JobCreateRequest) -> Dict[str, Any]:
    """
    Create a new job.

    Args:
        db: Database session
        job_data: Validated job creation data

    Returns:
        The new job row, including its generated id

    Raises:
        NotFoundError: If the company does not exist
        BadRequestError: If the company already has a job with this title
    """
    company = run_query(
        db,
        "SELECT handle FROM companies WHERE handle = $1",
        [job_data.company_handle]
    ).first()
    if not company:
        raise NotFoundError(f"No company: {job_data.company_handle}")

    duplicate = run_query(
        db,
        "SELECT id FROM jobs WHERE title = $1 AND company_handle = $2",
        [job_data.title, job_data.company_handle]
    ).first()
    if duplicate:
        raise BadRequestError(f"{job_data.title} already exists at {job_data.company_handle}")

    try:
        row = run_query(
            db,
            f"""INSERT INTO jobs (title, salary, equity, company_handle)
                VALUES ($1, $2, $3, $4)
                RETURNING {JOB_COLUMNS}""",
            [job_data.title, job_data.salary, job_data.equity, job_data.company_handle]
        ).mappings().one()
        db.commit()
    except IntegrityError:
        # the company was deleted after the existence check
        db.rollback()
        raise NotFoundError(f"No company: {job_data.company_handle}")

    logger.info(f"Created job {row['id']}: {row['title']} at {row['company_handle']}")
    return dict(row)


def find_all(db: Session, filters: JobFilter) -> List[Dict[str, Any]]:
    """
    List jobs, optionally filtered by title, minimum salary and equity.

    Returns:
        Matching jobs ordered by title; [] when nothing matches
    """
    criteria = filters.criteria()
    if criteria:
        sql, values = sql_for_filtered_jobs(criteria, dialect_name(db))
    else:
        sql, values = f"SELECT {JOB_COLUMNS} FROM jobs", []

    result = run_query(db, f"{sql} ORDER BY title, id", values)
    return [dict(row) for row in result.mappings()]


def get(db: Session, job_id: int) -> Dict[str, Any]:
    """
    Retrieve a job by its ID.

    Raises:
        NotFoundError: If the job does not exist
    """
    row = run_query(
        db,
        f"SELECT {JOB_COLUMNS} FROM jobs WHERE id = $1",
        [job_id]
    ).mappings().first()
    if not row:
        raise NotFoundError(f"No job: {job_id}")

    return dict(row)


def update(db: Session, job_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Partially update a job.

    Data can include {title, salary, equity}.

    Raises:
        BadRequestError: If data is empty
        NotFoundError: If the job does not exist
    """
    set_cols, values = sql_for_partial_update(data, JS_TO_SQL)
    id_idx = len(values) + 1

    sql = f"""UPDATE jobs
              SET {set_cols}
              WHERE id = ${id_idx}
              RETURNING {JOB_COLUMNS}"""
    row = run_query(db, sql, [*values, job_id]).mappings().first()
    if not row:
        db.rollback()
        raise NotFoundError(f"No job: {job_id}")

    db.commit()
    logger.info(f"Updated job {job_id}: {', '.join(data)}")
    return dict(row)


def remove(db: Session, job_id: int) -> None:
    """
    Delete a job by ID.

    Raises:
        NotFoundError: If the job does not exist
    """
    row = run_query(db, "DELETE FROM jobs WHERE id = $1 RETURNING id", [job_id]).first()
    if not row:
        db.rollback()
        raise NotFoundError(f"No job: {job_id}")

    db.commit()
    logger.info(f"Deleted job {job_id}")
