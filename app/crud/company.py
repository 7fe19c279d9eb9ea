"""
CRUD operations for companies.

Statements are raw parameterized SQL executed through the session; searches
and partial updates are built by app.core.sql.
"""

from typing import Any, Dict, List
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database import run_query, dialect_name
from app.core.exceptions import BadRequestError, NotFoundError
from app.core.logging_config import get_logger
from app.core.sql import sql_for_partial_update, sql_for_filtered_companies
from app.schemas.company import CompanyCreateRequest, CompanyFilter

logger = get_logger(__name__)

COMPANY_COLUMNS = "handle, name, description, num_employees, logo_url"

# API field -> column, for fields whose names differ
JS_TO_SQL = {
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
}


def create(db: Session, company_data: CompanyCreateRequest) -> Dict[str, Any]:
    """
    Create a company.

    Args:
        db: Database session
        company_data: Validated company creation data

    Returns:
        The new company row

    Raises:
        BadRequestError: If the handle or name is already taken
    """
    duplicate = run_query(
        db,
        "SELECT handle FROM companies WHERE handle = $1",
        [company_data.handle]
    ).first()
    if duplicate:
        raise BadRequestError(f"Duplicate company: {company_data.handle}")

    try:
        row = run_query(
            db,
            f"""INSERT INTO companies ({COMPANY_COLUMNS})
                VALUES ($1, $2, $3, $4, $5)
                RETURNING {COMPANY_COLUMNS}""",
            [
                company_data.handle,
                company_data.name,
                company_data.description,
                company_data.num_employees,
                company_data.logo_url,
            ]
        ).mappings().one()
        db.commit()
    except IntegrityError:
        db.rollback()
        taken = run_query(
            db,
            "SELECT handle FROM companies WHERE handle = $1",
            [company_data.handle]
        ).first()
        if taken:
            raise BadRequestError(f"Duplicate company: {company_data.handle}")
        raise BadRequestError(f"Duplicate company name: {company_data.name}")

    logger.info(f"Created company {row['handle']}")
    return dict(row)


def find_all(db: Session, filters: CompanyFilter) -> List[Dict[str, Any]]:
    """
    List companies, optionally narrowed by name / employee-count criteria.

    An empty match is an empty list, not an error.
    """
    criteria = filters.criteria()
    if criteria:
        sql, values = sql_for_filtered_companies(criteria, dialect_name(db))
    else:
        sql, values = f"SELECT {COMPANY_COLUMNS} FROM companies", []

    result = run_query(db, f"{sql} ORDER BY name", values)
    return [dict(row) for row in result.mappings()]


def get(db: Session, handle: str) -> Dict[str, Any]:
    """
    Get a company together with its jobs.

    Raises:
        NotFoundError: If no company has this handle
    """
    company = run_query(
        db,
        f"SELECT {COMPANY_COLUMNS} FROM companies WHERE handle = $1",
        [handle]
    ).mappings().first()
    if not company:
        raise NotFoundError(f"No company: {handle}")

    jobs = run_query(
        db,
        """SELECT id, title, salary, equity
           FROM jobs
           WHERE company_handle = $1
           ORDER BY id""",
        [handle]
    ).mappings().all()

    return {**company, "jobs": [dict(job) for job in jobs]}


def update(db: Session, handle: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Partially update a company with `data`.

    Only the supplied fields change. Data can include
    {name, description, numEmployees, logoUrl}.

    Raises:
        BadRequestError: If data is empty or the new name is taken
        NotFoundError: If no company has this handle
    """
    set_cols, values = sql_for_partial_update(data, JS_TO_SQL)
    handle_idx = len(values) + 1

    sql = f"""UPDATE companies
              SET {set_cols}
              WHERE handle = ${handle_idx}
              RETURNING {COMPANY_COLUMNS}"""
    try:
        row = run_query(db, sql, [*values, handle]).mappings().first()
    except IntegrityError:
        db.rollback()
        raise BadRequestError(f"Duplicate company name: {data.get('name')}")

    if not row:
        db.rollback()
        raise NotFoundError(f"No company: {handle}")

    db.commit()
    logger.info(f"Updated company {handle}: {', '.join(data)}")
    return dict(row)


def remove(db: Session, handle: str) -> None:
    """
    Delete a company (its jobs go with it).

    Raises:
        NotFoundError: If no company has this handle
    """
    row = run_query(
        db,
        "DELETE FROM companies WHERE handle = $1 RETURNING handle",
        [handle]
    ).first()
    if not row:
        db.rollback()
        raise NotFoundError(f"No company: {handle}")

    db.commit()
    logger.info(f"Deleted company {handle}")
