"""
CRUD operations for users and their job applications.
"""

from typing import Any, Dict, List, Union
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database import run_query
from app.core.exceptions import BadRequestError, NotFoundError, UnauthorizedError
from app.core.logging_config import get_logger
from app.core.security import get_password_hash, verify_password
from app.core.sql import sql_for_partial_update
from app.schemas.user import UserCreateRequest, UserRegisterRequest

logger = get_logger(__name__)

USER_COLUMNS = "username, first_name, last_name, email, is_admin"

JS_TO_SQL = {
    "firstName": "first_name",
    "lastName": "last_name",
    "isAdmin": "is_admin",
}


def authenticate(db: Session, username: str, password: str) -> Dict[str, Any]:
    """
    Check a username/password pair.

    Returns:
        The user row without the password hash

    Raises:
        UnauthorizedError: If the user is unknown or the password is wrong
    """
    row = run_query(
        db,
        f"SELECT {USER_COLUMNS}, password FROM users WHERE username = $1",
        [username]
    ).mappings().first()

    if row and verify_password(password, row["password"]):
        user = dict(row)
        del user["password"]
        return user

    raise UnauthorizedError("Invalid username/password")


def register(
    db: Session,
    user_data: Union[UserRegisterRequest, UserCreateRequest]
) -> Dict[str, Any]:
    """
    Create a user with a hashed password.

    Self-registration (UserRegisterRequest) never grants admin rights.

    Raises:
        BadRequestError: If the username is taken
    """
    duplicate = run_query(
        db,
        "SELECT username FROM users WHERE username = $1",
        [user_data.username]
    ).first()
    if duplicate:
        raise BadRequestError(f"Duplicate username: {user_data.username}")

    is_admin = getattr(user_data, "is_admin", False)
    try:
        row = run_query(
            db,
            f"""INSERT INTO users (username, password, first_name, last_name, email, is_admin)
                VALUES ($1, $2, $3, $4, $5, $6)
                RETURNING {USER_COLUMNS}""",
            [
                user_data.username,
                get_password_hash(user_data.password),
                user_data.first_name,
                user_data.last_name,
                user_data.email,
                is_admin,
            ]
        ).mappings().one()
        db.commit()
    except IntegrityError:
        db.rollback()
        raise BadRequestError(f"Duplicate username: {user_data.username}")

    logger.info(f"Registered user {row['username']} (admin: {bool(row['is_admin'])})")
    return dict(row)


def find_all(db: Session) -> List[Dict[str, Any]]:
    """All users, ordered by username."""
    result = run_query(db, f"SELECT {USER_COLUMNS} FROM users ORDER BY username")
    return [dict(row) for row in result.mappings()]


def get(db: Session, username: str) -> Dict[str, Any]:
    """
    Get a user and the ids of the jobs they applied to.

    Raises:
        NotFoundError: If the user does not exist
    """
    user = run_query(
        db,
        f"SELECT {USER_COLUMNS} FROM users WHERE username = $1",
        [username]
    ).mappings().first()
    if not user:
        raise NotFoundError(f"No user: {username}")

    applications = run_query(
        db,
        "SELECT job_id FROM applications WHERE username = $1 ORDER BY job_id",
        [username]
    ).scalars().all()

    return {**user, "jobs": list(applications)}


def update(db: Session, username: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Partially update a user.

    Data can include {firstName, lastName, password, email}; a new password
    is hashed before it is stored.

    Raises:
        BadRequestError: If data is empty
        NotFoundError: If the user does not exist
    """
    data = dict(data)
    if "password" in data:
        data["password"] = get_password_hash(data["password"])

    set_cols, values = sql_for_partial_update(data, JS_TO_SQL)
    username_idx = len(values) + 1

    sql = f"""UPDATE users
              SET {set_cols}
              WHERE username = ${username_idx}
              RETURNING {USER_COLUMNS}"""
    row = run_query(db, sql, [*values, username]).mappings().first()
    if not row:
        db.rollback()
        raise NotFoundError(f"No user: {username}")

    db.commit()
    logger.info(f"Updated user {username}: {', '.join(data)}")
    return dict(row)


def remove(db: Session, username: str) -> None:
    """
    Delete a user.

    Raises:
        NotFoundError: If the user does not exist
    """
    row = run_query(
        db,
        "DELETE FROM users WHERE username = $1 RETURNING username",
        [username]
    ).first()
    if not row:
        db.rollback()
        raise NotFoundError(f"No user: {username}")

    db.commit()
    logger.info(f"Deleted user {username}")


def _check_application(db: Session, username: str, job_id: int) -> None:
    job = run_query(db, "SELECT id FROM jobs WHERE id = $1", [job_id]).first()
    if not job:
        raise NotFoundError(f"No job: {job_id}")

    user = run_query(db, "SELECT username FROM users WHERE username = $1", [username]).first()
    if not user:
        raise NotFoundError(f"No user: {username}")

    duplicate = run_query(
        db,
        "SELECT job_id FROM applications WHERE username = $1 AND job_id = $2",
        [username, job_id]
    ).first()
    if duplicate:
        raise BadRequestError(f"{username} already applied to job {job_id}")


def apply_to_job(db: Session, username: str, job_id: int) -> int:
    """
    Record that a user applied to a job.

    Returns:
        The job id

    Raises:
        NotFoundError: If the user or the job does not exist
        BadRequestError: If the user already applied to this job
    """
    _check_application(db, username, job_id)

    try:
        run_query(
            db,
            "INSERT INTO applications (job_id, username) VALUES ($1, $2)",
            [job_id, username]
        )
        db.commit()
    except IntegrityError:
        # lost a race with a concurrent delete or application
        db.rollback()
        _check_application(db, username, job_id)
        raise

    logger.info(f"User {username} applied to job {job_id}")
    return job_id
