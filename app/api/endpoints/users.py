"""
User management endpoints.

- POST /users: admin creates a user (optionally an admin) and gets a token for them
- GET /users: admin lists all users
- GET, PATCH, DELETE /users/{username}: that user or an admin
- POST /users/{username}/jobs/{job_id}: apply to a job, that user or an admin
"""

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import CurrentUser, ensure_admin, ensure_correct_user_or_admin
from app.core.security import create_token
from app.crud import user as user_crud
from app.schemas.user import (
    UserCreateRequest,
    UserUpdateRequest,
    UserResponse,
    UserDetailResponse,
    UserCreateResponse,
    ApplicationResponse,
)

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger(__name__)


@router.post("", status_code=201, response_model=UserCreateResponse)
def create_user(
    request: UserCreateRequest,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(ensure_admin)
):
    """
    Add a new user. Unlike /auth/register this may create admins.

    Returns the new user and an authentication token for them.
    """
    user = user_crud.register(db, request)
    logger.info(f"Admin {admin.username} created user {user['username']}")
    return UserCreateResponse(user=UserResponse.model_validate(user), token=create_token(user))


@router.get("", response_model=list[UserResponse])
def list_users(
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(ensure_admin)
):
    """List all users."""
    return user_crud.find_all(db)


@router.get("/{username}", response_model=UserDetailResponse)
def get_user(
    username: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(ensure_correct_user_or_admin)
):
    """Retrieve a user profile, including the ids of jobs applied to."""
    return user_crud.get(db, username)


@router.patch("/{username}", response_model=UserResponse)
def update_user(
    username: str,
    request: UserUpdateRequest,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(ensure_correct_user_or_admin)
):
    """Update firstName, lastName, password or email."""
    data = request.model_dump(by_alias=True, exclude_unset=True)
    return user_crud.update(db, username, data)


@router.delete("/{username}")
def delete_user(
    username: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(ensure_correct_user_or_admin)
):
    """Delete a user account."""
    user_crud.remove(db, username)
    return {"deleted": username}


@router.post("/{username}/jobs/{job_id}", status_code=201, response_model=ApplicationResponse)
def apply_to_job(
    username: str,
    job_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(ensure_correct_user_or_admin)
):
    """Apply to a job."""
    applied = user_crud.apply_to_job(db, username, job_id)
    return ApplicationResponse(applied=applied)
