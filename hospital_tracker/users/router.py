"""
User Router - API endpoints for hospital user management.

Any authenticated user may read the accounts of their own hospital; only
authorized users may create, update or delete them.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..auth.dependencies import Principal, get_current_principal, get_hasher, require_authorized
from ..core.security import PasswordHasher
from ..database import get_db
from .schemas import UserCreate, UserEnvelope, UserListResponse, UserResponse, UserUpdate
from .service import create_user, delete_user, get_user, list_users, update_user

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=UserListResponse)
def get_users(db: Session = Depends(get_db), principal: Principal = Depends(get_current_principal)):
    """
    List the users of the caller's hospital.
    """
    users = list_users(db, principal.hospital_id)
    return UserListResponse(users=[UserResponse.model_validate(user) for user in users])


@router.get("/{user_id}", response_model=UserEnvelope)
def get_user_by_id(
    user_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return UserEnvelope(user=UserResponse.model_validate(get_user(db, user_id, principal.hospital_id)))


@router.post("", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
def create_user_route(
    payload: UserCreate,
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_hasher),
    principal: Principal = Depends(require_authorized),
):
    """
    Create a user in the caller's hospital.

    The new user is recorded as created by the caller.
    """
    user = create_user(db, hasher, payload, principal.hospital_id, principal.user_id)
    return UserEnvelope(user=UserResponse.model_validate(user), message="User created successfully")


@router.put("/{user_id}", response_model=UserEnvelope)
def update_user_route(
    user_id: int,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_authorized),
):
    user = update_user(db, user_id, payload, principal.hospital_id)
    return UserEnvelope(user=UserResponse.model_validate(user), message="User updated successfully")


@router.delete("/{user_id}")
def delete_user_route(
    user_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_authorized),
):
    """
    Delete a user of the caller's hospital. Users cannot delete themselves.
    """
    delete_user(db, user_id, principal.hospital_id, principal.user_id)
    return {"message": "User deleted successfully"}
