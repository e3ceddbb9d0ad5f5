"""
Users router for registration CRUD and name search.

Handlers only shape payloads: domain errors raised by UserService are turned
into responses by the exception handlers registered in user_registry.main.
"""
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, status

from user_registry.database.connections import get_database
from user_registry.schemas.user import (
    ErrorResponse,
    UserCreate,
    UserDeletedResponse,
    UserDetailResponse,
    UserListResponse,
    UserRegistered,
    UserRegisteredResponse,
    UserSnapshot,
    UserSummary,
    UserUpdate,
    UserUpdatedResponse,
)
from user_registry.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])

NOT_FOUND_RESPONSE = {404: {"model": ErrorResponse, "description": "User not found"}}
BAD_REQUEST_RESPONSE = {400: {"model": ErrorResponse, "description": "Invalid input"}}


async def get_user_service() -> UserService:
    """Dependency to get UserService instance."""
    db = await get_database()
    return UserService(db)


@router.post(
    "/addNewUser",
    response_model=UserRegisteredResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    responses=BAD_REQUEST_RESPONSE,
)
async def add_new_user(
    body: UserCreate,
    user_service: UserService = Depends(get_user_service),
):
    """
    Register a new user and assign the next sequential ID.

    - **first_name**, **middle_name**: 2-12 characters
    - **last_name**: 2-30 characters
    - **email**: valid and unique (stored lowercase)
    - **gender**: `male` or `female`
    - **date_of_birth**: ISO date, user must be at least 18
    - **user_name**: optional, letters and digits only, max 12 characters

    Every invalid field is reported in `errors`.
    """
    user = await user_service.create(body.model_dump())
    return UserRegisteredResponse(data=UserRegistered.from_user(user))


@router.get(
    "/getAllUsersRegisteredData",
    response_model=UserListResponse,
    summary="List all users",
)
async def get_all_users(
    user_service: UserService = Depends(get_user_service),
):
    """List every registered user in registration order."""
    users = await user_service.find_all()
    data = [UserSummary.from_user(user) for user in users]
    return UserListResponse(count=len(data), data=data)


@router.get(
    "/search",
    response_model=UserListResponse,
    summary="Search users by name",
    responses=BAD_REQUEST_RESPONSE,
)
async def search_users(
    full_name: Optional[str] = Query(
        None, description="Space-separated name parts, matched case-insensitively"
    ),
    user_service: UserService = Depends(get_user_service),
):
    """
    Search users by any part of their name.

    The query is split on whitespace; a user matches when any part is found
    anywhere in their first, middle or last name.
    """
    users = await user_service.search_by_name(full_name)
    data = [UserSummary.from_user(user) for user in users]
    return UserListResponse(count=len(data), data=data)


@router.get(
    "/{user_id}",
    response_model=UserDetailResponse,
    summary="Get user by ID",
    responses=NOT_FOUND_RESPONSE,
)
async def get_user(
    user_id: int,
    user_service: UserService = Depends(get_user_service),
):
    """Get a single user by sequential ID."""
    user = await user_service.find_by_id(user_id)
    return UserDetailResponse(data=UserSummary.from_user(user))


@router.put(
    "/{user_id}",
    response_model=UserUpdatedResponse,
    summary="Update user",
    responses={**NOT_FOUND_RESPONSE, **BAD_REQUEST_RESPONSE},
)
async def update_user(
    user_id: int,
    body: Optional[UserUpdate] = Body(None),
    user_service: UserService = Depends(get_user_service),
):
    """
    Update any subset of a user's fields.

    Fields left out of the body are unchanged. The response carries the
    values before and after the update.
    """
    changes = body.changes() if body is not None else {}
    old_user, new_user = await user_service.update(user_id, changes)
    return UserUpdatedResponse(
        old_data=UserSnapshot.from_user(old_user),
        updated_data=UserSnapshot.from_user(new_user),
    )


@router.delete(
    "/{user_id}",
    response_model=UserDeletedResponse,
    summary="Delete user",
    responses=NOT_FOUND_RESPONSE,
)
async def delete_user(
    user_id: int,
    user_service: UserService = Depends(get_user_service),
):
    """
    Delete a user.

    **Warning**: This action cannot be undone. IDs of deleted users are never
    reassigned.
    """
    deleted_id = await user_service.delete_by_id(user_id)
    return UserDeletedResponse(
        message=f"User with ID {deleted_id} has been deleted successfully"
    )
