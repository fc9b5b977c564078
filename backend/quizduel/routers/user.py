from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, EmailStr
from ..dependencies import get_user_model
from ..models.user import UserModel


router = APIRouter(prefix="/api/users", tags=["users"])


class CreateUserRequest(BaseModel):
    email: EmailStr
    displayName: Optional[str] = None


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_user(
    request_data: CreateUserRequest,
    users: UserModel = Depends(get_user_model)
):
    """Register a player profile"""
    try:
        user = await users.create(request_data.model_dump())
    except Exception as e:
        print(f"❌ Error creating user: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create user"
        )
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A user with this email already exists"
        )
    print(f"✅ User created: {user['id']}")
    return {"uid": user["id"], "message": "User created successfully"}


@router.get("/{user_id}")
async def get_user(
    user_id: str,
    users: UserModel = Depends(get_user_model)
):
    try:
        user = await users.find_by_id(user_id)
    except Exception as e:
        print(f"❌ Error fetching user data: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch user data"
        )
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user
