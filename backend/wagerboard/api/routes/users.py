"""User directory API routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from wagerboard.api.errors import ERROR_RESPONSES
from wagerboard.database.dependencies import get_db
from wagerboard.repositories import SqlUserDirectory
from wagerboard.schemas import UserCreate, UserResponse

router = APIRouter(prefix="/users", tags=["Users"], responses=ERROR_RESPONSES)

user_directory = SqlUserDirectory()


@router.post("/", response_model=UserResponse, status_code=201)
async def create_user(user: UserCreate, db: AsyncSession = Depends(get_db)):
    created = await user_directory.create_user(
        db,
        user_id=user.id,
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        twitch_username=user.twitch_username,
    )
    return UserResponse.model_validate(created)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, db: AsyncSession = Depends(get_db)):
    user = await user_directory.get_user(db, user_id)
    return UserResponse.model_validate(user)
