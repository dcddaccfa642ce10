from fastapi import APIRouter, Depends

from tripmates.api.deps import get_current_user
from tripmates.models.users import User
from tripmates.schemas.users import UserOut

router = APIRouter(tags=["users"])


@router.get("/me", response_model=UserOut)
def me(user: User = Depends(get_current_user)):
    return UserOut.model_validate(user)
