"""
Profile API Endpoints (user dashboard)
"""
from fastapi import APIRouter, HTTPException, Depends

from app.core.auth import TokenUser, get_current_user
from app.domain.customer import ProfileUpdate
from app.repositories.profile_repository import ProfileRepository

router = APIRouter()


@router.get("/me/profile")
async def get_profile(user: TokenUser = Depends(get_current_user)):
    """Profile of the signed-in user; empty fields when none saved yet"""
    try:
        profile = ProfileRepository().find_by_id(user.id)

        data = profile.model_dump() if profile else {
            "id": user.id,
            "full_name": None,
            "phone": None,
            "address": None,
            "city": None,
        }
        data["email"] = user.email

        return {
            "status": "success",
            "data": data
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching profile: {str(e)}")


@router.put("/me/profile")
async def update_profile(body: ProfileUpdate, user: TokenUser = Depends(get_current_user)):
    try:
        profile = ProfileRepository().upsert(user.id, body)

        return {
            "status": "success",
            "message": "Profile updated",
            "data": profile.model_dump()
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating profile: {str(e)}")
