from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from core.services.image_provider import ImageProvider
from core.use_cases.image_use_cases import generate_image_with_billing
from infrastructure.db.sqlite import SQLiteUserRepository
from infrastructure.web.dependencies import get_current_user_id, get_image_provider, get_user_repo


router = APIRouter(prefix="/api/user", tags=["images"])


class GenerateRequest(BaseModel):
    prompt: Optional[str] = None

class GenerateResponse(BaseModel):
    success: bool = True
    message: str = "Image generated successfully"
    image: str
    creditBalance: int


@router.post("/generate-image", response_model=GenerateResponse)
async def generate_image(
    payload: GenerateRequest,
    user_id: int = Depends(get_current_user_id),
    repo: SQLiteUserRepository = Depends(get_user_repo),
    provider: ImageProvider = Depends(get_image_provider),
):
    image, balance = await generate_image_with_billing(repo, provider, user_id=user_id, prompt=payload.prompt)
    return GenerateResponse(image=image, creditBalance=balance)
