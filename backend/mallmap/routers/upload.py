from typing import Optional

from fastapi import APIRouter, Body, Depends, File, UploadFile

from ..config import Settings, get_settings
from ..schemas import Principal, ok
from ..security import get_current_principal
from ..services import delete_image, save_image

router = APIRouter(prefix="/upload", tags=["upload"])


@router.post("/image")
def upload_image(
    image: Optional[UploadFile] = File(None),
    settings: Settings = Depends(get_settings),
    _: Principal = Depends(get_current_principal),
):
    return ok(save_image(settings, image), "Image uploaded")


@router.post("/delete")
def remove_image(
    url: Optional[str] = Body(None, embed=True),
    settings: Settings = Depends(get_settings),
    _: Principal = Depends(get_current_principal),
):
    delete_image(settings, url)
    return ok(message="Image deleted")
