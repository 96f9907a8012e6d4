from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas import MallCreate, MallUpdate, PageParams, Principal, ok, page_params
from ..security import get_current_principal, require_admin
from ..services import create_mall, delete_mall, list_mall_brands, update_mall

router = APIRouter(prefix="/mall", tags=["mall"])


@router.post("")
def add_mall(payload: MallCreate, db: Session = Depends(get_db), _: Principal = Depends(require_admin)):
    return ok(create_mall(db, payload), "Mall created")


@router.put("/{mall_id}")
def edit_mall(
    mall_id: int,
    payload: MallUpdate,
    db: Session = Depends(get_db),
    _: Principal = Depends(require_admin),
):
    return ok(update_mall(db, mall_id, payload), "Mall updated")


@router.delete("/{mall_id}")
def remove_mall(mall_id: int, db: Session = Depends(get_db), _: Principal = Depends(require_admin)):
    delete_mall(db, mall_id)
    return ok(message="Mall deleted")


@router.get("/{mall_id}/brands")
def get_mall_brands(
    mall_id: int,
    params: PageParams = Depends(page_params(default_limit=20)),
    db: Session = Depends(get_db),
    _: Principal = Depends(get_current_principal),
):
    mall, brands, pagination = list_mall_brands(db, mall_id, params)
    return ok({"brands": brands, "mall": mall, "pagination": pagination})
