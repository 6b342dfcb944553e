from fastapi import APIRouter, Depends, HTTPException, Body
from sqlalchemy.orm import Session
from ..database import get_db
from ..models import User
from ..schemas import SlotWeightUpdate
from ..auth import get_current_user, require_admin
from ..services import slot_weights as weights_service

router = APIRouter(tags=["slot-weights"])


@router.get("/")
def list_slot_weights(db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    """All stored weight rows (admin only)"""
    return [weights_service.weights_to_dict(w) for w in weights_service.list_all_weights(db)]


@router.get("/me")
def get_my_slot_weights(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    """Current teacher's weights, created with defaults on first access"""
    weights = weights_service.get_or_create_weights(db, current_user.id)
    return weights_service.weights_to_dict(weights)


@router.put("/me")
def update_my_slot_weights(
    data: SlotWeightUpdate = Body(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    weights = weights_service.update_weights(db, current_user.id, data)
    return weights_service.weights_to_dict(weights)


@router.delete("/me")
def delete_my_slot_weights(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    if not weights_service.delete_weights(db, current_user.id):
        raise HTTPException(status_code=404, detail="Slot weights not found")
    return {"success": True, "message": "Slot weights deleted"}
