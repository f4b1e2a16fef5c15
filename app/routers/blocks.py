from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.schemas.content_block import ClickResult
from app.services.visit_service import increment_block_click

router = APIRouter(prefix="/blocks", tags=["blocks"])

@router.post("/{block_id}/click", response_model=ClickResult)
def track_click(block_id: int, db: Session = Depends(get_db)):
    """
    Compte un clic sur un block LINK (endpoint public, appelé par la page).

    Un block inexistant ou non LINK n'est pas une erreur HTTP:
    on retourne success=False.
    """
    success, error = increment_block_click(db, block_id)
    return {"success": success, "error": error}
