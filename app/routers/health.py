import logging
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.core.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/z")
def healthz(db: Session = Depends(get_db)):
    # API up + base joignable
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Database unreachable: {e}")
        return {"status": "degraded", "database": "unreachable"}
    return {"status": "ok", "database": "ok"}
