from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.deps import get_current_user
from app.models.user import User
from app.schemas.page import PageUpdate, PageResponse, PageWithBlocks, BannerUploadResponse
from app.schemas.content_block import ContentBlocksUpdate, ContentBlocksSyncResult
from app.services.page_service import get_or_create_user_page, get_owned_page, update_page, update_page_content_blocks
from app.services.blob_service import UploadError, upload_image

router = APIRouter(prefix="/pages", tags=["pages"])

@router.get("/me", response_model=PageWithBlocks)
def get_my_page(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    # Page de l'éditeur, créée avec un slug par défaut si absente
    return get_or_create_user_page(db, current_user)

@router.put("/{page_id}", response_model=PageResponse)
def update_page_settings(page_id: int, page_data: PageUpdate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    """
    Maj partielle des réglages de la page.

    - 404 page inexistante, 403 page d'un autre user
    - 409 si le slug (ou un alias) est déjà pris par une autre page
    """
    return update_page(db, current_user, page_id, page_data.model_dump(exclude_unset=True))

@router.put("/{page_id}/blocks", response_model=ContentBlocksSyncResult)
def save_content_blocks(page_id: int, payload: ContentBlocksUpdate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    """Remplace l'ensemble des blocks (création / maj / suppression en une transaction)"""
    try:
        return update_page_content_blocks(db, current_user, page_id, payload.blocks)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

@router.post("/{page_id}/banner", response_model=BannerUploadResponse, status_code=status.HTTP_201_CREATED)
def upload_banner(page_id: int, file: UploadFile = File(...), db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    # Upload seulement: l'éditeur enregistre ensuite banner_image via PUT /pages/{id}
    get_owned_page(db, current_user, page_id)
    try:
        url = upload_image(current_user.id, file.filename, file.content_type, file.file)
    except UploadError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {"url": url}
