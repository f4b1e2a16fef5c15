"""
Accès à la persistance pour l'éditeur.

- ApiPageGateway: appels HTTP à l'API (requests)
- ServicePageGateway: appels directs aux services, sur une session DB

Les deux lèvent les mêmes erreurs métier (app.core.errors).
"""

import logging
import requests
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional, Protocol
from app.core.config import settings
from app.core.errors import (
    BlockNotFoundError,
    PageNotFoundError,
    PermissionDeniedError,
    PersistenceError,
    SlugTakenError,
    ValidationFailedError,
)
from app.models.user import User
from app.schemas.content_block import ContentBlockIn, ContentBlocksSyncResult
from app.schemas.page import PageResponse, PageUpdate, PageWithBlocks
from app.services.page_service import get_or_create_user_page, update_page, update_page_content_blocks

logger = logging.getLogger(__name__)


class PageGateway(Protocol):
    def fetch_page(self) -> Dict[str, Any]: ...

    def update_page(self, payload: Dict[str, Any]) -> Dict[str, Any]: ...

    def save_blocks(self, page_id: int, blocks: List[Dict[str, Any]]) -> Dict[str, Any]: ...


def _error_from_response(response) -> Exception:
    try:
        detail = response.json().get("detail")
    except ValueError:
        detail = None
    message = str(detail) if detail else f"HTTP {response.status_code}"

    if response.status_code == 409:
        return SlugTakenError(message)
    if response.status_code in (401, 403):
        return PermissionDeniedError(message)
    if response.status_code == 404:
        if "block" in message.lower():
            return BlockNotFoundError(message)
        return PageNotFoundError(message)
    if response.status_code == 422:
        return ValidationFailedError(message)
    return PersistenceError(message)


class ApiPageGateway:
    def __init__(self, base_url: str, token: str, http: Optional[Any] = None, timeout: float = settings.API_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.http = http or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, json: Optional[Any] = None) -> Dict[str, Any]:
        try:
            response = self.http.request(
                method,
                f"{self.base_url}{path}",
                json=json,
                headers={"Authorization": f"Bearer {self.token}"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"{method} {path} failed: {e}")
            raise PersistenceError("Could not reach the server") from e

        if response.status_code >= 400:
            error = _error_from_response(response)
            logger.warning(f"{method} {path} -> {response.status_code}: {error}")
            raise error

        # ex: page HTML d'un proxy avec un statut 200
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"{method} {path} returned a non-JSON body: {e}")
            raise PersistenceError("Invalid response from the server") from e

    def fetch_page(self) -> Dict[str, Any]:
        return self._request("GET", "/pages/me")

    def update_page(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        data = {key: value for key, value in payload.items() if key != "id"}
        return self._request("PUT", f"/pages/{payload['id']}", json=data)

    def save_blocks(self, page_id: int, blocks: List[Dict[str, Any]]) -> Dict[str, Any]:
        return self._request("PUT", f"/pages/{page_id}/blocks", json={"blocks": blocks})


class ServicePageGateway:
    """Même contrat, sans HTTP (scripts, tests, rendu serveur)"""

    def __init__(self, db: Session, user: User):
        self.db = db
        self.user = user

    def fetch_page(self) -> Dict[str, Any]:
        page = get_or_create_user_page(self.db, self.user)
        return PageWithBlocks.model_validate(page).model_dump(mode="json")

    def update_page(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            data = PageUpdate(**{key: value for key, value in payload.items() if key != "id"})
        except ValidationError as e:
            raise ValidationFailedError(str(e)) from e
        try:
            page = update_page(self.db, self.user, payload["id"], data.model_dump(exclude_unset=True))
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(str(e)) from e
        return PageResponse.model_validate(page).model_dump(mode="json")

    def save_blocks(self, page_id: int, blocks: List[Dict[str, Any]]) -> Dict[str, Any]:
        try:
            items = [ContentBlockIn(**block) for block in blocks]
            result = update_page_content_blocks(self.db, self.user, page_id, items)
        except ValueError as e:
            raise ValidationFailedError(str(e)) from e
        except SQLAlchemyError as e:
            raise PersistenceError(str(e)) from e
        return ContentBlocksSyncResult.model_validate(result, from_attributes=True).model_dump(mode="json")
