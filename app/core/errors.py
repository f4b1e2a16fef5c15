"""Exceptions métier, traduites en réponses HTTP par register_error_handlers()."""

from fastapi import status
from fastapi.responses import JSONResponse


class PageBuilderError(Exception):
    """Base de toutes les erreurs métier"""


class PageNotFoundError(PageBuilderError):
    def __init__(self, message: str = "Page not found"):
        super().__init__(message)


class BlockNotFoundError(PageBuilderError):
    def __init__(self, message: str = "Content block not found"):
        super().__init__(message)


class PermissionDeniedError(PageBuilderError):
    def __init__(self, message: str = "You don't have permission to update this page"):
        super().__init__(message)


class SlugTakenError(PageBuilderError):
    def __init__(self, message: str = "URL slug already taken"):
        super().__init__(message)


class ValidationFailedError(PageBuilderError):
    """Données refusées (format de slug, couleur, payload de blocks...)"""


class PersistenceError(PageBuilderError):
    """Échec réseau ou base de données côté client éditeur"""


def register_error_handlers(app):
    """Traduction des erreurs métier en réponses HTTP ({"detail": ...} comme HTTPException)"""

    status_by_error = {
        PageNotFoundError: status.HTTP_404_NOT_FOUND,
        BlockNotFoundError: status.HTTP_404_NOT_FOUND,
        PermissionDeniedError: status.HTTP_403_FORBIDDEN,
        SlugTakenError: status.HTTP_409_CONFLICT,
        ValidationFailedError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    }

    def make_handler(status_code: int):
        async def handler(request, exc):
            return JSONResponse(status_code=status_code, content={"detail": str(exc)})
        return handler

    for error_class, status_code in status_by_error.items():
        app.add_exception_handler(error_class, make_handler(status_code))
