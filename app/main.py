import logging
import os
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from app.core.config import settings
from app.core.database import engine, Base
from app.core.errors import register_error_handlers
from app.models import user, page, content_block, page_visit  # enregistre les tables
from app.routers import health, auth, pages, blocks, analytics, public

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

# Init DB
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="LinkPage API",
    version="1.0.0"
)

register_error_handlers(app)

# Images uploadées
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

# Routes
app.include_router(health.router, prefix="/health")
app.include_router(auth.router)
app.include_router(pages.router)
app.include_router(blocks.router)
app.include_router(analytics.router)
# toujours en dernier: /{slug}
app.include_router(public.router)
