from os import getenv

class Settings:
    JWT_SECRET = getenv("JWT_SECRET", "dev-secret-change-in-prod")
    JWT_EXPIRE_MIN = int(getenv("JWT_EXPIRE_MIN", "15"))  #expire au bout de 15 minutes
    JWT_REFRESH_EXPIRE_MIN = int(getenv("JWT_REFRESH_EXPIRE_MIN", "43200"))  #expire au bout d'1 mois

    LOG_LEVEL = getenv("LOG_LEVEL", "INFO")

    # stockage des images (bannières)
    UPLOAD_DIR = getenv("UPLOAD_DIR", "./uploads")
    PUBLIC_BASE_URL = getenv("PUBLIC_BASE_URL", "http://localhost:8000").rstrip("/")
    MAX_UPLOAD_BYTES = int(getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))

    MAX_ALIASES = int(getenv("MAX_ALIASES", "3"))

    # analytics
    ANALYTICS_WINDOW_DAYS = int(getenv("ANALYTICS_WINDOW_DAYS", "30"))
    DASHBOARD_WINDOW_DAYS = int(getenv("DASHBOARD_WINDOW_DAYS", "7"))
    TOP_SOURCES_LIMIT = int(getenv("TOP_SOURCES_LIMIT", "5"))
    TOP_LINKS_LIMIT = int(getenv("TOP_LINKS_LIMIT", "10"))

    # client éditeur (secondes)
    API_TIMEOUT = float(getenv("API_TIMEOUT", "10"))

settings = Settings()
