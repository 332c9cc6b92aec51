import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

BACKEND_CONFIG = {
    "url": os.getenv("SUPABASE_URL", ""),
    "anon_key": os.getenv("SUPABASE_ANON_KEY", ""),
    "service_role_key": os.getenv("SUPABASE_SERVICE_ROLE_KEY", ""),
}

GALLERY_BUCKET = os.getenv("GALLERY_BUCKET", "vine-kids-gallery")
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))
DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", "12"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_FILE = os.getenv("LOG_FILE", "logs/vine-portal.log")

DEBUG = True
