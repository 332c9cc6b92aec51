SECRET_KEY = "test-secret"

BACKEND_CONFIG = {
    "url": "",
    "anon_key": "",
    "service_role_key": "",
}

GALLERY_BUCKET = "vine-kids-gallery"
MAX_UPLOAD_BYTES = 5 * 1024 * 1024
DEFAULT_PAGE_SIZE = 12

LOG_LEVEL = "WARNING"
LOG_FILE = ""

DEBUG = False
TESTING = True
