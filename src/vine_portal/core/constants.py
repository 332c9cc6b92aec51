"""Constants and defaults.

Note: Keep constants here to avoid magic strings spread across code.
"""

DEFAULT_PAGE_SIZE = 12
MAX_PAGE_SIZE = 100
MAX_UPLOAD_BYTES = 5 * 1024 * 1024
MAX_PERSON_AGE = 120
MAX_VISITOR_CHILD_AGE = 12
FALLBACK_STAFF_NAME = "Teacher"

VOLUNTEER_AREA_OPTIONS = (
    "louvor",
    "tecnologia",
    "recepcao",
    "kids",
    "store",
    "teens",
    "midia",
    "limpeza",
    "cozinha",
    "eventos",
    "outros",
)

# Tables / buckets on the hosted backend
TABLE_USERS = "users"
TABLE_MEMBER_PROFILES = "member_profiles"
TABLE_CHILDREN = "children"
TABLE_VISITOR_CHILDREN = "visitor_children"
TABLE_CHECK_INS = "check_ins"
TABLE_SERMONS = "sermons"
TABLE_SCHEDULE_EVENTS = "schedule_events"
TABLE_GALLERY = "vine_kids_gallery"
TABLE_VISITORS = "visitors"
TABLE_VOLUNTEERS = "volunteers"

STORAGE_PUBLIC_MARKER = "/storage/v1/object/public/"
