from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .common.http import register_error_handlers, register_request_logging
from .config import get_settings_module
from .container import Container, build_container
from .logging_setup import setup_logging

from .auth.controller import register as register_auth
from .checkins.controller import register as register_check_ins
from .children.controller import register as register_children
from .gallery.controller import register as register_gallery
from .profiles.controller import register as register_profiles
from .schedules.controller import register as register_schedules
from .sermons.controller import register as register_sermons
from .visitors.controller import register as register_visitors
from .volunteers.controller import register as register_volunteers

log = logging.getLogger(__name__)

# multipart framing on top of the largest accepted image
_UPLOAD_OVERHEAD_BYTES = 64 * 1024


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.json.sort_keys = False

    setup_logging(level=getattr(settings, "LOG_LEVEL", "INFO"), log_file=getattr(settings, "LOG_FILE", ""))

    max_upload_bytes = int(getattr(settings, "MAX_UPLOAD_BYTES"))
    app.config["MAX_CONTENT_LENGTH"] = max_upload_bytes + _UPLOAD_OVERHEAD_BYTES

    if container is None:
        container = build_container(
            backend_config=getattr(settings, "BACKEND_CONFIG"),
            gallery_bucket=getattr(settings, "GALLERY_BUCKET", "vine-kids-gallery"),
            max_upload_bytes=max_upload_bytes,
            page_size=int(getattr(settings, "DEFAULT_PAGE_SIZE", 12)),
        )
    log.info("vine-portal starting settings=%s backend_configured=%s", settings_module, container.conn.is_configured)
    if not container.conn.is_configured:
        log.warning("backend is not configured; content is served from static data and writes are disabled")

    register_request_logging(app)
    register_error_handlers(app)

    register_auth(app, container)
    register_profiles(app, container)
    register_children(app, container)
    register_check_ins(app, container)
    register_sermons(app, container)
    register_schedules(app, container)
    register_gallery(app, container)
    register_visitors(app, container)
    register_volunteers(app, container)

    return app
