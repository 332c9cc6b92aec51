"""Repair one-sided spouse links between member profiles.

Run once after deploying the transactional spouse functions from
``database/schema.sql``. Use ``--dry-run`` to list what would change.
"""

from __future__ import annotations

import argparse
import importlib
import logging

from dotenv import load_dotenv

from vine_portal.config import get_settings_module
from vine_portal.container import build_container
from vine_portal.logging_setup import setup_logging
from vine_portal.profiles.service import ProfileService
from vine_portal.profiles.supabase_profile_repository import SupabaseProfileRepository

log = logging.getLogger("vine_portal.scripts.repair_spouse_links")


class _DryRunProfiles:
    """Read-through wrapper that records spouse writes instead of applying them."""

    def __init__(self, inner):
        self._inner = inner

    def __getattr__(self, name):
        return getattr(self._inner, name)

    def link_spouses(self, profile_a: str, profile_b: str) -> None:
        log.info("dry-run: would link %s <-> %s", profile_a, profile_b)

    def unlink_spouses(self, profile_id: str) -> None:
        log.info("dry-run: would unlink %s", profile_id)


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--dry-run", action="store_true", help="report repairs without writing")
    args = parser.parse_args()

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    setup_logging(level=getattr(settings, "LOG_LEVEL", "INFO"), log_file=getattr(settings, "LOG_FILE", ""))

    container = build_container(backend_config=settings.BACKEND_CONFIG)
    if not container.conn.is_configured:
        raise SystemExit("Backend is not configured. Set SUPABASE_URL, SUPABASE_ANON_KEY and SUPABASE_SERVICE_ROLE_KEY.")

    service = container.profile_service
    if args.dry_run:
        service = ProfileService(_DryRunProfiles(SupabaseProfileRepository(container.conn)))

    repairs = service.repair_spouse_links()
    for r in repairs:
        print(f"{r.action}: profile={r.profile_id} spouse={r.spouse_id}")
    print(f"OK: {len(repairs)} spouse link(s) {'to repair' if args.dry_run else 'repaired'}")


if __name__ == "__main__":
    main()
