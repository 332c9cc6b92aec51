from __future__ import annotations

from dataclasses import dataclass

from .auth.service import AuthService
from .auth.supabase_auth_gateway import SupabaseAuthGateway
from .checkins.service import CheckInService
from .checkins.supabase_checkin_repository import SupabaseCheckInRepository
from .children.service import ChildService, VisitorChildService
from .children.supabase_child_repository import SupabaseChildRepository, SupabaseVisitorChildRepository
from .core.constants import DEFAULT_PAGE_SIZE, MAX_UPLOAD_BYTES
from .database.connection import BackendConfig, BackendConnection
from .gallery.service import GalleryService
from .gallery.supabase_gallery_repository import SupabaseGalleryRepository, SupabaseImageStorage
from .profiles.service import ProfileService
from .profiles.supabase_profile_repository import SupabaseProfileRepository
from .schedules.service import ScheduleService
from .schedules.supabase_schedule_repository import SupabaseScheduleEventRepository
from .sermons.service import SermonService
from .sermons.supabase_sermon_repository import SupabaseSermonRepository
from .users.service import RoleService
from .users.supabase_role_repository import SupabaseRoleRepository
from .visitors.service import VisitorService
from .visitors.supabase_visitor_repository import SupabaseVisitorRepository
from .volunteers.service import VolunteerService
from .volunteers.supabase_volunteer_repository import SupabaseVolunteerRepository


@dataclass(frozen=True)
class Container:
    conn: BackendConnection
    page_size: int

    auth_service: AuthService
    role_service: RoleService
    profile_service: ProfileService
    child_service: ChildService
    visitor_child_service: VisitorChildService
    check_in_service: CheckInService
    sermon_service: SermonService
    schedule_service: ScheduleService
    gallery_service: GalleryService
    visitor_service: VisitorService
    volunteer_service: VolunteerService


def build_container(
    *,
    backend_config: dict,
    gallery_bucket: str = "vine-kids-gallery",
    max_upload_bytes: int = MAX_UPLOAD_BYTES,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> Container:
    config = BackendConfig(
        url=str(backend_config.get("url") or ""),
        anon_key=str(backend_config.get("anon_key") or ""),
        service_role_key=str(backend_config.get("service_role_key") or ""),
    )
    conn = BackendConnection.get_instance(config)

    roles_repo = SupabaseRoleRepository(conn)
    profiles_repo = SupabaseProfileRepository(conn)
    children_repo = SupabaseChildRepository(conn)
    visitor_children_repo = SupabaseVisitorChildRepository(conn)
    check_ins_repo = SupabaseCheckInRepository(conn)

    role_service = RoleService(roles_repo)
    auth_service = AuthService(SupabaseAuthGateway(conn), role_service)

    return Container(
        conn=conn,
        page_size=page_size,
        auth_service=auth_service,
        role_service=role_service,
        profile_service=ProfileService(profiles_repo),
        child_service=ChildService(children_repo, profiles_repo, role_service),
        visitor_child_service=VisitorChildService(visitor_children_repo),
        check_in_service=CheckInService(check_ins_repo, children_repo, visitor_children_repo, profiles_repo),
        sermon_service=SermonService(SupabaseSermonRepository(conn), page_size=page_size),
        schedule_service=ScheduleService(SupabaseScheduleEventRepository(conn)),
        gallery_service=GalleryService(
            SupabaseGalleryRepository(conn),
            SupabaseImageStorage(conn, gallery_bucket),
            max_upload_bytes=max_upload_bytes,
        ),
        visitor_service=VisitorService(SupabaseVisitorRepository(conn)),
        volunteer_service=VolunteerService(SupabaseVolunteerRepository(conn)),
    )
