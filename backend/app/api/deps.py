from collections.abc import Callable, Generator, Iterable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.security import Actor, ActorRole, decode_token
from app.db.session import SessionLocal
from app.repositories.schedule_store import ScheduleStore
from app.services.conflict_detector import ConflictDetector
from app.services.notifications import NotificationPort, NullNotifier, RecordingNotifier
from app.services.session_lifecycle import SessionLifecycle
from app.services.template_orchestrator import TemplateOrchestrator

security = HTTPBearer()


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_actor(credentials: HTTPAuthorizationCredentials = Depends(security)) -> Actor:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_token(credentials.credentials)
    except JWTError as exc:
        raise credentials_exception from exc

    actor_id = payload.get("sub")
    if not actor_id:
        raise credentials_exception
    try:
        role = ActorRole(payload.get("role"))
    except ValueError as exc:
        raise credentials_exception from exc
    return Actor(id=str(actor_id), role=role)


def require_roles(*roles: ActorRole) -> Callable[[Actor], Actor]:
    allowed_roles: Iterable[ActorRole] = set(roles)

    def role_checker(current_actor: Actor = Depends(get_current_actor)) -> Actor:
        if current_actor.role not in allowed_roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return current_actor

    return role_checker


require_scheduler = require_roles(ActorRole.admin, ActorRole.scheduler)


def get_store(db: Session = Depends(get_db)) -> ScheduleStore:
    return ScheduleStore(db)


def get_detector(store: ScheduleStore = Depends(get_store)) -> ConflictDetector:
    return ConflictDetector(store)


def get_notifier(db: Session = Depends(get_db), settings: Settings = Depends(get_settings)) -> NotificationPort:
    if not settings.notifications_enabled:
        return NullNotifier()
    return RecordingNotifier(db)


def get_lifecycle(
    store: ScheduleStore = Depends(get_store),
    detector: ConflictDetector = Depends(get_detector),
    notifier: NotificationPort = Depends(get_notifier),
) -> SessionLifecycle:
    return SessionLifecycle(store, detector, notifier)


def get_orchestrator(
    store: ScheduleStore = Depends(get_store),
    detector: ConflictDetector = Depends(get_detector),
    settings: Settings = Depends(get_settings),
) -> TemplateOrchestrator:
    return TemplateOrchestrator(store, detector, settings=settings)
