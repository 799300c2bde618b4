"""Who may create, read and update a time log.

Three kinds of actor are granted access to a record:

* the owner (``time_log.user_id == actor.id``) for every action;
* an admin of the worker's organisation, for reading and approving;
* a team leader (``sales`` role) of a team in which the worker is an active
  member, within the same organisation, for reading and approving.

Nobody else gets anything. Creation is only ever granted to the owner.

``can_access_time_log`` evaluates one record; ``visible_time_logs_filter``
expresses the read rule as a SQL criterion for list queries. Both must agree.
"""
import enum
import logging
import uuid
from typing import Optional

from sqlalchemy import and_, or_, select
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from timelogs.core.exceptions import PermissionDeniedError
from timelogs.models.team import Team, TeamMember
from timelogs.models.time_log import TimeLog
from timelogs.models.user import User, UserRole

logger = logging.getLogger(__name__)


class TimeLogAction(str, enum.Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"


# Fields a supervisor (admin or team leader) may change on someone else's log
APPROVAL_FIELDS = frozenset({"is_approved"})


def is_owner(actor: User, time_log: TimeLog) -> bool:
    return time_log.user_id is not None and time_log.user_id == actor.id


def leads_active_member(db: Session, leader_id: uuid.UUID, worker_id: uuid.UUID) -> bool:
    """True if ``leader_id`` leads a team where ``worker_id`` is an active member."""
    membership = (
        db.query(TeamMember.id)
        .join(Team, Team.id == TeamMember.team_id)
        .filter(
            Team.team_leader_id == leader_id,
            TeamMember.user_id == worker_id,
            TeamMember.is_active.is_(True),
        )
        .first()
    )
    return membership is not None


def supervises(db: Session, actor: User, worker_id: Optional[uuid.UUID]) -> bool:
    """True if ``actor`` is an admin or team leader over ``worker_id``."""
    if worker_id is None or actor.organisation_id is None:
        return False
    if actor.role not in (UserRole.ADMIN, UserRole.SALES):
        return False

    worker = db.get(User, worker_id)
    if worker is None or worker.organisation_id != actor.organisation_id:
        return False

    if actor.role == UserRole.ADMIN:
        return True
    return leads_active_member(db, actor.id, worker_id)


def can_access_time_log(db: Session, actor: User, time_log: TimeLog, action: TimeLogAction) -> bool:
    """Evaluate the access policy for one record."""
    if is_owner(actor, time_log):
        return True
    if action == TimeLogAction.CREATE:
        return False
    return supervises(db, actor, time_log.user_id)


def authorize_time_log(db: Session, actor: User, time_log: TimeLog, action: TimeLogAction) -> None:
    """Raise PermissionDeniedError unless the policy allows ``action``."""
    if not can_access_time_log(db, actor, time_log, action):
        logger.warning(
            "Denied %s on time log %s (owner %s) to user %s",
            action.value,
            time_log.id,
            time_log.user_id,
            actor.id,
        )
        raise PermissionDeniedError("Not enough permissions")


def visible_time_logs_filter(actor: User) -> ColumnElement:
    """SQL criterion selecting exactly the time logs ``actor`` may read."""
    own = TimeLog.user_id == actor.id

    if actor.organisation_id is None or actor.role not in (UserRole.ADMIN, UserRole.SALES):
        return own

    same_organisation = TimeLog.user_id.in_(
        select(User.id).where(User.organisation_id == actor.organisation_id)
    )
    if actor.role == UserRole.ADMIN:
        return or_(own, same_organisation)

    led_members = (
        select(TeamMember.user_id)
        .join(Team, Team.id == TeamMember.team_id)
        .where(Team.team_leader_id == actor.id, TeamMember.is_active.is_(True))
    )
    return or_(own, and_(same_organisation, TimeLog.user_id.in_(led_members)))
