import uuid
from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from taskboard.models.user import User

def parse_uuid(raw: str | uuid.UUID) -> uuid.UUID | None:
    if isinstance(raw, uuid.UUID):
        return raw
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        return None

def parse_member_id(raw: str) -> uuid.UUID | None:
    """
    Member ids must be in the form the API hands them out (lowercase,
    hyphenated), so a stored assignment always reads back as what was sent.
    """
    parsed = parse_uuid(raw)
    if parsed is None or str(parsed) != raw:
        return None
    return parsed

def list_users(db: Session) -> list[User]:
    return list(db.scalars(select(User).order_by(User.created_at, User.email)).all())

def existing_user_ids(db: Session, user_ids: Iterable[uuid.UUID]) -> set[uuid.UUID]:
    wanted = set(user_ids)
    if not wanted:
        return set()
    return set(db.scalars(select(User.id).where(User.id.in_(wanted))).all())

def first_missing_user(db: Session, raw_ids: list[str]) -> str | None:
    """
    Return the first entry of raw_ids (input order) that does not name an
    existing user, or None if all of them do.

    Malformed or non-canonical ids count as missing. One query covers the
    whole list.
    """
    parsed = [parse_member_id(r) for r in raw_ids]
    found = existing_user_ids(db, (p for p in parsed if p is not None))
    for raw, p in zip(raw_ids, parsed):
        if p is None or p not in found:
            return raw
    return None

def names_by_id(db: Session, user_ids: Iterable[uuid.UUID]) -> dict[uuid.UUID, str | None]:
    wanted = set(user_ids)
    if not wanted:
        return {}
    rows = db.execute(select(User.id, User.name).where(User.id.in_(wanted))).all()
    return {r.id: r.name for r in rows}
