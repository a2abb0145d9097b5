import uuid
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session

from taskboard.db import SessionLocal
from taskboard.models.task import Task, TaskAssignee
from taskboard.models.user import User

@dataclass
class SeedResult:
    owner_email: str
    member_email: str
    other_email: str
    task_id: uuid.UUID

def get_or_create_user(db: Session, email: str, name: str | None = None) -> User:
    email = email.lower().strip()
    u = db.scalar(select(User).where(User.email == email))
    if u is None:
        u = User(email=email, name=name)
        db.add(u)
        db.flush()
    return u

def get_or_create_task(
    db: Session,
    owner_id: uuid.UUID,
    title: str,
    description: str,
    member_ids: list[uuid.UUID],
) -> Task:
    t = db.scalar(select(Task).where(Task.owner_id == owner_id, Task.title == title))
    if t is None:
        t = Task(
            owner_id=owner_id,
            title=title,
            description=description,
            tag="seed",
            assignees=[TaskAssignee(position=i, user_id=m) for i, m in enumerate(member_ids)],
        )
        db.add(t)
        db.flush()
    return t

def seed() -> SeedResult:
    db = SessionLocal()
    try:
        owner = get_or_create_user(db, "alice@example.com", "Alice")
        member = get_or_create_user(db, "bob@example.com", "Bob")
        other = get_or_create_user(db, "carol@example.com", "Carol")

        task = get_or_create_task(
            db,
            owner.id,
            "seeded task",
            "created by scripts/seed.py",
            member_ids=[member.id],
        )
        # owner keeps delete rights only when self-assigned
        get_or_create_task(
            db,
            member.id,
            "shared chore",
            "assigned to everyone",
            member_ids=[member.id, owner.id, other.id],
        )

        db.commit()

        return SeedResult(
            owner_email=owner.email,
            member_email=member.email,
            other_email=other.email,
            task_id=task.id,
        )
    finally:
        db.close()

if __name__ == "__main__":
    r = seed()
    print("seed complete")
    print(f"task_id={r.task_id}")
    print("users:")
    print(f"  owner:  {r.owner_email}")
    print(f"  member: {r.member_email}")
    print(f"  other:  {r.other_email}")
