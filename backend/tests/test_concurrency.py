"""Two sessions racing on one group's membership list."""
from datetime import datetime, timezone

import pytest
from sqlalchemy.orm import sessionmaker

from taskflow.errors import ConflictError
from taskflow.models.group import Group, GroupMember, GroupRole
from taskflow.models.user import User
from taskflow.services.transactions import commit


@pytest.fixture
def sessions(db_engine):
    Session = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    first, second = Session(), Session()
    yield first, second
    first.close()
    second.close()


def _seed(db) -> tuple[str, list[str]]:
    users = [User(name=n, email=f"{n}@example.com", password_hash="x") for n in ("alice", "bob", "carol")]
    db.add_all(users)
    db.flush()
    group = Group(name="Alpha", invitation_code="RACE0001", created_by=users[0].user_id)
    group.members.append(GroupMember(user_id=users[0].user_id, role=GroupRole.admin))
    db.add(group)
    db.commit()
    return group.group_id, [u.user_id for u in users]


def _join(db, group_id: str, user_id: str) -> Group:
    group = db.query(Group).filter(Group.group_id == group_id).first()
    group.members.append(
        GroupMember(user_id=user_id, role=GroupRole.member, joined_at=datetime.now(timezone.utc))
    )
    group.touch()
    return group


class TestConcurrentJoins:

    def test_second_writer_gets_conflict(self, db, sessions):
        group_id, (_, bob, carol) = _seed(db)
        first, second = sessions

        _join(first, group_id, bob)
        _join(second, group_id, carol)

        commit(first)
        with pytest.raises(ConflictError):
            commit(second)

        db.expire_all()
        group = db.query(Group).filter(Group.group_id == group_id).first()
        assert {m.user_id for m in group.members} == {group.created_by, bob}
        assert group.version == 2
