"""Tests for invitation code generation and uniqueness."""
import itertools

import pytest

from taskflow.errors import ConflictError
from taskflow.models.group import Group
from taskflow.models.user import User
from taskflow.services import invitation_codes


def _seed_group(db, code: str) -> None:
    user = User(name="Owner", email=f"owner-{code.lower()}@example.com", password_hash="x")
    db.add(user)
    db.flush()
    db.add(Group(name="Seed", invitation_code=code, created_by=user.user_id))
    db.commit()


class TestGenerateCode:

    def test_format(self):
        for _ in range(100):
            code = invitation_codes.generate_code()
            assert invitation_codes.is_valid_code(code)
            assert code == code.upper()

    def test_ten_thousand_codes_are_distinct(self):
        codes = {invitation_codes.generate_code() for _ in range(10_000)}
        # 36**8 possible codes; a collision here is vanishingly unlikely
        assert len(codes) == 10_000

    def test_normalize(self):
        assert invitation_codes.normalize_code("  ab12cd34 ") == "AB12CD34"


class TestUniqueCode:

    def test_retries_past_taken_code(self, db):
        _seed_group(db, "AAAAAAAA")
        candidates = iter(["AAAAAAAA", "BBBBBBBB"])
        code = invitation_codes.unique_code(db, generator=lambda: next(candidates), attempts=3)
        assert code == "BBBBBBBB"

    def test_gives_up_after_attempts(self, db):
        _seed_group(db, "AAAAAAAA")
        calls = itertools.count()

        def always_taken():
            next(calls)
            return "AAAAAAAA"

        with pytest.raises(ConflictError):
            invitation_codes.unique_code(db, generator=always_taken, attempts=4)
        assert next(calls) == 4
