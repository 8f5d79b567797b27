import pytest

from tests.factories.user import UserFactory
from tests.helpers.utils import TEST_HASHER
from waqf.models.user import User
from waqf.uow import SQLAlchemyReadOnlyUnitOfWork as ROuow
from waqf.uow import SQLAlchemyUnitOfWork as RWuow


class TestSQLAlchemyUnitOfWork:
    def test_commits_on_success(self, session):
        with RWuow() as uow:
            uow.users.add(User(email="rw@example.com", password_hash=TEST_HASHER.hash("12345678")))
        session.remove()

        assert session.query(User).filter_by(email="rw@example.com").count() == 1

    def test_rolls_back_on_error(self, session):
        with pytest.raises(RuntimeError), RWuow() as uow:
            uow.users.add(User(email="gone@example.com", password_hash="h"))
            raise RuntimeError("boom")

        assert session.query(User).filter_by(email="gone@example.com").count() == 0


class TestSQLAlchemyReadOnlyUnitOfWork:
    def test_allows_reads(self, session):
        user_id = UserFactory(email="ro@example.com").id
        session.remove()

        with ROuow() as uow:
            assert uow.users.find_by_identifier("ro@example.com").id == user_id

    def test_blocks_orm_flush_writes(self, session):
        session.remove()
        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            uow.session.add(User(email="blocked@example.com", password_hash="h"))
            uow.session.flush()

    def test_commit_is_refused(self, session):
        with ROuow() as uow, pytest.raises(RuntimeError):
            uow.commit()

    def test_guard_removed_after_exit(self, session):
        session.remove()
        with ROuow():
            pass

        with RWuow() as uow:
            uow.users.add(User(email="after@example.com", password_hash="h"))
        assert session.query(User).filter_by(email="after@example.com").count() == 1
