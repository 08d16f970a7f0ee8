import pytest
from customer_auth.models.customer import Customer
from customer_auth.uow import SQLAlchemyReadOnlyUnitOfWork as ROuow
from customer_auth.uow import SQLAlchemyUnitOfWork as RWuow
from tests.factories.customer import CustomerFactory


class TestSQLAlchemyReadOnlyUnitOfWork:
    def test_blocks_orm_flush_writes(self, db):
        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            uow.session.add(Customer(vendor_customer_id="7001"))
            uow.session.flush()

    def test_allows_reads(self, db):
        c = CustomerFactory()

        with ROuow() as uow:
            assert uow.customers.find(id=c.id) is not None

    def test_disallows_commit(self, db):
        with ROuow() as uow, pytest.raises(RuntimeError, match="does not allow commit"):
            uow.commit()

    def test_always_rolls_back_changes(self, db, session):
        cid = CustomerFactory(refresh_token="kept").id

        with ROuow() as uow:
            found = uow.customers.find(id=cid)
            found.refresh_token = "mutated-in-ro"

        session.expunge_all()
        assert session.get(Customer, cid).refresh_token == "kept"

    def test_guard_is_removed_after_exit(self, db, session):
        with ROuow():
            pass

        with RWuow() as uow:
            uow.customers.create(vendor_customer_id="7002")

        assert session.query(Customer).filter_by(vendor_customer_id="7002").count() == 1
