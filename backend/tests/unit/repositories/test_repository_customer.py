"""Unit tests for CustomerRepository."""

import pytest
from customer_auth.models.customer import Customer
from customer_auth.repositories.customer import CustomerRepository
from tests.factories.customer import CustomerFactory


class TestCustomerRepository:
    """Ensure ``CustomerRepository`` maps upstream ids to local rows."""

    @pytest.fixture()
    def repo(self, session):
        return CustomerRepository(session=session)

    def test_create_generates_local_id(self, repo, session):
        customer = repo.create(vendor_customer_id="7001")
        session.commit()

        assert customer.id
        assert len(customer.id) == 36
        assert customer.refresh_token is None

    def test_find_by_id(self, repo):
        c = CustomerFactory()

        found = repo.find(id=c.id)
        assert found is not None
        assert found.vendor_customer_id == c.vendor_customer_id

    def test_find_by_vendor_customer_id(self, repo):
        c = CustomerFactory(vendor_customer_id="42")

        assert repo.find(vendor_customer_id="42").id == c.id
        assert repo.find(vendor_customer_id="43") is None

    def test_find_with_both_filters_must_match_both(self, repo):
        c = CustomerFactory(vendor_customer_id="42")
        other = CustomerFactory()

        assert repo.find(id=c.id, vendor_customer_id="42").id == c.id
        assert repo.find(id=other.id, vendor_customer_id="42") is None

    def test_find_requires_a_filter(self, repo):
        with pytest.raises(ValueError, match="requires id or vendor_customer_id"):
            repo.find()

    def test_update_refresh_token(self, repo, session):
        c = CustomerFactory(refresh_token="old")

        updated = repo.update(c.id, refresh_token="new")
        session.commit()

        assert updated is not None
        assert repo.get(c.id).refresh_token == "new"

    def test_update_rejects_non_whitelisted_fields(self, repo):
        c = CustomerFactory()

        with pytest.raises(ValueError, match="non-updatable"):
            repo.update(c.id, vendor_customer_id="hijack")

    def test_update_missing_returns_none(self, repo):
        assert repo.update("does-not-exist", refresh_token="x") is None

    def test_first_name_is_transient(self, repo, session):
        c = CustomerFactory()
        cid = c.id
        c.first_name = "Ada"
        session.commit()
        session.expunge_all()

        reloaded = repo.get(cid)
        assert reloaded.first_name is None

    def test_vendor_customer_id_is_indexed_once(self):
        table = Customer.__table__

        assert {c.name for c in table.constraints if c.columns.keys() == ["vendor_customer_id"]} == {
            "uq_customers_vendor_customer_id"
        }
        assert not [ix for ix in table.indexes if "vendor_customer_id" in ix.columns.keys()]
