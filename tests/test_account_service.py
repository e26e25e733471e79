"""Tests for account validation and the account service."""

from decimal import Decimal

import pytest

from ledgerview.domain.account import AccountService
from ledgerview.domain.entities import AccountFormData, AccountSubType, AccountType
from ledgerview.domain.errors import ConflictError, NotFoundError, ValidationError
from ledgerview.domain.validation import apply_defaults, validate_account


def valid_form(**overrides):
    values = dict(code="1101", name="Cash", account_type="asset", sub_type="cash")
    values.update(overrides)
    return AccountFormData(**values)


class TestValidateAccount:
    def test_valid_form(self):
        assert validate_account(valid_form()) == {}

    def test_required_fields(self):
        errors = validate_account(AccountFormData())

        assert errors["code"] == "Account code is required"
        assert errors["name"] == "Account name is required"
        assert "account_type" in errors
        assert "sub_type" in errors

    def test_whitespace_only_code(self):
        errors = validate_account(valid_form(code="   "))

        assert set(errors) == {"code"}

    def test_unknown_account_type(self):
        errors = validate_account(valid_form(account_type="contra"))

        assert errors["account_type"].startswith("Account type must be one of")

    def test_unknown_sub_type(self):
        errors = validate_account(valid_form(sub_type="crypto"))

        assert set(errors) == {"sub_type"}

    @pytest.mark.parametrize("value", ["1,000.50", "(25)", "NT$300", ""])
    def test_initial_balance_accepted(self, value):
        assert validate_account(valid_form(initial_balance=value)) == {}

    def test_initial_balance_rejected(self):
        errors = validate_account(valid_form(initial_balance="a lot"))

        assert errors == {"initial_balance": "Initial balance must be a number"}

    def test_own_parent(self):
        errors = validate_account(valid_form(id="a1", parent_id="a1"))

        assert "parent_id" in errors


class TestApplyDefaults:
    def test_defaults(self):
        form = apply_defaults(valid_form(code=" 1101 ", name=" Cash ", parent_id="", description=""))

        assert form.code == "1101"
        assert form.name == "Cash"
        assert form.initial_balance == Decimal("0")
        assert form.currency == "TWD"
        assert form.parent_id is None
        assert form.description is None
        assert form.organization_id is None

    def test_parses_initial_balance(self):
        form = apply_defaults(valid_form(initial_balance="1,234.50", currency="USD"))

        assert form.initial_balance == Decimal("1234.50")
        assert form.currency == "USD"


class TestAccountServiceWithFakeBackend:
    def test_invalid_form_never_reaches_backend(self, fake_backend):
        service = AccountService(fake_backend)

        with pytest.raises(ValidationError) as exc_info:
            service.save_account(valid_form(code="", name=""))

        assert set(exc_info.value.errors) == {"code", "name"}
        assert "Account code is required" in str(exc_info.value)
        assert fake_backend.saved == []

    def test_valid_form_is_submitted_with_defaults(self, fake_backend):
        service = AccountService(fake_backend)

        saved = service.save_account(valid_form(initial_balance="100"))

        assert saved.code == "1101"
        assert fake_backend.saved[0].initial_balance == Decimal("100")
        assert fake_backend.saved[0].currency == "TWD"


class TestAccountServiceWithLedger:
    def test_create_and_get(self, account_service):
        created = account_service.save_account(valid_form(initial_balance="250"))

        fetched = account_service.get_account(created.id)
        assert fetched is not None
        assert fetched.code == "1101"
        assert fetched.account_type == AccountType.ASSET
        assert fetched.sub_type == AccountSubType.CASH
        assert fetched.initial_balance == Decimal("250")
        assert fetched.level == 0

    def test_get_missing_account(self, account_service):
        assert account_service.get_account("missing") is None

    def test_update(self, account_service):
        created = account_service.save_account(valid_form())

        updated = account_service.save_account(
            valid_form(id=created.id, name="Cash on Hand", is_active=False)
        )

        assert updated.id == created.id
        assert updated.name == "Cash on Hand"
        assert updated.is_active is False
        assert len(account_service.list_accounts()) == 1

    def test_sub_account_level(self, account_service):
        parent = account_service.save_account(valid_form())
        child = account_service.save_account(
            valid_form(code="1101-01", name="Petty Cash", parent_id=parent.id)
        )

        assert child.parent_id == parent.id
        assert child.level == 1

    def test_duplicate_code_in_same_scope(self, account_service, sample_org):
        account_service.save_account(valid_form(organization_id=sample_org.id))

        with pytest.raises(ConflictError):
            account_service.save_account(valid_form(organization_id=sample_org.id))

    def test_same_code_in_other_scope(self, account_service, sample_org):
        account_service.save_account(valid_form(organization_id=sample_org.id))

        personal = account_service.save_account(valid_form())

        assert personal.organization_id is None

    def test_duplicate_personal_code(self, account_service):
        account_service.save_account(valid_form())

        with pytest.raises(ConflictError):
            account_service.save_account(valid_form(name="Other cash"))

    def test_missing_parent(self, account_service):
        with pytest.raises(NotFoundError):
            account_service.save_account(valid_form(parent_id="missing"))

    def test_missing_organization(self, account_service):
        with pytest.raises(NotFoundError):
            account_service.save_account(valid_form(organization_id="missing"))

    def test_reparent_under_descendant(self, account_service):
        parent = account_service.save_account(valid_form())
        child = account_service.save_account(
            valid_form(code="1101-01", name="Petty Cash", parent_id=parent.id)
        )

        with pytest.raises(ValidationError):
            account_service.save_account(valid_form(id=parent.id, parent_id=child.id))

    def test_list_accounts_by_organization(self, account_service, sample_chart, sample_org):
        account_service.save_account(valid_form(code="9000", name="Personal cash"))

        scoped = account_service.list_accounts(sample_org.id)

        assert [acc.code for acc in scoped] == ["1101", "1102", "2101", "4101", "6101"]
        assert len(account_service.list_accounts()) == 6

    def test_list_organizations(self, account_service, sample_org):
        assert [org.name for org in account_service.list_organizations()] == ["Acme Ltd"]
