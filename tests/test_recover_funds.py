import pytest

from rental_registry.errors import UnauthorizedError
from rental_registry.schemas.events import FundsRecovered


OWNER = "owner_1"
TENANT = "tenant_1"


def test_recover_funds_sweeps_custody_to_admin(registry, ledger, agreement_id, events):
    """Test the admin receives the whole custodied balance."""
    recovered = registry.recover_funds(registry.admin)

    assert recovered == 500
    assert registry.custodied_balance() == 0
    assert ledger.account(registry.admin) == 500
    assert len(events) == 1
    assert isinstance(events[0], FundsRecovered)
    assert events[0].admin == registry.admin
    assert events[0].amount == 500


def test_recover_funds_with_empty_custody(registry, ledger):
    """Test recovering from an empty custody succeeds with nothing moved."""
    assert registry.recover_funds(registry.admin) == 0
    assert ledger.account(registry.admin) == 0


@pytest.mark.parametrize("caller", [OWNER, TENANT, "stranger"])
def test_recover_funds_admin_only(registry, agreement_id, caller):
    """Test anyone other than the admin is rejected and custody is untouched."""
    with pytest.raises(UnauthorizedError):
        registry.recover_funds(caller)
    assert registry.custodied_balance() == 500


def test_recover_funds_does_not_close_agreements(registry, agreement_id):
    """Test sweeping custody leaves agreement records as they were."""
    registry.recover_funds(registry.admin)

    agreement = registry.get_rental_agreement_details(agreement_id)
    assert agreement.is_active is True
    assert agreement.security_deposit_returned is False
