from decimal import Decimal

import pytest

from ..models import Account, AccountType, Location


@pytest.fixture
def branches(db):
    return {
        "loc1": Location.objects.create(id="loc1", name="Main Showroom", kind=Location.Kind.SHOWROOM),
        "loc2": Location.objects.create(id="loc2", name="East Warehouse", kind=Location.Kind.WAREHOUSE),
    }


@pytest.fixture
def chart(db):
    return {
        "A100": Account.objects.create(
            code="A100", name="Cash", account_type=AccountType.ASSET, balance=Decimal("10000.00")
        ),
        "A200": Account.objects.create(code="A200", name="Payroll Clearing", account_type=AccountType.LIABILITY),
        "4000": Account.objects.create(code="4000", name="Vehicle Sales", account_type=AccountType.REVENUE),
    }


@pytest.fixture
def back_office_client(client, django_user_model, branches, chart):
    user = django_user_model.objects.create_user(
        username="accountant", password="pw", role=django_user_model.Role.ADMIN
    )
    client.force_login(user)
    return client
