import pytest

from ..models import Vehicle
from ..services import issue_invoice

pytestmark = pytest.mark.django_db


def test_query_parameter_selects_branch(back_office_client):
    assert back_office_client.get("/ledger/summary/", {"branch": "loc2"}).json()["branch"] == "loc2"


def test_unknown_branch_falls_back_to_all(back_office_client):
    data = back_office_client.get("/ledger/summary/", {"branch": "loc99"}).json()
    assert data["branch"] == "all"


def test_selected_branch_is_remembered_in_session(back_office_client):
    response = back_office_client.post("/ledger/branch/", {"branch": "loc1"})
    assert response.json() == {"ok": True, "branch": "loc1"}
    assert back_office_client.session["active_branch_id"] == "loc1"

    # later requests without ?branch= stay scoped
    data = back_office_client.get("/ledger/summary/").json()
    assert data["branch"] == "loc1"
    assert "branches" not in data


def test_selecting_unknown_branch_is_rejected(back_office_client):
    response = back_office_client.post("/ledger/branch/", {"branch": "nowhere"})
    assert response.status_code == 400


def test_invoice_listing_is_branch_scoped(back_office_client, branches):
    issue_invoice("Showroom Buyer", "100.00", location=branches["loc1"])
    issue_invoice("Warehouse Buyer", "200.00", location=branches["loc2"])

    names = [i["customer_name"] for i in back_office_client.get("/ledger/invoices/", {"branch": "loc2"}).json()["invoices"]]
    assert names == ["Warehouse Buyer"]
    assert len(back_office_client.get("/ledger/invoices/").json()["invoices"]) == 2


def test_for_branch_manager_helper(branches):
    Vehicle.objects.create(stock_number="OR-1", year=2019, make="Honda", model="Accord", location=branches["loc1"])
    Vehicle.objects.create(stock_number="OR-2", year=2020, make="Ford", model="F-150", location=branches["loc2"])

    assert list(Vehicle.objects.for_branch("loc1").values_list("stock_number", flat=True)) == ["OR-1"]
    assert Vehicle.objects.for_branch("all").count() == 2
    # the other branch's vehicle is invisible in scope
    with pytest.raises(Vehicle.DoesNotExist):
        Vehicle.objects.for_branch("loc1").get(stock_number="OR-2")


def test_vehicle_costs_view_is_scoped(back_office_client, branches):
    Vehicle.objects.create(stock_number="OR-1", year=2019, make="Honda", model="Accord", location=branches["loc1"])
    Vehicle.objects.create(stock_number="OR-2", year=2020, make="Ford", model="F-150", location=branches["loc2"])

    rows = back_office_client.get("/ledger/vehicles/costs/", {"branch": "loc2"}).json()["vehicles"]
    assert [r["stock_number"] for r in rows] == ["OR-2"]
    assert rows[0]["profit"] is None


def test_home_branch_is_the_initial_scope(client, django_user_model, branches, chart):
    user = django_user_model.objects.create_user(
        username="east-office", password="pw", role=django_user_model.Role.ADMIN, location=branches["loc2"]
    )
    client.force_login(user)

    data = client.get("/ledger/summary/").json()
    assert data["branch"] == "loc2"
    assert "branches" not in data
    # an explicit choice still overrides the home branch
    assert client.get("/ledger/summary/", {"branch": "all"}).json()["branch"] == "all"
    client.post("/ledger/branch/", {"branch": "loc1"})
    assert client.get("/ledger/summary/").json()["branch"] == "loc1"


def test_user_without_home_branch_starts_consolidated(back_office_client):
    assert back_office_client.get("/ledger/summary/").json()["branch"] == "all"
