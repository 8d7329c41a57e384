import asyncio
from datetime import datetime

from crm.web.schemas import Customer
from crm.web.services.customer_service import CustomerService
from crm.web.services.graphql_client import GraphQLResponse
from tests.fixtures_data import CUSTOMER_RECORD


class _FakeClient:
    def __init__(self, *results):
        self.results = list(results)
        self.calls = []

    async def execute(self, query, variables=None):
        self.calls.append((query, variables))
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


def _ok(data):
    return GraphQLResponse(data=data)


def _error(message, data=None):
    return GraphQLResponse.model_validate({"data": data, "errors": [{"message": message}]})


def test_get_customers_maps_camel_case_fields():
    client = _FakeClient(_ok({"customers": [CUSTOMER_RECORD]}))

    customers = asyncio.run(CustomerService(client).get_customers())

    assert len(customers) == 1
    assert customers[0].first_name == "Jane"
    assert customers[0].date_of_birth == datetime(1990, 7, 22)


def test_get_customers_returns_empty_list_on_failure():
    assert asyncio.run(CustomerService(_FakeClient(None)).get_customers()) == []
    assert asyncio.run(CustomerService(_FakeClient(_error("boom"))).get_customers()) == []
    assert asyncio.run(CustomerService(_FakeClient(RuntimeError("x"))).get_customers()) == []


def test_get_customer_by_id_returns_none_when_missing():
    client = _FakeClient(_ok({"customer": None}))

    assert asyncio.run(CustomerService(client).get_customer_by_id(5)) is None
    assert client.calls[0][1] == {"id": 5}


def test_create_customer_sends_iso_date_and_returns_created():
    client = _FakeClient(_ok({"addCustomer": dict(CUSTOMER_RECORD, id=11)}))
    customer = Customer(
        first_name="Jane",
        last_name="Smith",
        contact="+1-555-0102",
        email="jane.smith@email.com",
        date_of_birth=datetime(1990, 7, 22),
    )

    created = asyncio.run(CustomerService(client).create_customer(customer))

    assert created.id == 11
    variables = client.calls[0][1]
    assert variables["dateOfBirth"] == "1990-07-22T00:00:00"
    assert "id" not in variables


def test_update_customer_sends_id_and_surfaces_errors_as_none():
    client = _FakeClient(_error("Error updating customer: Customer with id 3 not found", {"updateCustomer": None}))
    customer = Customer.model_validate(CUSTOMER_RECORD)

    assert asyncio.run(CustomerService(client).update_customer(customer)) is None
    assert client.calls[0][1]["id"] == 3


def test_delete_customer_result():
    assert asyncio.run(CustomerService(_FakeClient(_ok({"deleteCustomer": True}))).delete_customer(3)) is True
    assert asyncio.run(CustomerService(_FakeClient(_error("nope"))).delete_customer(3)) is False
    assert asyncio.run(CustomerService(_FakeClient(None)).delete_customer(3)) is False
