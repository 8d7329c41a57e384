from __future__ import annotations

import logging

from crm.web.schemas import Customer
from crm.web.services.graphql_client import GraphQLClient

logger = logging.getLogger(__name__)

CUSTOMER_FIELDS = "id firstName lastName contact email dateOfBirth"

GET_CUSTOMERS = f"query GetCustomers {{ customers {{ {CUSTOMER_FIELDS} }} }}"

GET_CUSTOMER = f"""
query GetCustomer($id: Int!) {{
  customer(id: $id) {{ {CUSTOMER_FIELDS} }}
}}
"""

ADD_CUSTOMER = f"""
mutation AddCustomer($firstName: String!, $lastName: String!, $contact: String!, $email: String!, $dateOfBirth: DateTime!) {{
  addCustomer(firstName: $firstName, lastName: $lastName, contact: $contact, email: $email, dateOfBirth: $dateOfBirth) {{
    {CUSTOMER_FIELDS}
  }}
}}
"""

UPDATE_CUSTOMER = f"""
mutation UpdateCustomer($id: Int!, $firstName: String!, $lastName: String!, $contact: String!, $email: String!, $dateOfBirth: DateTime!) {{
  updateCustomer(id: $id, firstName: $firstName, lastName: $lastName, contact: $contact, email: $email, dateOfBirth: $dateOfBirth) {{
    {CUSTOMER_FIELDS}
  }}
}}
"""

DELETE_CUSTOMER = """
mutation DeleteCustomer($id: Int!) {
  deleteCustomer(id: $id)
}
"""


def _customer_variables(customer: Customer) -> dict:
    return {
        "firstName": customer.first_name,
        "lastName": customer.last_name,
        "contact": customer.contact,
        "email": customer.email,
        "dateOfBirth": customer.date_of_birth.isoformat() if customer.date_of_birth else None,
    }


class CustomerService:
    def __init__(self, client: GraphQLClient):
        self.client = client

    async def get_customers(self) -> list[Customer]:
        try:
            response = await self.client.execute(GET_CUSTOMERS)
            if response is None or response.has_errors or not response.data:
                return []
            return [Customer.model_validate(item) for item in response.data.get("customers") or []]
        except Exception:
            logger.exception("Error fetching customers")
            return []

    async def get_customer_by_id(self, customer_id: int) -> Customer | None:
        try:
            response = await self.client.execute(GET_CUSTOMER, {"id": customer_id})
            if response is None or response.has_errors or not response.data:
                return None
            item = response.data.get("customer")
            return Customer.model_validate(item) if item else None
        except Exception:
            logger.exception("Error fetching customer id=%s", customer_id)
            return None

    async def create_customer(self, customer: Customer) -> Customer | None:
        try:
            response = await self.client.execute(ADD_CUSTOMER, _customer_variables(customer))
            if response is None or response.has_errors or not response.data:
                return None
            item = response.data.get("addCustomer")
            if not item:
                return None
            created = Customer.model_validate(item)
            logger.info("Customer created through API id=%s", created.id)
            return created
        except Exception:
            logger.exception("Error creating customer")
            return None

    async def update_customer(self, customer: Customer) -> Customer | None:
        try:
            variables = _customer_variables(customer)
            variables["id"] = customer.id
            response = await self.client.execute(UPDATE_CUSTOMER, variables)
            if response is None or response.has_errors or not response.data:
                return None
            item = response.data.get("updateCustomer")
            return Customer.model_validate(item) if item else None
        except Exception:
            logger.exception("Error updating customer id=%s", customer.id)
            return None

    async def delete_customer(self, customer_id: int) -> bool:
        try:
            response = await self.client.execute(DELETE_CUSTOMER, {"id": customer_id})
            if response is None or response.has_errors or not response.data:
                return False
            return bool(response.data.get("deleteCustomer"))
        except Exception:
            logger.exception("Error deleting customer id=%s", customer_id)
            return False
