from crm.models.customer import Customer
from crm.models.user import User
