import graphene

from crm.graph.context import get_session
from crm.graph.types import CustomerType, UserType
from crm.models.customer import Customer
from crm.models.user import User


class Query(graphene.ObjectType):
    customers = graphene.List(graphene.NonNull(CustomerType), required=True)
    customer = graphene.Field(CustomerType, id=graphene.Int(required=True))
    users = graphene.List(graphene.NonNull(UserType), required=True)
    user = graphene.Field(UserType, username=graphene.String(required=True))
    user_by_id = graphene.Field(UserType, id=graphene.Int(required=True))

    def resolve_customers(root, info):
        return get_session(info).query(Customer).order_by(Customer.id.asc()).all()

    def resolve_customer(root, info, id):
        return get_session(info).query(Customer).filter(Customer.id == id).first()

    def resolve_users(root, info):
        return get_session(info).query(User).order_by(User.id.asc()).all()

    def resolve_user(root, info, username):
        return get_session(info).query(User).filter(User.username == username).first()

    def resolve_user_by_id(root, info, id):
        return get_session(info).query(User).filter(User.id == id).first()
