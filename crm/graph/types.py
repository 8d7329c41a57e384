import graphene


class CustomerType(graphene.ObjectType):
    class Meta:
        name = "Customer"

    id = graphene.Int(required=True)
    first_name = graphene.String(required=True)
    last_name = graphene.String(required=True)
    contact = graphene.String(required=True)
    email = graphene.String(required=True)
    date_of_birth = graphene.DateTime(required=True)


class UserType(graphene.ObjectType):
    class Meta:
        name = "User"

    id = graphene.Int(required=True)
    username = graphene.String(required=True)
    email = graphene.String(required=True)
    password_hash = graphene.String(required=True)
    first_name = graphene.String(required=True)
    last_name = graphene.String(required=True)
    role = graphene.String(required=True)
    is_active = graphene.Boolean(required=True)
    created_at = graphene.DateTime(required=True)
    last_login_at = graphene.DateTime()
