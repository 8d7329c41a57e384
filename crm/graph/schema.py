import graphene

from crm.graph.mutation import Mutation
from crm.graph.query import Query

schema = graphene.Schema(query=Query, mutation=Mutation)
