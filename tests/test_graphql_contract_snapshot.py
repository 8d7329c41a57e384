from crm.graph import schema
from scripts.check_graphql_contract import SNAPSHOT_PATH, _contract_signatures, _load_snapshot


def test_schema_matches_committed_contract():
    assert _contract_signatures(schema.graphql_schema) == _load_snapshot(SNAPSHOT_PATH)


def test_contract_lists_every_operation():
    signatures = _contract_signatures(schema.graphql_schema)
    operations = {line.split("(")[0].split(":")[0] for line in signatures if line.startswith(("Query.", "Mutation."))}

    assert operations == {
        "Query.customers",
        "Query.customer",
        "Query.users",
        "Query.user",
        "Query.userById",
        "Mutation.addCustomer",
        "Mutation.updateCustomer",
        "Mutation.deleteCustomer",
        "Mutation.addUser",
        "Mutation.updateUserRole",
        "Mutation.updateUserLastLogin",
    }
