from __future__ import annotations

import json
import sys
from pathlib import Path

from graphql import GraphQLObjectType, GraphQLSchema

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from crm.graph import schema  # noqa: E402

SNAPSHOT_PATH = ROOT / "contracts" / "graphql_contract.json"
CONTRACT_TYPES = ("Query", "Mutation", "Customer", "User")


def _field_signature(type_name: str, field_name: str, field) -> str:
    args = ", ".join(f"{name}: {arg.type}" for name, arg in sorted(field.args.items()))
    arguments = f"({args})" if args else ""
    return f"{type_name}.{field_name}{arguments}: {field.type}"


def _contract_signatures(graphql_schema: GraphQLSchema) -> list[str]:
    signatures: list[str] = []
    for type_name in CONTRACT_TYPES:
        graphql_type = graphql_schema.get_type(type_name)
        if not isinstance(graphql_type, GraphQLObjectType):
            continue
        for field_name, field in graphql_type.fields.items():
            signatures.append(_field_signature(type_name, field_name, field))
    return sorted(signatures)


def _load_snapshot(path: Path) -> list[str]:
    return json.loads(path.read_text(encoding="utf-8"))


def main() -> int:
    current = _contract_signatures(schema.graphql_schema)

    if "--update" in sys.argv:
        SNAPSHOT_PATH.write_text(json.dumps(current, indent=2) + "\n", encoding="utf-8")
        print(f"Snapshot updated at {SNAPSHOT_PATH}")
        return 0

    if not SNAPSHOT_PATH.exists():
        print(f"Snapshot file not found: {SNAPSHOT_PATH}")
        return 1

    previous = _load_snapshot(SNAPSHOT_PATH)
    if current != previous:
        added = sorted(set(current) - set(previous))
        removed = sorted(set(previous) - set(current))
        print("GraphQL contract changed. Please review and update snapshot intentionally.")
        for line in added:
            print(f"  + {line}")
        for line in removed:
            print(f"  - {line}")
        return 1

    print("GraphQL contract unchanged.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
