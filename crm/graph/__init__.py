from crm.graph.schema import schema

__all__ = ["schema"]
