from .todos_client import RemoteError, TodosClient

__all__ = ["RemoteError", "TodosClient"]
