from storage.memory import InMemoryBookingStore, InMemoryContactStore
from storage.sql import SqlBookingStore, SqlContactStore


def build_stores(app):
    """Pick store implementations from STORAGE_BACKEND ("memory" or "sql")."""
    backend = (app.config.get("STORAGE_BACKEND") or "memory").lower()
    if backend == "memory":
        return InMemoryBookingStore(), InMemoryContactStore()
    if backend == "sql":
        return SqlBookingStore(), SqlContactStore()
    raise ValueError(f"Unknown STORAGE_BACKEND: {backend}")
