"""Document store and the collections the service keeps in it."""

from shared.store.document_store import DocumentStore

USERS = "users"
TOKENS = "tokens"
CARTS = "carts"
ORDERS = "orders"

COLLECTIONS = (USERS, TOKENS, CARTS, ORDERS)

# Collections whose documents carry an ``expires`` field swept by garbage collection
EXPIRING_COLLECTIONS = (TOKENS, CARTS)

__all__ = [
    "CARTS",
    "COLLECTIONS",
    "DocumentStore",
    "EXPIRING_COLLECTIONS",
    "ORDERS",
    "TOKENS",
    "USERS",
]
