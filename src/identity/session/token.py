"""Bearer token record."""

from pydantic import BaseModel


class Token(BaseModel):
    """Opaque session token. ``expires`` is an absolute epoch-millisecond instant."""

    id: str
    user_id: str
    expires: int

    def is_active(self, now: int) -> bool:
        """Valid strictly before its expiry instant."""
        return now < self.expires

    def to_document(self) -> dict:
        return self.model_dump(mode="json")
