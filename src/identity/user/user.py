"""User account record and password hashing."""

from passlib.context import CryptContext
from pydantic import BaseModel

# Salted PBKDF2; the plaintext password is never stored
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

# Fields a profile update may change (password is handled separately)
PROFILE_FIELDS = ("first_name", "last_name", "email", "address1", "address2", "city", "state", "postal_code")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str | None) -> bool:
    if not plain or not hashed:
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        # Stored value is not a hash this context understands
        return False


class User(BaseModel):
    id: str
    first_name: str
    last_name: str
    email: str
    hashed_password: str
    address1: str
    address2: str = ""
    city: str
    state: str
    postal_code: str

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def check_password(self, password: str) -> bool:
        return verify_password(password, self.hashed_password)

    def to_document(self) -> dict:
        return self.model_dump(mode="json")

    def to_public(self) -> dict:
        """Document without the password hash."""
        return self.model_dump(mode="json", exclude={"hashed_password"})
