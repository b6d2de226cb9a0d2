"""User directory: registration, lookup, profile update and account deletion."""

import structlog
from pydantic import ValidationError as ModelValidationError

from identity.shared.email import is_valid_email
from identity.user.user import PROFILE_FIELDS, User, hash_password
from shared.errors import NotFound, ValidationError
from shared.ids import new_id
from shared.store import USERS, DocumentStore

logger = structlog.get_logger(__name__)

_REQUIRED_FIELDS = ("first_name", "last_name", "email", "password", "address1", "city", "state", "postal_code")


def _clean(value) -> str | None:
    """Trimmed string, or None when missing or blank."""
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


class UserDirectory:
    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    async def register(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        address1: str,
        city: str,
        state: str,
        postal_code: str,
        address2: str = "",
    ) -> User:
        """Create a new account. All fields except ``address2`` are required."""
        supplied = {
            "first_name": _clean(first_name),
            "last_name": _clean(last_name),
            "email": _clean(email),
            "password": _clean(password),
            "address1": _clean(address1),
            "city": _clean(city),
            "state": _clean(state),
            "postal_code": _clean(postal_code),
        }
        errors = {field: ["This field is required"] for field in _REQUIRED_FIELDS if supplied[field] is None}
        if supplied["email"] is not None and not is_valid_email(supplied["email"]):
            errors["email"] = ["Invalid email address"]
        if errors:
            raise ValidationError(errors)

        password = supplied.pop("password")
        user = User(
            id=new_id(),
            hashed_password=hash_password(password),
            address2=_clean(address2) or "",
            **supplied,
        )
        await self.store.create(USERS, user.id, user.to_document())
        logger.info("User registered", user_id=user.id)
        return user

    async def get(self, user_id: str) -> User:
        document = await self.store.read(USERS, user_id)
        try:
            return User.model_validate(document)
        except ModelValidationError:
            raise NotFound(f"User {user_id!r} has no readable record", user_id=user_id) from None

    async def update(self, user_id: str, **changes) -> User:
        """Apply the non-blank fields in ``changes``; a new password is re-hashed."""
        unknown = set(changes) - set(PROFILE_FIELDS) - {"password"}
        if unknown:
            raise ValidationError({field: ["Unknown field"] for field in sorted(unknown)})

        cleaned = {field: _clean(value) for field, value in changes.items()}
        if "address2" in changes and isinstance(changes["address2"], str):
            cleaned["address2"] = changes["address2"].strip()
        updates = {field: value for field, value in cleaned.items() if value is not None}
        if not updates:
            raise ValidationError({"fields": ["Missing fields to update"]})
        if "email" in updates and not is_valid_email(updates["email"]):
            raise ValidationError({"email": ["Invalid email address"]})

        user = await self.get(user_id)
        password = updates.pop("password", None)
        if password is not None:
            updates["hashed_password"] = hash_password(password)

        updated = user.model_copy(update=updates)
        await self.store.update(USERS, user_id, updated.to_document())
        logger.info("User updated", user_id=user_id, fields=sorted(changes))
        return updated

    async def delete(self, user_id: str) -> None:
        await self.store.delete(USERS, user_id)
        logger.info("User deleted", user_id=user_id)

    def verify_password(self, user: User, password: str) -> bool:
        """Constant-time check of ``password`` against the stored hash."""
        return user.check_password(password)
