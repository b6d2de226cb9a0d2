"""Session manager: issue, validate, renew and revoke bearer tokens.

``validate_token`` is the single gate in front of every authenticated
operation. It only proves identity; callers compare the token's ``user_id``
with the resource owner where ownership matters (``authenticate`` does that
for them).
"""

from collections.abc import Callable

import structlog
from pydantic import ValidationError as ModelValidationError

from identity.session.token import Token
from identity.user.user import User
from shared.errors import AuthenticationFailed, Expired, Forbidden, NotFound
from shared.ids import new_id, now_ms
from shared.store import TOKENS, USERS, DocumentStore

logger = structlog.get_logger(__name__)

TOKEN_LIFETIME_MS = 60 * 60 * 1000


class SessionManager:
    def __init__(
        self,
        store: DocumentStore,
        clock: Callable[[], int] = now_ms,
        lifetime_ms: int = TOKEN_LIFETIME_MS,
    ) -> None:
        self.store = store
        self.clock = clock
        self.lifetime_ms = lifetime_ms

    async def _read_token(self, token_id: str) -> Token | None:
        """Stored token, or None when it is absent or unreadable."""
        try:
            document = await self.store.read(TOKENS, token_id)
        except NotFound:
            return None
        try:
            return Token.model_validate(document)
        except ModelValidationError:
            logger.warning("Unreadable token document", token_id=token_id)
            return None

    async def issue_token(self, user_id: str, password: str) -> Token:
        try:
            document = await self.store.read(USERS, user_id)
            user = User.model_validate(document)
        except (NotFound, ModelValidationError):
            raise AuthenticationFailed("Authentication failed") from None

        if not user.check_password(password):
            raise AuthenticationFailed("Authentication failed")

        token = Token(id=new_id(), user_id=user.id, expires=self.clock() + self.lifetime_ms)
        await self.store.create(TOKENS, token.id, token.to_document())
        logger.info("Token issued", user_id=user.id, expires=token.expires)
        return token

    async def validate_token(self, token_id: str | None) -> Token | None:
        """Token record when it exists and has not expired, otherwise None."""
        if not token_id:
            return None
        token = await self._read_token(token_id)
        if token is None or not token.is_active(self.clock()):
            return None
        return token

    async def authenticate(self, token_id: str | None, user_id: str | None = None) -> Token:
        """Like ``validate_token`` but raises, and optionally checks the owner."""
        token = await self.validate_token(token_id)
        if token is None:
            raise AuthenticationFailed("Missing required token, or the token is invalid")
        if user_id is not None and token.user_id != user_id:
            raise Forbidden("Token does not grant access to this user", user_id=user_id)
        return token

    async def renew_token(self, token_id: str) -> Token:
        """Push the expiry one lifetime past now. Expired tokens stay expired."""
        token = await self._read_token(token_id)
        if token is None:
            raise NotFound(f"Token {token_id!r} does not exist", token_id=token_id)

        now = self.clock()
        if not token.is_active(now):
            raise Expired("The token has already expired and cannot be extended", token_id=token_id)

        renewed = token.model_copy(update={"expires": now + self.lifetime_ms})
        # Garbage collection may have removed it meanwhile; NotFound propagates
        await self.store.update(TOKENS, token_id, renewed.to_document())
        logger.debug("Token renewed", token_id=token_id, expires=renewed.expires)
        return renewed

    async def revoke_token(self, token_id: str) -> None:
        await self.store.delete(TOKENS, token_id)
        logger.debug("Token revoked", token_id=token_id)
