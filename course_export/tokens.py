"""
Signed, time-limited download tokens for export archives.

Token format: {course_id}_{user_id}_{issued_at}_{signature}
where signature = sha256("{course_id}_{user_id}_{issued_at}" + salt), hex.

Tokens are stateless: nothing is stored, and a token can be checked using
only the salt, the current time, the admin list and the archive store.
"""

import enum
import hashlib
import hmac
import re
from dataclasses import dataclass
from typing import Protocol

from .clock import Clock
from .config import ExportConfig
from .database import get_connection
from .queries.users import is_admin as _is_admin
from .storage import ArchiveStore, StoredArchive

TOKEN_PATTERN = re.compile(r"([0-9]+)_([0-9]+)_([0-9]+)_[a-f0-9]+")


class TokenFailure(str, enum.Enum):
    malformed = "malformed"
    expired = "expired"
    notadmin = "notadmin"
    invalidtoken = "invalidtoken"
    nofile = "nofile"


class DownloadTokenError(Exception):
    """Raised when a download token is not valid. `reason` says which check failed."""

    def __init__(self, reason: TokenFailure):
        super().__init__(f"Invalid download token ({reason.value})")
        self.reason = reason


@dataclass(frozen=True)
class TokenData:
    course_id: int
    user_id: int
    issued_at: int


class AdminDirectory(Protocol):
    async def is_admin(self, user_id: int) -> bool: ...


class DatabaseAdminDirectory:
    """Admin status from users.is_admin, read fresh on every check."""

    async def is_admin(self, user_id: int) -> bool:
        async with get_connection() as conn:
            return await _is_admin(conn, user_id)


def parse_download_token(token: str) -> TokenData:
    """
    Parse the basic data out of a token, without checking it.

    Raises:
        DownloadTokenError: malformed
    """
    match = TOKEN_PATTERN.fullmatch(token)
    if not match:
        raise DownloadTokenError(TokenFailure.malformed)
    return TokenData(
        course_id=int(match.group(1)),
        user_id=int(match.group(2)),
        issued_at=int(match.group(3)),
    )


class DownloadTokens:
    """Issues and verifies download tokens."""

    def __init__(
        self,
        config: ExportConfig,
        clock: Clock,
        admins: AdminDirectory,
        store: ArchiveStore,
    ):
        self.config = config
        self.clock = clock
        self.admins = admins
        self.store = store

    def calculate_token(self, course_id: int, user_id: int, issued_at: int) -> str:
        token_data = f"{course_id}_{user_id}_{issued_at}"
        signature = hashlib.sha256(
            (token_data + self.config.salt).encode("utf-8")
        ).hexdigest()
        return f"{token_data}_{signature}"

    def issue(self, course_id: int, user_id: int) -> str:
        """Create a token for `user_id` to download `course_id`, valid from now."""
        return self.calculate_token(course_id, user_id, self.clock.time())

    async def verify(self, token: str) -> StoredArchive:
        """
        Check a token and return the archive it grants access to.

        Checks run in a fixed order: format, expiry, admin status, signature,
        archive existence.

        Raises:
            DownloadTokenError: With the reason of the first failed check
        """
        data = parse_download_token(token)

        age = self.clock.time() - data.issued_at
        if age < 0 or age > self.config.link_expiry_seconds:
            raise DownloadTokenError(TokenFailure.expired)

        # Admin status is checked now, not trusted from when the link was made
        if not await self.admins.is_admin(data.user_id):
            raise DownloadTokenError(TokenFailure.notadmin)

        expected = self.calculate_token(data.course_id, data.user_id, data.issued_at)
        if not hmac.compare_digest(token, expected):
            raise DownloadTokenError(TokenFailure.invalidtoken)

        archive = await self.store.get(data.course_id)
        if archive is None:
            raise DownloadTokenError(TokenFailure.nofile)

        return archive
