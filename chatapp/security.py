"""Password hashing.

Passwords are hashed with bcrypt at a fixed cost factor. Every call to `hash_password` generates a new salt, so two
users with the same password end up with different hashes.
"""

import logging

from passlib.context import CryptContext
from passlib.exc import UnknownHashError

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 12

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plaintext password against a stored hash in constant time.

    A password bcrypt cannot take (e.g. one containing a NUL byte) or a stored value that is not a bcrypt hash counts
    as a mismatch. The dummy check keeps the time spent equal to a real comparison.
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except UnknownHashError:
        logger.error("Stored password is not a recognised hash; it may have been saved in plaintext.")
    except ValueError as e:
        logger.warning("Password rejected by the hasher: %s", e)
    pwd_context.dummy_verify()
    return False


def dummy_verify() -> bool:
    """Burn the same time as `verify_password` when there is no hash to check against.

    Used when a username does not exist, so that the response time does not reveal which usernames are taken.
    """
    return pwd_context.dummy_verify()
