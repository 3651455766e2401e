"""Password hashing with the ``bcrypt`` library (>=4.0).

passlib is not used: it is unmaintained and breaks against bcrypt >=4.
"""

import bcrypt


def hash_password(plain: str) -> str:
    hashed_bytes: bytes = bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt())
    return hashed_bytes.decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
