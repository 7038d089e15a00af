"""
Password and bearer-token authentication.

Login checks a username/password pair against the stored bcrypt hash and
hands back a signed HS256 token. Protected routes depend on
``get_current_user``, which verifies that token and loads its user.
"""

from typing import Optional

import bcrypt
import jwt
from fastapi import APIRouter, Depends, Header, HTTPException
from pymongo.database import Database

from config import Settings, get_settings
from database import USER_COLLECTION, get_db, parse_object_id, public_user, utcnow
from logger import logger
from schemas import LoginRequest

TOKEN_ALGORITHM = "HS256"

router = APIRouter()


def hash_password(password: str, rounds: int = 12) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def check_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # stored value is not a bcrypt hash
        return False


def authenticate(db: Database, username: str, password: str) -> Optional[dict]:
    """Return the user document if the credentials match, None otherwise."""
    user = db[USER_COLLECTION].find_one({"username": username})
    if not user:
        logger.info(f"login failed: unknown user {username}")
        return None
    if not check_password(password, user.get("password", "")):
        logger.info(f"login failed: wrong password for {username}")
        return None
    return user


def issue_token(user: dict, settings: Settings) -> str:
    now = utcnow()
    payload = {
        "sub": str(user["_id"]),
        "username": user["username"],
        "iat": now,
        "exp": now + settings.jwt_expires_in,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=TOKEN_ALGORITHM)


def _unauthorized(detail: str = "Unauthorized") -> HTTPException:
    return HTTPException(status_code=401, detail=detail, headers={"WWW-Authenticate": "Bearer"})


def get_current_user(
    authorization: Optional[str] = Header(None),
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> dict:
    if not authorization:
        raise _unauthorized()
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise _unauthorized()

    try:
        payload = jwt.decode(token.strip(), settings.jwt_secret, algorithms=[TOKEN_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token expired")
    except jwt.InvalidTokenError as exc:
        logger.debug(f"rejected bearer token: {exc}")
        raise _unauthorized()

    user_id = parse_object_id(str(payload.get("sub", "")))
    if user_id is None:
        raise _unauthorized()
    user = db[USER_COLLECTION].find_one({"_id": user_id})
    if not user:
        raise _unauthorized()
    return user


@router.post("/login")
def login(
    payload: LoginRequest,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    user = authenticate(db, payload.username, payload.password)
    if not user:
        raise HTTPException(status_code=401, detail="Incorrect username or password")
    token = issue_token(user, settings)
    logger.info(f"issued token for {user['username']}")
    return {"user": public_user(user), "token": token}
