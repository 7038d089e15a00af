"""
MongoDB access helpers.

The client and database handle are created once by the application factory
and kept on ``app.state``; route handlers reach them through ``get_db``.
"""

import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from bson import ObjectId
from fastapi import Request
from pydantic import BaseModel
from pymongo import ASCENDING, MongoClient
from pymongo.database import Database

from config import Settings

MOVIE_COLLECTION = "movie"
USER_COLLECTION = "user"


def connect(settings: Settings) -> MongoClient:
    return MongoClient(settings.mongo_uri, serverSelectionTimeoutMS=5000, tz_aware=True)


def get_database(client: MongoClient, settings: Settings) -> Database:
    """Database named in the connection URI, or ``settings.database_name``."""
    return client.get_default_database(settings.database_name)


def ping(client: MongoClient) -> None:
    client.admin.command("ping")


def ensure_indexes(db: Database) -> None:
    db[MOVIE_COLLECTION].create_index([("title", ASCENDING)], unique=True)
    db[USER_COLLECTION].create_index([("username", ASCENDING)], unique=True)
    db[USER_COLLECTION].create_index([("email", ASCENDING)], unique=True)


def get_db(request: Request) -> Database:
    return request.app.state.db


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def stamp(data: Union[BaseModel, Dict[str, Any]]) -> Dict[str, Any]:
    """Return a plain dict, keyed by field alias, with createdAt/updatedAt set to now."""
    doc = data.model_dump(by_alias=True) if isinstance(data, BaseModel) else dict(data)
    now = utcnow()
    doc["createdAt"] = now
    doc["updatedAt"] = now
    return doc


def create_document(db: Database, collection_name: str, data: Union[BaseModel, Dict[str, Any]]) -> str:
    result = db[collection_name].insert_one(stamp(data))
    return str(result.inserted_id)


def get_documents(db: Database, collection_name: str, filter_dict: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    return list(db[collection_name].find(filter_dict or {}))


def exact_match(value: str) -> Dict[str, str]:
    """Case-insensitive whole-string match, with regex metacharacters escaped."""
    return {"$regex": f"^{re.escape(value)}$", "$options": "i"}


def to_str_id(doc):
    if not doc:
        return doc
    d = dict(doc)
    if "_id" in d:
        d["id"] = str(d.pop("_id"))
    if "favorites" in d:
        d["favorites"] = [str(fav) for fav in d["favorites"]]
    return d


def public_user(doc):
    """User document as returned to clients: string ids, no password."""
    d = to_str_id(doc)
    if d:
        d.pop("password", None)
    return d


OBJECT_ID_PATTERN = re.compile(r"[0-9a-fA-F]{24}")


def parse_object_id(value: str) -> Optional[ObjectId]:
    """Strict 24-hex-digit ObjectId parse; None for anything else."""
    if not OBJECT_ID_PATTERN.fullmatch(value):
        return None
    return ObjectId(value)
