import os
import sys
import time
from typing import Optional

import uvicorn
from bson import ObjectId
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pymongo import MongoClient, ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError
from starlette.responses import JSONResponse, PlainTextResponse

import auth
from config import Settings, get_settings
from database import (MOVIE_COLLECTION, USER_COLLECTION, connect,
                      create_document, ensure_indexes, exact_match, get_database,
                      get_db, get_documents, parse_object_id, ping,
                      public_user, to_str_id, utcnow)
from logger import configure_logging, logger
from schemas import RegisterRequest, UpdateUserRequest, User

WELCOME_TEXT = "Welcome to YusMov API! Visit /documentation.html to get started."
SERVER_ERROR_TEXT = "Something went wrong on the server!"
PUBLIC_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "public")

public = APIRouter()
protected = APIRouter(dependencies=[Depends(auth.get_current_user)])


# Error handlers

async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        ctx_error = (err.get("ctx") or {}).get("error")
        errors.append({
            "field": loc[-1] if loc else "body",
            "msg": str(ctx_error) if ctx_error else err.get("msg"),
        })
    return JSONResponse({"errors": errors}, status_code=422)


async def server_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} crashed: {exc!r}")
    return JSONResponse({"detail": SERVER_ERROR_TEXT}, status_code=500)


# Public routes

@public.get("/")
def read_root():
    return PlainTextResponse(WELCOME_TEXT)


def _ensure_unique(db: Database, username: Optional[str], email: Optional[str], exclude=None):
    clauses = []
    if username:
        clauses.append({"username": username})
    if email:
        clauses.append({"email": email})
    if not clauses:
        return
    query = {"$or": clauses}
    if exclude is not None:
        query["_id"] = {"$ne": exclude}
    existing = db[USER_COLLECTION].find_one(query)
    if existing:
        field = "Username" if username and existing.get("username") == username else "Email"
        raise HTTPException(status_code=409, detail=f"{field} already exists")


@public.post("/users", status_code=201)
def register(
    payload: Optional[RegisterRequest] = None,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    if payload is None or payload.missing_fields():
        raise HTTPException(status_code=400, detail="Username, email, and password are required")

    _ensure_unique(db, payload.username, payload.email)
    user = User(
        username=payload.username,
        email=payload.email,
        password=auth.hash_password(payload.password, settings.bcrypt_rounds),
        birthday=payload.birthday,
    )
    try:
        user_id = create_document(db, USER_COLLECTION, user)
    except DuplicateKeyError:
        raise HTTPException(status_code=409, detail="Username or email already exists")

    logger.info(f"registered user {payload.username}")
    created = db[USER_COLLECTION].find_one({"_id": ObjectId(user_id)})
    return public_user(created)


# Catalog routes

@protected.get("/movies")
def list_movies(db: Database = Depends(get_db)):
    return [to_str_id(m) for m in get_documents(db, MOVIE_COLLECTION)]


@protected.get("/movies/{title}")
def get_movie(title: str, db: Database = Depends(get_db)):
    movie = db[MOVIE_COLLECTION].find_one({"title": exact_match(title)})
    if not movie:
        raise HTTPException(status_code=404, detail="Movie not found")
    return to_str_id(movie)


@protected.get("/genres/{name}")
def get_genre(name: str, db: Database = Depends(get_db)):
    found = db[MOVIE_COLLECTION].find_one({"genre.name": exact_match(name)}, {"genre": 1, "_id": 0})
    if not found:
        raise HTTPException(status_code=404, detail="Genre not found")
    return found["genre"]


@protected.get("/directors/{name}")
def get_director(name: str, db: Database = Depends(get_db)):
    found = db[MOVIE_COLLECTION].find_one({"director.name": exact_match(name)}, {"director": 1, "_id": 0})
    if not found:
        raise HTTPException(status_code=404, detail="Director not found")
    return found["director"]


# User management routes

@protected.put("/users/{username}")
def update_user(
    username: str,
    payload: UpdateUserRequest,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    updates = {}
    if payload.new_username:
        updates["username"] = payload.new_username
    if payload.new_email:
        updates["email"] = payload.new_email
    if payload.new_birthday:
        updates["birthday"] = payload.new_birthday
    if payload.new_password:
        updates["password"] = auth.hash_password(payload.new_password, settings.bcrypt_rounds)
    if not updates:
        raise HTTPException(status_code=400, detail="No valid update fields provided")

    current = db[USER_COLLECTION].find_one({"username": username}, {"_id": 1})
    if not current:
        raise HTTPException(status_code=404, detail="User not found")
    _ensure_unique(db, updates.get("username"), updates.get("email"), exclude=current["_id"])

    updates["updatedAt"] = utcnow()
    try:
        updated = db[USER_COLLECTION].find_one_and_update(
            {"_id": current["_id"]},
            {"$set": updates},
            return_document=ReturnDocument.AFTER,
        )
    except DuplicateKeyError:
        raise HTTPException(status_code=409, detail="Username or email already exists")
    if not updated:
        raise HTTPException(status_code=404, detail="User not found")

    logger.info(f"updated user {username}: {sorted(k for k in updates if k != 'updatedAt')}")
    return public_user(updated)


@protected.post("/users/{username}/movies/{movie_id}")
def add_favorite(username: str, movie_id: str, db: Database = Depends(get_db)):
    oid = parse_object_id(movie_id)
    if oid is None:
        raise HTTPException(status_code=400, detail="Invalid movieId")
    if not db[MOVIE_COLLECTION].find_one({"_id": oid}, {"_id": 1}):
        raise HTTPException(status_code=404, detail="Movie not found")

    # $addToSet keeps the list duplicate-free in one atomic write
    result = db[USER_COLLECTION].update_one(
        {"username": username},
        {"$addToSet": {"favorites": oid}, "$set": {"updatedAt": utcnow()}},
    )
    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail="User not found")
    return PlainTextResponse(f"Movie {movie_id} added to {username}'s favorites")


@protected.delete("/users/{username}/movies/{movie_id}")
def remove_favorite(username: str, movie_id: str, db: Database = Depends(get_db)):
    oid = parse_object_id(movie_id)
    if oid is None:
        raise HTTPException(status_code=400, detail="Invalid movieId")

    result = db[USER_COLLECTION].update_one(
        {"username": username},
        {"$pull": {"favorites": oid}, "$set": {"updatedAt": utcnow()}},
    )
    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail="User not found")
    return PlainTextResponse(f"Movie {movie_id} removed from {username}'s favorites")


@protected.delete("/users/{username}")
def deregister(username: str, db: Database = Depends(get_db)):
    result = db[USER_COLLECTION].delete_one({"username": username})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="User not found")
    logger.info(f"deregistered user {username}")
    return PlainTextResponse(f"User {username} deregistered")


def create_app(settings: Settings, client: Optional[MongoClient] = None) -> FastAPI:
    client = client if client is not None else connect(settings)

    app = FastAPI(title="YusMov API")
    app.state.settings = settings
    app.state.client = client
    app.state.db = get_database(client, settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        init = time.perf_counter()
        response = await call_next(request)
        elapsed = 1000 * (time.perf_counter() - init)
        logger.info(f"{request.method} {request.url.path} {response.status_code} {elapsed:.2f} ms")
        return response

    @app.on_event("startup")
    def startup_event():
        ensure_indexes(app.state.db)
        logger.info("database indexes ensured")

    @app.on_event("shutdown")
    def shutdown_event():
        app.state.client.close()

    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, server_error_handler)

    app.include_router(public)
    app.include_router(auth.router)
    app.include_router(protected)
    app.mount("/", StaticFiles(directory=PUBLIC_DIR, html=True), name="public")
    return app


def main():
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    client = connect(settings)
    try:
        ping(client)
    except PyMongoError as exc:
        logger.error(f"MongoDB connection error: {exc}")
        sys.exit(1)
    logger.info("connected to MongoDB")

    app = create_app(settings, client)
    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
