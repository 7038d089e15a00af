"""
Database Schemas

MongoDB collection schemas and request payloads, defined with Pydantic.

Each collection model maps to a lowercase collection name:
- User -> "user" collection
- Movie -> "movie" collection
Genre and Director are embedded inside Movie and have no collection.

Stored documents and API payloads use camelCase keys (imageUrl, createdAt, ...);
the models keep snake_case attributes and map them through field aliases.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

import validation


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Genre(CamelModel):
    name: str = Field(..., description="Genre name")
    description: str = Field("", description="What the genre is about")

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        return value.strip()


class Director(CamelModel):
    name: str = Field(..., description="Director's full name")
    bio: str = Field("", description="Short biography")
    birth_year: Optional[int] = None
    death_year: Optional[int] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        return value.strip()


class Movie(CamelModel):
    """
    Movies collection schema
    Collection name: "movie"
    """
    title: str = Field(..., description="Movie title, unique")
    description: str = Field("", description="Synopsis")
    genre: Optional[Genre] = None
    director: Optional[Director] = None
    image_url: str = Field("", description="Poster image URL")
    featured: bool = Field(False, description="Whether to highlight on homepage")
    runtime_minutes: Optional[int] = Field(None, ge=1)
    rating: str = Field("", description="Age certificate, e.g. PG-13")
    cast: List[str] = Field(default_factory=list, description="Cast member names")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, value: str) -> str:
        return value.strip()


class User(CamelModel):
    """
    Users collection schema
    Collection name: "user"
    """
    username: str = Field(..., description="Unique login name")
    email: EmailStr = Field(..., description="Email address, unique")
    password: str = Field(..., description="bcrypt password hash")
    birthday: Optional[datetime] = None
    favorites: List[str] = Field(default_factory=list, description="Favorite movie _ids")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Request payloads


class RegisterRequest(BaseModel):
    # absent required fields are rejected by the route with 400, see missing_fields()
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    birthday: Optional[datetime] = None

    @field_validator("username")
    @classmethod
    def valid_username(cls, value):
        return value if value is None else validation.check_username(value)

    @field_validator("email")
    @classmethod
    def valid_email(cls, value):
        return value if value is None else validation.check_email(value)

    @field_validator("password")
    @classmethod
    def valid_password(cls, value):
        return value if value is None else validation.check_password(value)

    @field_validator("birthday", mode="before")
    @classmethod
    def valid_birthday(cls, value):
        return validation.check_birthday(value)

    def missing_fields(self) -> List[str]:
        return [name for name in ("username", "email", "password") if not getattr(self, name)]


class UpdateUserRequest(CamelModel):
    new_username: Optional[str] = None
    new_email: Optional[str] = None
    new_password: Optional[str] = None
    new_birthday: Optional[datetime] = None

    @field_validator("new_username")
    @classmethod
    def valid_username(cls, value):
        return value if value is None else validation.check_username(value, "newUsername")

    @field_validator("new_email")
    @classmethod
    def valid_email(cls, value):
        return value if value is None else validation.check_email(value, "newEmail")

    @field_validator("new_password")
    @classmethod
    def valid_password(cls, value):
        return value if value is None else validation.check_password(value, "newPassword")

    @field_validator("new_birthday", mode="before")
    @classmethod
    def valid_birthday(cls, value):
        return validation.check_birthday(value, "newBirthday")


class LoginRequest(BaseModel):
    username: str
    password: str
