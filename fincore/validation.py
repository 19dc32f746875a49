"""
Input Validation Module

Pydantic forms for the values a front end collects before calling the
facade. The rules are format checks only; uniqueness and credentials are
the services' business.
"""

import re
from decimal import Decimal

from pydantic import BaseModel, ValidationError, field_validator

USERNAME_MIN_LENGTH = 6
USERNAME_MAX_LENGTH = 20
PASSWORD_MIN_LENGTH = 12
PASSWORD_MAX_LENGTH = 64
PASSWORD_MIN_DIGITS = 2
PASSWORD_MIN_SPECIALS = 2

_USERNAME_ILLEGAL = re.compile(r"[^a-zA-Z\-]")
_BUSINESS_NAME_ILLEGAL = re.compile(r"[^a-zA-Z\s]")


def check_username(value: str) -> str:
    username = value.strip()
    if not username:
        raise ValueError("Username was empty")
    if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
        raise ValueError("Username length incorrect")
    if _USERNAME_ILLEGAL.search(username):
        raise ValueError("Illegal characters in username")
    return username


def check_password(value: str) -> str:
    password = value.strip()
    if not password:
        raise ValueError("Password was empty")
    if not PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH:
        raise ValueError("Password length incorrect")
    digits = sum(1 for c in password if c.isdigit())
    specials = sum(1 for c in password if not (c.isdigit() or c.isalpha() or c.isspace()))
    if digits < PASSWORD_MIN_DIGITS or specials < PASSWORD_MIN_SPECIALS:
        raise ValueError("Invalid password signature")
    return password


def check_login_name(value: str) -> str:
    """Individuals sign in with their username, organizations with their business name"""
    name = value.strip()
    if name and not _BUSINESS_NAME_ILLEGAL.search(name):
        return name
    return check_username(value)


def check_person_name(value: str) -> str:
    name = value.strip()
    if not name:
        raise ValueError("Name was empty")
    if _USERNAME_ILLEGAL.search(name):
        raise ValueError("Name contains illegal characters")
    return name


def check_business_name(value: str) -> str:
    name = value.strip()
    if not name:
        raise ValueError("Business name was empty")
    if _BUSINESS_NAME_ILLEGAL.search(name):
        raise ValueError("Name contains illegal characters")
    return name


class LoginForm(BaseModel):
    username: str
    password: str

    @field_validator("username")
    @classmethod
    def _username(cls, v: str) -> str:
        return check_login_name(v)

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        return check_password(v)


class IndividualSignupForm(BaseModel):
    username: str
    password: str
    first_name: str
    last_name: str

    @field_validator("username")
    @classmethod
    def _username(cls, v: str) -> str:
        return check_username(v)

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        return check_password(v)

    @field_validator("first_name", "last_name")
    @classmethod
    def _names(cls, v: str) -> str:
        return check_person_name(v)


class OrganizationSignupForm(BaseModel):
    business_name: str
    password: str

    @field_validator("business_name")
    @classmethod
    def _business_name(cls, v: str) -> str:
        return check_business_name(v)

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        return check_password(v)


class AmountForm(BaseModel):
    """A strictly positive amount typed at a prompt"""
    amount: Decimal

    @field_validator("amount")
    @classmethod
    def _positive(cls, v: Decimal) -> Decimal:
        if not v.is_finite() or v <= 0:
            raise ValueError("Amount must be greater than zero")
        return v


def describe_validation_error(error: ValidationError) -> str:
    """First human-readable message of a pydantic ValidationError"""
    errors = error.errors()
    if not errors:
        return str(error)
    message = errors[0].get("msg", str(error))
    # pydantic prefixes ValueError messages raised inside validators
    return message.removeprefix("Value error, ")
