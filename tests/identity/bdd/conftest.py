"""Shared BDD fixtures and step definitions for the Identity domain."""

import pytest
from pytest_bdd import given, parsers


@pytest.fixture()
def outcome():
    """Container for the workflow result or the error it raised."""
    return {"result": None, "exc": None}


@given(parsers.cfparse('a user registered with "{email}"'), target_fixture="registered_user")
def registered_user(user_store, email):
    return user_store.add_user(email=email, password_hash="old-hash")
