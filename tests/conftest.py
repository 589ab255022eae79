"""Shared fixtures for the inkwell test suite."""

import pytest

CHARACTERS = {
    "owl": "/owl.webp",
    "unicorn": "/unicorn.webp",
}


@pytest.fixture
def characters():
    return dict(CHARACTERS)


@pytest.fixture
def author(django_user_model):
    return django_user_model.objects.create_user(username="karen", password="pw")


@pytest.fixture
def other_author(django_user_model):
    return django_user_model.objects.create_user(username="lucas", password="pw")
