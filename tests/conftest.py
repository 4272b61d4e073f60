"""
tests.conftest

Shared fixtures: object types, a file-backed database per test, seed data.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from sabres import Descriptor, DescriptorType, SabresObject, create_database
from sabres.settings import Settings


class Director(SabresObject):
    descriptors = (Descriptor("name", DescriptorType.string),)


class Movie(SabresObject):
    descriptors = (
        Descriptor("title", DescriptorType.string),
        Descriptor("year", DescriptorType.number),
        Descriptor("rating", DescriptorType.number),
        Descriptor("watched", DescriptorType.boolean),
        Descriptor("released", DescriptorType.date),
        Descriptor("director", DescriptorType.pointer, "Director"),
    )


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(env="test", database_url=f"sqlite:///{tmp_path / 'sabres.db'}")


@pytest.fixture
def db(settings):
    database = create_database(settings=settings)
    yield database
    database.dispose()


@pytest.fixture
def fincher(db) -> Director:
    director = Director(name="David Fincher")
    director.save(db)
    return director


@pytest.fixture
def movies(db, fincher) -> list[Movie]:
    seeded = [
        Movie(
            title="Fight Club",
            year=1999,
            rating=8.8,
            watched=True,
            released=datetime(1999, 10, 15, tzinfo=timezone.utc),
            director=fincher,
        ),
        Movie(
            title="Se7en",
            year=1995,
            rating=8.6,
            watched=False,
            released=datetime(1995, 9, 22, tzinfo=timezone.utc),
            director=fincher,
        ),
    ]
    for movie in seeded:
        movie.save(db)
    return seeded
