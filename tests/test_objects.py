from __future__ import annotations

import pytest

from sabres import Descriptor, DescriptorType, SabresObject
from sabres.errors import ObjectNotFound, SchemaConflict, UnrecognizedKey
from sabres.objects import create, create_without_data, register_type

from conftest import Director, Movie


def test_subclasses_register_name_factory_and_schema() -> None:
    assert Movie.object_name == "Movie"
    assert isinstance(create("Movie"), Movie)
    shell = create_without_data("Director", 5)
    assert isinstance(shell, Director)
    assert shell.object_id == 5
    assert not shell.is_data_available
    assert Movie.registry.get_keys("Director") == ["id", "name"]


def test_object_name_can_be_overridden() -> None:
    class Actor(SabresObject):
        object_name = "Performer"
        descriptors = (Descriptor("name", DescriptorType.string),)

    assert isinstance(create("Performer"), Actor)
    assert Actor.registry.is_registered("Performer")


def test_redeclaring_a_type_differently_is_a_conflict() -> None:
    with pytest.raises(SchemaConflict):

        class Movie(SabresObject):  # noqa: F811
            descriptors = (Descriptor("title", DescriptorType.number),)


def test_explicit_factories() -> None:
    class Blank(SabresObject):
        pass

    made = []

    def ctor() -> Blank:
        obj = Blank()
        made.append(obj)
        return obj

    register_type("Blank", ctor)
    assert create("Blank") is made[0]
    with pytest.raises(ObjectNotFound):
        create("NeverDeclared")


def test_put_and_get_validate_keys() -> None:
    movie = Movie(title="Heat")
    assert movie.get("title") == "Heat"
    assert movie.get("year") is None
    with pytest.raises(UnrecognizedKey):
        movie.put("budget", 1)
    with pytest.raises(UnrecognizedKey):
        movie.get("budget")
    with pytest.raises(TypeError):
        movie.put("director", 3)


def test_fetch_into_shell(db, movies) -> None:
    shell = create_without_data("Movie", movies[0].object_id)
    shell.fetch(db)
    assert shell.get("title") == "Fight Club"
    assert shell.is_data_available


def test_fetch_without_table_or_row(db) -> None:
    with pytest.raises(ObjectNotFound):
        create_without_data("Movie", 1).fetch(db)
    Movie(title="Heat").save(db)
    with pytest.raises(ObjectNotFound):
        create_without_data("Movie", 2).fetch(db)


def test_delete_missing_row(db, movies) -> None:
    ghost = create_without_data("Movie", 999)
    with pytest.raises(ObjectNotFound):
        ghost.delete(db)
