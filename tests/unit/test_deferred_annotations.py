"""Discovery on classes whose annotations are deferred strings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated, ForwardRef, Optional

import pytest

from memberfinder import Marker, PythonIntrospector, ReflectionFinder

if TYPE_CHECKING:
    from shop.repositories import Repository


class Inject(Marker):
    pass


class Service:
    repo: Annotated[Repository, Inject()]
    name: Annotated[str, Inject()]
    fallback: Optional[Annotated[Repository, Inject()]] = None
    label: str = ""


class Gateway:
    client: Annotated[transport.Client, Inject()]
    timeout: Annotated[float, Inject()]


@pytest.fixture
def finder():
    return ReflectionFinder()


class TestDeferredAnnotations:

    def test_type_checking_import_does_not_hide_markers(self, finder):
        fields = finder.find_fields(Service, Inject)

        assert [f.name for f in fields] == ["repo", "name", "fallback"]

    def test_resolvable_annotations_are_fully_evaluated(self):
        fields = {f.name: f for f in PythonIntrospector().declared_fields(Service)}

        assert fields["name"].annotation is str
        assert fields["label"].annotation is str
        assert fields["label"].markers == ()

    def test_missing_names_become_forward_references(self):
        fields = {f.name: f for f in PythonIntrospector().declared_fields(Service)}

        assert fields["repo"].annotation == ForwardRef("Repository")

    def test_unresolvable_annotation_only_skips_itself(self, finder, caplog):
        with caplog.at_level(logging.WARNING, logger="memberfinder"):
            fields = finder.find_fields(Gateway, Inject)

        assert [f.name for f in fields] == ["timeout"]
        assert any("Gateway.client" in r.getMessage() for r in caplog.records)
