"""Unit tests for injection name extraction and annotation helpers."""

import functools
from typing import Annotated

import pytest

from injecta.application.annotations import (
    Named,
    annotate,
    explicit_injections,
    parse_annotations,
    scope,
)
from injecta.domain import InvalidCallableError


class TestAnnotate:
    """Test cases for annotate."""

    def test_annotate_with_varargs(self):
        """Test names followed by the callable."""

        def fn(a, b):
            return a, b

        result = annotate("x", "y", fn)

        assert result is fn
        assert fn.__inject__ == ["x", "y"]

    def test_annotate_with_list(self):
        """Test the inline list form."""

        def fn(a):
            return a

        annotate(["config", fn])

        assert fn.__inject__ == ["config"]

    def test_annotate_without_names(self):
        """Test that a bare callable gets an empty list."""

        def fn():
            return None

        annotate(fn)

        assert fn.__inject__ == []

    def test_annotate_is_idempotent(self):
        """Test that annotating twice with the same names changes nothing."""

        def fn(a):
            return a

        annotate("a", fn)
        annotate("a", fn)

        assert fn.__inject__ == ["a"]

    def test_annotate_non_callable_raises(self):
        """Test that the last item must be callable."""
        with pytest.raises(InvalidCallableError):
            annotate("a", "b")

    def test_annotate_empty_raises(self):
        """Test that there must be something to annotate."""
        with pytest.raises(InvalidCallableError):
            annotate([])

    def test_annotate_non_string_name_raises(self):
        """Test that injection names must be strings."""
        with pytest.raises(InvalidCallableError, match="must be strings"):
            annotate(1, lambda a: a)

    def test_annotate_builtin_raises(self):
        """Test that callables refusing attributes are reported."""
        with pytest.raises(InvalidCallableError, match="Cannot attach injection names"):
            annotate("a", len)


class TestScope:
    """Test cases for the scope decorator."""

    def test_scope_tags_class(self):
        """Test that scope names are attached to a class."""

        @scope("request", "session")
        class RequestContext:
            pass

        assert RequestContext.__scope__ == ["request", "session"]

    def test_scope_tags_function(self):
        """Test that scope names are attached to a factory."""

        @scope("request")
        def create_context():
            return {}

        assert create_context.__scope__ == ["request"]


class TestExplicitInjections:
    """Test cases for explicit_injections."""

    def test_returns_none_without_list(self):
        """Test callables without __inject__."""
        assert explicit_injections(lambda a: a) is None

    def test_class_list_not_inherited(self):
        """Test that a subclass doesn't reuse its parent's list."""

        class Base:
            __inject__ = ["a"]

            def __init__(self, a):
                self.a = a

        class Child(Base):
            pass

        assert explicit_injections(Base) == ["a"]
        assert explicit_injections(Child) is None


class TestParseAnnotations:
    """Test cases for parse_annotations."""

    def test_function_parameters(self):
        """Test that positional parameters become names in order."""

        def fn(engine, driver):
            return engine, driver

        assert parse_annotations(fn) == ["engine", "driver"]

    def test_lambda_parameters(self):
        """Test lambdas."""
        assert parse_annotations(lambda a, b, c: None) == ["a", "b", "c"]

    def test_no_parameters(self):
        """Test callables without parameters."""
        assert parse_annotations(lambda: None) == []

    def test_class_constructor_parameters(self):
        """Test that classes use their constructor without self."""

        class Car:
            def __init__(self, engine, power):
                self.engine = engine
                self.power = power

        assert parse_annotations(Car) == ["engine", "power"]

    def test_class_without_constructor(self):
        """Test classes that don't define __init__."""

        class Plain:
            pass

        assert parse_annotations(Plain) == []

    def test_explicit_list_wins(self):
        """Test that __inject__ overrides the signature."""

        def fn(a, b):
            return a, b

        fn.__inject__ = ["x", "y"]

        assert parse_annotations(fn) == ["x", "y"]

    def test_skips_defaults_and_variadics(self):
        """Test that parameters with defaults, *args, **kwargs and keyword-only ones are skipped."""

        def fn(a, b=1, *args, c, d=2, **kwargs):
            return a

        assert parse_annotations(fn) == ["a"]

    def test_named_override(self):
        """Test the Annotated[..., Named(...)] override."""

        def fn(url: Annotated[str, Named("config.database_url")], logger):
            return url, logger

        assert parse_annotations(fn) == ["config.database_url", "logger"]

    def test_named_override_on_constructor(self):
        """Test Named overrides on class constructors."""

        class Repository:
            def __init__(self, db: Annotated[object, Named("database")]):
                self.db = db

        assert parse_annotations(Repository) == ["database"]

    def test_annotated_without_named(self):
        """Test that other Annotated metadata is ignored."""

        def fn(a: Annotated[int, "meta"]):
            return a

        assert parse_annotations(fn) == ["a"]

    def test_callable_instance(self):
        """Test objects defining __call__."""

        class Handler:
            def __call__(self, request, response):
                return request, response

        assert parse_annotations(Handler()) == ["request", "response"]

    def test_partial(self):
        """Test that partially applied arguments are not injected."""

        def fn(a, b):
            return a, b

        assert parse_annotations(functools.partial(fn, 1)) == ["b"]

    def test_non_callable_raises(self):
        """Test that non-callables are rejected."""
        with pytest.raises(InvalidCallableError):
            parse_annotations("not callable")


class TestNamed:
    """Test cases for the Named marker."""

    def test_equality_and_repr(self):
        """Test value semantics."""
        assert Named("a") == Named("a")
        assert Named("a") != Named("b")
        assert hash(Named("a")) == hash(Named("a"))
        assert repr(Named("a")) == "Named('a')"
