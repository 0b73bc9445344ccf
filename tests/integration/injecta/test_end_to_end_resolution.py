"""End-to-end integration tests for name-based resolution across all layers."""

from typing import Annotated

import pytest

from injecta import (
    CircularDependencyError,
    Injector,
    Named,
    NoProviderError,
    annotate,
)


class Car:
    def __init__(self, engine):
        self.engine = engine

    def start(self):
        return self.engine.start()


class Engine:
    def __init__(self, power):
        self.power = power

    def start(self):
        return f"Starting engine with {self.power}hp"


def create_petrol_engine(power):
    return Engine(power)


class TestEndToEndResolution:
    """Test complete resolution scenarios."""

    def test_car_module(self):
        """Test the canonical car / engine / power wiring."""
        car_module = {
            "car": ("type", Car),
            "engine": ("factory", create_petrol_engine),
            "power": ("value", 1184),
        }

        injector = Injector([car_module])
        car = injector.get("car")

        assert isinstance(car, Car)
        assert car.engine.power == 1184
        assert car.start() == "Starting engine with 1184hp"

    def test_dependencies_across_modules(self):
        """Test that a module resolves providers declared by its dependencies."""

        class Person:
            def __init__(self, name):
                self.name = name

        person_module = {"person": ("type", Person), "name": ("value", "Ada")}
        driver_module = {
            "__depends__": [person_module],
            "driver": ("factory", lambda person: f"{person.name} drives"),
        }

        injector = Injector([driver_module])

        assert injector.get("driver") == "Ada drives"

    def test_later_module_wins(self):
        """Test that the module loaded later overrides an earlier declaration."""
        base = {"greeting": ("value", "hello")}
        override = {"__depends__": [base], "greeting": ("value", "hi")}

        assert Injector([override]).get("greeting") == "hi"
        assert Injector([base, {"greeting": ("value", "hey")}]).get("greeting") == "hey"

    def test_diamond_dependencies_load_once(self):
        """Test that a shared module is loaded and initialized once."""
        inits = []
        shared = {"shared": ("factory", lambda: object()), "__init__": [lambda: inits.append("shared")]}
        left = {"__depends__": [shared], "left": ("factory", lambda shared: shared)}
        right = {"__depends__": [shared], "right": ("factory", lambda shared: shared)}

        injector = Injector([left, right])
        injector.init()

        assert injector.get("left") is injector.get("right")
        assert inits == ["shared"]

    def test_invoke_with_injected_components(self):
        """Test invoking ad-hoc functions against the injector."""
        injector = Injector([{"car": ("type", Car), "engine": ("factory", create_petrol_engine), "power": ("value", 90)}])

        started = injector.invoke(lambda car: car.start())

        assert started == "Starting engine with 90hp"

    def test_inline_annotations_in_modules(self):
        """Test the [name..., callable] payload form inside a module."""
        injector = Injector(
            [
                {
                    "engine": ("factory", ["horsepower", lambda hp: Engine(hp)]),
                    "horsepower": ("value", 300),
                }
            ]
        )

        assert injector.get("engine").power == 300

    def test_named_parameter_override(self):
        """Test Annotated[..., Named(...)] parameters."""

        class Repository:
            def __init__(self, url: Annotated[str, Named("config.database.url")]):
                self.url = url

        injector = Injector(
            [
                {
                    "config": ("value", {"database": {"url": "postgres://"}}),
                    "repository": ("type", Repository),
                }
            ]
        )

        assert injector.get("repository").url == "postgres://"

    def test_explicit_annotation_on_class(self):
        """Test classes annotated with explicit names."""

        class Service:
            def __init__(self, first, second):
                self.values = (first, second)

        annotate("b", "a", Service)
        injector = Injector([{"service": ("type", Service), "a": ("value", 1), "b": ("value", 2)}])

        assert injector.get("service").values == (2, 1)

    def test_injector_can_be_injected(self):
        """Test the reserved self name as a dependency."""
        injector = Injector([{"locator": ("factory", lambda injector: injector)}])

        assert injector.get("locator") is injector

    def test_dotted_lookup_matches_navigation(self):
        """Test that dotted lookup equals resolve-then-navigate."""

        class Settings:
            def __init__(self):
                self.database = {"url": "sqlite://"}

        injector = Injector([{"settings": ("type", Settings)}])

        assert injector.get("settings.database.url") == injector.get("settings").database["url"]

    def test_circular_dependency_across_modules(self):
        """Test cycles spanning modules."""

        class A:
            def __init__(self, b):
                self.b = b

        class B:
            def __init__(self, a):
                self.a = a

        injector = Injector([{"a": ("type", A)}, {"b": ("type", B)}])

        with pytest.raises(CircularDependencyError) as exc_info:
            injector.get("a")

        assert exc_info.value.chain == ["a", "b", "a"]

    def test_recovers_after_failure(self):
        """Test that resolution works normally after an error."""
        injector = Injector([{"broken": ("factory", lambda missing: missing), "ok": ("type", Car), "engine": ("value", "e")}])

        with pytest.raises(NoProviderError) as exc_info:
            injector.get("broken")
        assert exc_info.value.chain == ["broken", "missing"]

        assert injector.get("ok").engine == "e"

    def test_eager_initialization(self):
        """Test __init__ entries resolving components eagerly."""
        created = []

        class Eager:
            def __init__(self):
                created.append(self)

        injector = Injector([{"eager": ("type", Eager), "__init__": ["eager", lambda eager: created.append("ready")]}])
        assert created == []

        injector.init()

        assert created == [injector.get("eager"), "ready"]
