"""Tests for routable.__init__ — lazy imports cover all public names."""

import pytest

import routable


@pytest.mark.parametrize("name", routable.__all__)
def test_all_names_resolve(name: str) -> None:
    """Every name in __all__ must resolve via __getattr__ without error."""
    obj = getattr(routable, name)
    assert obj is not None, f"routable.{name} resolved to None"


def test_router_is_the_routing_router() -> None:
    from routable.routing.router import Router

    assert routable.Router is Router


def test_unknown_name_raises_attribute_error() -> None:
    """Accessing an unregistered name raises AttributeError."""
    with pytest.raises(AttributeError, match="no attribute"):
        routable.__getattr__("ThisDoesNotExist")


def test_version_matches_distribution_metadata() -> None:
    from importlib.metadata import version

    assert routable.__version__ == version("routable")
