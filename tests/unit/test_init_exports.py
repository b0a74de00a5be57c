from __future__ import annotations

import pytest

import dynaquery


def test_init_exposes_lazy_driver_export() -> None:
    from dynaquery.driver import DynamoDriver

    assert dynaquery.DynamoDriver is DynamoDriver


def test_init_unknown_attribute_raises() -> None:
    with pytest.raises(AttributeError):
        dynaquery.does_not_exist  # noqa: B018


def test_all_exports_resolve() -> None:
    for name in dynaquery.__all__:
        assert getattr(dynaquery, name) is not None
