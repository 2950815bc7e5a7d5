"""
Service menu tests: price resolution and selection into priced lines.
"""

import pytest

from salon.services import catalog_service
from salon.validation import NotFoundError, ValidationError


def test_menu_by_category():
    basics = catalog_service.list_menu("기본 서비스")
    assert {item.id for item in basics} >= {"cut-male", "cut-female"}
    assert all(item.category == "기본 서비스" for item in basics)

    with pytest.raises(ValidationError):
        catalog_service.list_menu("없는 분류")


def test_every_item_has_a_price():
    for item in catalog_service.list_menu():
        if item.is_tiered:
            assert set(item.prices) == {"short", "medium", "long"}
        else:
            assert item.price is not None


def test_resolve_flat_and_tiered_prices():
    assert catalog_service.resolve_price("cut-male") == 11000
    assert catalog_service.resolve_price("perm-basic", "short") == 33000
    assert catalog_service.resolve_price("perm-basic", "long") == 66000


def test_tiered_item_needs_length():
    with pytest.raises(ValidationError):
        catalog_service.resolve_price("perm-basic")
    with pytest.raises(ValidationError):
        catalog_service.resolve_price("perm-basic", "extra-long")


def test_unknown_item():
    with pytest.raises(NotFoundError):
        catalog_service.get_menu_item("nope")


def test_select_services_folds_options():
    lines = catalog_service.select_services([
        {"service_id": "setting-dry", "options": ["샴푸"]},
        {"service_id": "bleach", "length": "short"},
    ])
    assert lines == [
        {"name": "셋팅드라이 + 샴푸", "length": None, "price": 16000},
        {"name": "탈색", "length": "short", "price": 33000},
    ]
    assert catalog_service.total_of(lines) == 49000


def test_unknown_option_is_rejected():
    with pytest.raises(ValidationError):
        catalog_service.select_services([{"service_id": "cut-male", "options": ["샴푸"]}])


@pytest.mark.parametrize(
    "services",
    [
        [],
        None,
        [{"name": "", "price": 1000}],
        [{"name": "커트", "price": -1}],
        [{"name": "커트", "price": "11000"}],
        [{"name": "커트", "length": "huge", "price": 1000}],
    ],
)
def test_normalize_rejects_bad_lines(services):
    with pytest.raises(ValidationError):
        catalog_service.normalize_services(services)
