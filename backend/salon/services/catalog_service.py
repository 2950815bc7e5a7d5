# Overview: Service-layer operations for the service menu; static price lookup.

"""
Service menu (price list).

Items are either flat priced or tiered by hair length (short/medium/long).
Some flat items accept add-ons (e.g. shampoo). A price is resolved once,
when a service is selected, and the resulting value is copied onto the
session, reservation or ledger entry; nothing re-reads the menu later.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping

from ..models.selected_services import HAIR_LENGTHS
from ..validation import ValidationError, NotFoundError, require_price


@dataclass(frozen=True)
class ServiceOption:
    name: str
    price: int


@dataclass(frozen=True)
class MenuItem:
    id: str
    category: str
    name: str
    price: int | None = None
    prices: Mapping[str, int] | None = None
    options: tuple[ServiceOption, ...] = field(default_factory=tuple)

    @property
    def is_tiered(self) -> bool:
        return self.prices is not None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "category": self.category,
            "name": self.name,
            "price": self.price,
            "prices": dict(self.prices) if self.prices else None,
            "options": [{"name": o.name, "price": o.price} for o in self.options],
        }


_SHAMPOO = (ServiceOption("샴푸", 5000),)


def _tiers(short: int, medium: int, long: int) -> dict[str, int]:
    return {"short": short, "medium": medium, "long": long}


CATEGORIES = (
    "기본 서비스",
    "퍼머/매직/염색",
    "볼륨매직/셋팅",
    "탈색/염색",
    "두피/크리닉",
)

MENU: tuple[MenuItem, ...] = (
    MenuItem("cut-male", "기본 서비스", "남자컷트", price=11000),
    MenuItem("cut-female", "기본 서비스", "여자컷트", price=11000, options=_SHAMPOO),
    MenuItem("setting-dry", "기본 서비스", "셋팅드라이", price=11000, options=_SHAMPOO),
    MenuItem("dry-male", "기본 서비스", "남자드라이", price=11000),
    MenuItem("cut-student", "기본 서비스", "학생 컷트(어린이)", price=8800),

    MenuItem("perm-basic", "퍼머/매직/염색", "기본 (건강모/일반)", prices=_tiers(33000, 44000, 66000)),
    MenuItem("perm-premium", "퍼머/매직/염색", "고급영양 (펌/매직/염색)", prices=_tiers(55000, 66000, 88000)),
    MenuItem("perm-unique", "퍼머/매직/염색", "유니크펌 (물펌/먹물)", prices=_tiers(66000, 88000, 110000)),
    MenuItem("perm-carisma", "퍼머/매직/염색", "까리시마 실크펌 (매직)", prices=_tiers(88000, 110000, 165000)),
    MenuItem("perm-clinic", "퍼머/매직/염색", "재생크리닉 (매직)", prices=_tiers(110000, 165000, 220000)),

    MenuItem("volume-basic", "볼륨매직/셋팅", "기본 (건강모/일반)", prices=_tiers(66000, 77000, 88000)),
    MenuItem("volume-premium", "볼륨매직/셋팅", "고급영양 (염색모)", prices=_tiers(77000, 88000, 99000)),
    MenuItem("volume-carisma", "볼륨매직/셋팅", "까리시마 실크펌 (셋팅 볼륨)", prices=_tiers(110000, 165000, 220000)),
    MenuItem("volume-magic-setting", "볼륨매직/셋팅", "매직 셋팅", prices=_tiers(88000, 165000, 220000)),

    MenuItem("bleach", "탈색/염색", "탈색", prices=_tiers(33000, 44000, 66000)),
    MenuItem("dye-pay", "탈색/염색", "페이염색", prices=_tiers(88000, 143000, 143000)),
    MenuItem("dye-miel", "탈색/염색", "미엘염색", prices=_tiers(44000, 77000, 110000)),

    MenuItem("clinic-basic", "두피/크리닉", "크리닉(일반)", price=33000),
    MenuItem("clinic-premium", "두피/크리닉", "고급영양", price=55000),
    MenuItem("clinic-regen", "두피/크리닉", "재생크리닉", price=88000),
    MenuItem("scalp-scaling", "두피/크리닉", "두피스켈링", price=33000),
)

_BY_ID = {item.id: item for item in MENU}


def list_categories() -> list[str]:
    return list(CATEGORIES)


def list_menu(category: str | None = None) -> list[MenuItem]:
    if category is None:
        return list(MENU)
    if category not in CATEGORIES:
        raise ValidationError(f"Unknown category: {category}")
    return [item for item in MENU if item.category == category]


def get_menu_item(service_id: str) -> MenuItem:
    item = _BY_ID.get(service_id)
    if item is None:
        raise NotFoundError(f"Service {service_id} not found")
    return item


def resolve_price(service_id: str, length: str | None = None) -> int:
    """
    Price of one menu item.

    Tiered items need a hair length; flat items ignore it.
    """
    item = get_menu_item(service_id)
    if not item.is_tiered:
        return item.price or 0
    if length is None:
        raise ValidationError(f"{item.name}: length is required (short, medium, long)")
    if length not in HAIR_LENGTHS:
        raise ValidationError(f"length must be one of {', '.join(HAIR_LENGTHS)}")
    return item.prices[length]


def select_services(selections: Iterable[Mapping]) -> list[dict]:
    """
    Turn menu selections into priced service values.

    Each selection: {"service_id": ..., "length": optional, "options": [names]}.
    Add-on prices are folded into the line price and named in the line.
    """
    lines = []
    for sel in selections:
        if not isinstance(sel, Mapping):
            raise ValidationError("Each selection must be an object")
        service_id = sel.get("service_id")
        if not service_id:
            raise ValidationError("service_id is required")

        item = get_menu_item(service_id)
        length = sel.get("length") if item.is_tiered else None
        price = resolve_price(service_id, length)
        name = item.name

        option_names = sel.get("options") or []
        available = {o.name: o for o in item.options}
        for option_name in option_names:
            option = available.get(option_name)
            if option is None:
                raise ValidationError(f"{item.name} has no option '{option_name}'")
            price += option.price
            name = f"{name} + {option.name}"

        lines.append({"name": name, "length": length, "price": price})
    return lines


def normalize_services(services) -> list[dict]:
    """
    Validate already-priced service values coming from a client.

    Returns fresh dicts {name, length, price}; raises ValidationError on an
    empty list or malformed line.
    """
    if not isinstance(services, (list, tuple)) or not services:
        raise ValidationError("At least one service must be selected")

    lines = []
    for raw in services:
        if not isinstance(raw, Mapping):
            raise ValidationError("Each service must be an object")
        name = str(raw.get("name") or "").strip()
        if not name:
            raise ValidationError("Service name is required")
        length = raw.get("length")
        if length is not None and length not in HAIR_LENGTHS:
            raise ValidationError(f"length must be one of {', '.join(HAIR_LENGTHS)}")
        price = require_price(raw.get("price"), "price")
        lines.append({"name": name, "length": length, "price": price})
    return lines


def total_of(services: Iterable[Mapping]) -> int:
    return sum(int(s["price"]) for s in services)
