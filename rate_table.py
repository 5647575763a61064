# rate_table.py
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Tuple

import pricing_config as cfg


CONSTRUCTION_CATALOG = "construction-finishing"
RESIDENT_CATALOG = "resident-services"


class PriceUnit(str, Enum):
    PER_PROJECT = "per project"
    PER_SQM = "per sqm"
    PER_UNIT = "per unit"
    PER_PACKAGE = "per package"


class UnknownSelectionError(LookupError):
    """Raised when a service/project/package key has no rate entry."""

    def __init__(self, key: str, catalog: str = ""):
        self.key = key
        self.catalog = catalog
        where = f" in catalog {catalog!r}" if catalog else ""
        super().__init__(f"unknown selection: {key!r}{where}")


@dataclass(frozen=True)
class RateEntry:
    key: str
    base_price: float
    price_unit: PriceUnit
    price_range: Tuple[float, float]
    components: Mapping[str, float] = field(default_factory=dict)
    label: str = ""
    bulk_discount_eligible: bool = True
    description: str = ""

    def __post_init__(self):
        if self.base_price <= 0:
            raise ValueError(f"base_price must be > 0 for {self.key}")
        object.__setattr__(self, "components", MappingProxyType(dict(self.components)))
        if not self.label:
            object.__setattr__(self, "label", f"{self.key} ({self.price_unit.value})")


class RateTable:
    """Immutable, exact-match lookup of rate entries for one catalog."""

    def __init__(self, name: str, version: str, entries):
        self.name = name
        self.version = version
        table: Dict[str, RateEntry] = {}
        for entry in entries:
            if entry.key in table:
                raise ValueError(f"duplicate rate entry {entry.key!r} in {name}")
            table[entry.key] = entry
        self._entries = MappingProxyType(table)

    def lookup(self, key: str) -> RateEntry:
        try:
            return self._entries[key]
        except (KeyError, TypeError):
            raise UnknownSelectionError(key, self.name) from None

    def keys(self):
        return list(self._entries.keys())

    def __contains__(self, key) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[RateEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"RateTable({self.name!r}, version={self.version!r}, entries={len(self)})"


def _construction_entries():
    for key, item in cfg.CONSTRUCTION_PROJECTS.items():
        yield RateEntry(
            key=key,
            base_price=item["base_price"],
            price_unit=PriceUnit(item["price_unit"]),
            price_range=tuple(item["price_range"]),
            components=item["components"],
        )
    for key, item in cfg.CONSTRUCTION_PACKAGES.items():
        yield RateEntry(
            key=key,
            base_price=item["base_price"],
            price_unit=PriceUnit.PER_PACKAGE,
            price_range=tuple(item["price_range"]),
            label=key.replace("-", " "),
            bulk_discount_eligible=item["bulk_discount"],
            description=item["description"],
        )


def _resident_entries():
    for key, item in cfg.RESIDENT_PACKAGES.items():
        yield RateEntry(
            key=key,
            base_price=item["price"],
            price_unit=PriceUnit.PER_PACKAGE,
            price_range=(item["price"], item["price"]),
            label=key.replace("-", " "),
            description=item["description"],
        )
    for key, item in cfg.AMC_PACKAGES.items():
        yield RateEntry(
            key=key,
            base_price=item["annual"],
            price_unit=PriceUnit.PER_PACKAGE,
            price_range=(item["quarterly"] * 4, item["annual"]),
            label=key.replace("-", " "),
            description=item["description"],
        )
    for key, item in cfg.INDIVIDUAL_SERVICES.items():
        yield RateEntry(
            key=key,
            base_price=item["price"],
            price_unit=PriceUnit.PER_UNIT,
            price_range=(item["price"], item["price"]),
            description=item["description"],
        )


CATALOGS = MappingProxyType({
    CONSTRUCTION_CATALOG: RateTable(CONSTRUCTION_CATALOG, "v1", _construction_entries()),
    RESIDENT_CATALOG: RateTable(RESIDENT_CATALOG, "v1", _resident_entries()),
})


def get_rate_table(catalog: str = CONSTRUCTION_CATALOG) -> RateTable:
    try:
        return CATALOGS[catalog]
    except KeyError:
        raise UnknownSelectionError(catalog) from None


def lookup(key: str, catalog: str = CONSTRUCTION_CATALOG) -> RateEntry:
    return get_rate_table(catalog).lookup(key)
