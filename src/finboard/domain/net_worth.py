"""Net worth summation and service."""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

import structlog

from finboard.database.base import Database
from finboard.domain.currency import CurrencyConverter
from finboard.domain.entities import AssetLiability, EntryType, NetWorthPoint, NetWorthSummary
from finboard.domain.errors import NotFoundError, entity_not_found
from finboard.domain.validation import AssetLiabilityInput, validate

logger = structlog.get_logger(__name__)

ZERO = Decimal("0")


def _value(item: AssetLiability, converter: Optional[CurrencyConverter]) -> Decimal:
    if converter is None:
        return item.value
    return converter.convert(item.value, item.currency)


def net_worth_summary(
    items: Iterable[AssetLiability], converter: Optional[CurrencyConverter] = None
) -> NetWorthSummary:
    """Total assets minus total liabilities."""
    assets = ZERO
    liabilities = ZERO
    for item in items:
        if item.type == EntryType.ASSET:
            assets += _value(item, converter)
        else:
            liabilities += _value(item, converter)
    return NetWorthSummary(assets=assets, liabilities=liabilities, net_worth=assets - liabilities)


def net_worth_history(
    items: Iterable[AssetLiability], converter: Optional[CurrencyConverter] = None
) -> list[NetWorthPoint]:
    """Per-date totals, oldest first.

    Each point only covers entries recorded on that date; it is not a
    running balance.
    """
    by_date: dict[date, list[AssetLiability]] = defaultdict(list)
    for item in items:
        by_date[item.date].append(item)

    points = []
    for day in sorted(by_date):
        summary = net_worth_summary(by_date[day], converter=converter)
        points.append(
            NetWorthPoint(
                date=day,
                assets=summary.assets,
                liabilities=summary.liabilities,
                net_worth=summary.net_worth,
            )
        )
    return points


class NetWorthService:
    """Service for asset and liability entries."""

    def __init__(self, db: Database, owner: str):
        """Initialize net worth service.

        Args:
            db: Database instance
            owner: User whose entries this service reads and writes
        """
        self.db = db
        self.owner = owner

    def add_entry(
        self,
        type: str,
        name: str,
        value: Decimal,
        category: str,
        entry_date: date,
        currency: str = "USD",
    ) -> int:
        """Record an asset or liability.

        Returns:
            Entry ID

        Raises:
            ValidationError: If any field is out of bounds
        """
        data = validate(
            AssetLiabilityInput,
            type=type,
            name=name,
            value=value,
            category=category,
            date=entry_date,
            currency=currency,
        )
        entry_id = self.db.create_asset_liability(
            owner=self.owner,
            type=data.type,
            name=data.name,
            value=data.value,
            currency=data.currency,
            category=data.category,
            date=data.date,
        )
        logger.info("net_worth_entry_added", owner=self.owner, entry_id=entry_id, type=data.type.value)
        return entry_id

    def list_entries(self) -> list[AssetLiability]:
        return self.db.list_assets_liabilities(self.owner)

    def require_entry(self, entry_id: int) -> AssetLiability:
        entry = self.db.get_asset_liability(self.owner, entry_id)
        if entry is None:
            raise NotFoundError(entity_not_found("entry", entry_id))
        return entry

    def update_entry(
        self,
        entry_id: int,
        name: Optional[str] = None,
        value: Optional[Decimal] = None,
        category: Optional[str] = None,
        entry_date: Optional[date] = None,
    ) -> None:
        """Revalue or rename an entry. Type and currency are fixed.

        Raises:
            NotFoundError: If the entry doesn't exist
            ValidationError: If the new values are out of bounds
        """
        entry = self.require_entry(entry_id)
        data = validate(
            AssetLiabilityInput,
            type=entry.type,
            name=name if name is not None else entry.name,
            value=value if value is not None else entry.value,
            category=category if category is not None else entry.category,
            date=entry_date or entry.date,
            currency=entry.currency,
        )
        self.db.update_asset_liability(
            self.owner,
            entry_id,
            name=data.name,
            value=data.value,
            category=data.category,
            date=data.date,
        )
        logger.info("net_worth_entry_updated", owner=self.owner, entry_id=entry_id)

    def delete_entry(self, entry_id: int) -> None:
        self.require_entry(entry_id)
        self.db.delete_asset_liability(self.owner, entry_id)

    def get_summary(self, converter: Optional[CurrencyConverter] = None) -> NetWorthSummary:
        return net_worth_summary(self.list_entries(), converter=converter)

    def get_history(self, converter: Optional[CurrencyConverter] = None) -> list[NetWorthPoint]:
        return net_worth_history(self.list_entries(), converter=converter)
