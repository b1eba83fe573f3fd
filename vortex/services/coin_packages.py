"""Coin package catalog: one table shared by the store UI and purchase approval."""

from pydantic import BaseModel

from vortex.core.config import get_settings


class CoinPackage(BaseModel):
    id: str
    coins: int


def list_packages() -> list[CoinPackage]:
    """Catalog in ascending coin order."""
    packages = [CoinPackage(id=pid, coins=coins) for pid, coins in get_settings().coin_packages.items()]
    return sorted(packages, key=lambda p: (p.coins, p.id))


def get_package(package_id: str | None) -> CoinPackage | None:
    if not package_id:
        return None
    coins = get_settings().coin_packages.get(package_id)
    if coins is None:
        return None
    return CoinPackage(id=package_id, coins=coins)
