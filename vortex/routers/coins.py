from fastapi import APIRouter

from vortex.core.exceptions import NotFoundError
from vortex.services import coin_packages as coin_packages_service

router = APIRouter()


@router.get("/packages")
async def list_coin_packages():
    """Coin packages offered in the store; same table used to credit approved purchases."""
    packages = coin_packages_service.list_packages()
    return {"packages": [p.model_dump() for p in packages]}


@router.get("/packages/{package_id}")
async def get_coin_package(package_id: str):
    package = coin_packages_service.get_package(package_id)
    if not package:
        raise NotFoundError(f"Package {package_id} not found")
    return package.model_dump()
