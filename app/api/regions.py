from typing import Optional
from fastapi import APIRouter, Depends, Query

from app.services.regions import RegionDirectory, get_region_directory

router = APIRouter(prefix="/api", tags=["regions"])


@router.get("/regions")
async def list_regions(
    region: Optional[str] = Query(None),
    with_currency: Optional[str] = Query(None, alias="withCurrency"),
    directory: RegionDirectory = Depends(get_region_directory),
):
    if region:
        # any non-empty withCurrency value enables enrichment
        if with_currency:
            return {"countries": directory.countries_with_currency(region)}
        return {"countries": directory.countries(region)}

    return {"regions": directory.regions()}
