from fastapi import APIRouter, Depends

from asset_proxy.core.dependencies import get_download_counter
from asset_proxy.schemas.downloads import DownloadCountResponse, DownloadCountsResponse
from asset_proxy.services.download_counter import DownloadCounter

router = APIRouter(prefix="/api/downloads", tags=["downloads"])


@router.get("", response_model=DownloadCountsResponse)
def get_all_downloads(counter: DownloadCounter = Depends(get_download_counter)):
    return DownloadCountsResponse(downloads=counter.all())


@router.get("/{asset_id}", response_model=DownloadCountResponse)
def get_downloads(asset_id: str, counter: DownloadCounter = Depends(get_download_counter)):
    return DownloadCountResponse(downloads=counter.get(asset_id))


@router.post("/{asset_id}", response_model=DownloadCountResponse)
def increment_downloads(asset_id: str, counter: DownloadCounter = Depends(get_download_counter)):
    return DownloadCountResponse(downloads=counter.increment(asset_id))
