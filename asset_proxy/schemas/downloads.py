from typing import Dict

from pydantic import BaseModel


class DownloadCountResponse(BaseModel):
    success: bool = True
    downloads: int


class DownloadCountsResponse(BaseModel):
    success: bool = True
    downloads: Dict[str, int]
