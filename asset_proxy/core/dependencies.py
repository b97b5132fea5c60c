from fastapi import Request

from asset_proxy.services.download_counter import DownloadCounter
from asset_proxy.services.translator import AssetQueryTranslator


def get_translator(request: Request) -> AssetQueryTranslator:
    return AssetQueryTranslator(request.app.state.asset_provider)


def get_download_counter(request: Request) -> DownloadCounter:
    return request.app.state.download_counter
