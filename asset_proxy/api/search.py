"""Asset search endpoints.

Four fixed routes pin the asset kind; /api/search takes it from ?asset=.
Provider calls run synchronously in the FastAPI threadpool, one upstream
request per search.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from asset_proxy.core.dependencies import get_translator
from asset_proxy.schemas.assets import DEFAULT_TERM, AssetKind, SearchQuery
from asset_proxy.services.translator import GENERIC_FAILURE_LABEL, AssetQueryTranslator

router = APIRouter(prefix="/api", tags=["search"])


def _search(
    translator: AssetQueryTranslator,
    kind: AssetKind,
    q: str,
    page: int,
    per_page: int,
    error_label: Optional[str] = None,
) -> JSONResponse:
    query = SearchQuery(term=q, page=page, page_size=per_page, kind=kind)
    result = translator.search(query, error_label=error_label)
    return JSONResponse(status_code=result.status_code, content=result.to_response_body())


@router.get("/icons")
def search_icons(
    q: str = DEFAULT_TERM,
    page: int = 1,
    per_page: int = 20,
    translator: AssetQueryTranslator = Depends(get_translator),
):
    return _search(translator, AssetKind.ICON, q, page, per_page)


@router.get("/3d-icons")
def search_3d_icons(
    q: str = DEFAULT_TERM,
    page: int = 1,
    per_page: int = 20,
    translator: AssetQueryTranslator = Depends(get_translator),
):
    return _search(translator, AssetKind.THREE_D, q, page, per_page)


@router.get("/illustrations")
def search_illustrations(
    q: str = DEFAULT_TERM,
    page: int = 1,
    per_page: int = 20,
    translator: AssetQueryTranslator = Depends(get_translator),
):
    return _search(translator, AssetKind.ILLUSTRATION, q, page, per_page)


@router.get("/lottie")
def search_animations(
    q: str = DEFAULT_TERM,
    page: int = 1,
    per_page: int = 20,
    translator: AssetQueryTranslator = Depends(get_translator),
):
    """Animated assets. Served as motion vectors where the provider has no Lottie category."""
    return _search(translator, AssetKind.ANIMATION, q, page, per_page)


@router.get("/search")
def search_assets(
    q: str = DEFAULT_TERM,
    page: int = 1,
    per_page: int = 20,
    asset: AssetKind = Query(default=AssetKind.ICON),
    translator: AssetQueryTranslator = Depends(get_translator),
):
    return _search(translator, asset, q, page, per_page, error_label=GENERIC_FAILURE_LABEL)
