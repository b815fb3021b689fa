import re

from fastapi import APIRouter, Depends, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from stockinfo.api.errors import custom_api_error, handle_api_errors
from stockinfo.db.models import Overview
from stockinfo.db.repository import OverviewRepository
from stockinfo.db.session import get_session
from stockinfo.providers.alpha_vantage import AlphaVantageClient, get_overview_client
from stockinfo.schemas.overview import DeleteAllResult, ErrorBody, OverviewData, OverviewRecord

router = APIRouter(
    prefix="/api/overview",
    tags=["overview"],
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorBody},
        status.HTTP_404_NOT_FOUND: {"model": ErrorBody},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorBody},
    },
)
health_router = APIRouter()

_ID_RE = re.compile(r"-?[0-9]+")
# Bounds of the Integer primary key column.
_MIN_ID = -(2**31)
_MAX_ID = 2**31 - 1


def get_repository(session: AsyncSession = Depends(get_session)) -> OverviewRepository:
    return OverviewRepository(session)


def _normalize_symbol(symbol: str) -> str:
    return symbol.strip().upper()


def _parse_id(raw_id: str) -> int:
    cleaned = raw_id.strip()
    if not _ID_RE.fullmatch(cleaned):
        raise custom_api_error(f"Invalid ID: {raw_id}", status.HTTP_400_BAD_REQUEST)
    return int(cleaned)


def _in_id_range(overview_id: int) -> bool:
    return _MIN_ID <= overview_id <= _MAX_ID


def _to_record(overview: Overview) -> OverviewRecord:
    return OverviewRecord.model_validate(overview)


def _require_found(overview: Overview | None, description: str) -> OverviewRecord:
    if overview is None:
        raise custom_api_error(f"Overview not found: {description}", status.HTTP_404_NOT_FOUND)
    return _to_record(overview)


async def _find_many(
    repo: OverviewRepository, field: str, value: str, description: str
) -> list[OverviewRecord]:
    overviews = await repo.find_all_by(field, value)
    if not overviews:
        raise custom_api_error(
            f"No overviews found with {description}: {value}", status.HTTP_404_NOT_FOUND
        )
    return [_to_record(overview) for overview in overviews]


async def _fetch_overview_data(client: AlphaVantageClient, symbol: str) -> OverviewData:
    payload = await run_in_threadpool(client.fetch_overview, symbol)
    if payload is None:
        raise custom_api_error(
            "Did not receive response from Alpha Vantage",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    data = OverviewData.model_validate(payload)
    if data.symbol is None:
        raise custom_api_error(f"Invalid stock symbol: {symbol}", status.HTTP_404_NOT_FOUND)
    return data


@health_router.get("/health")
def health() -> dict:
    return {"status": "ok"}


@router.get("/all", response_model=list[OverviewRecord])
@handle_api_errors
async def get_all_overviews(
    repo: OverviewRepository = Depends(get_repository),
) -> list[OverviewRecord]:
    overviews = await repo.find_all()
    return [_to_record(overview) for overview in overviews]


@router.delete("/deleteall", response_model=DeleteAllResult)
@handle_api_errors
async def delete_all_overviews(
    repo: OverviewRepository = Depends(get_repository),
) -> DeleteAllResult:
    total = await repo.count()
    if total == 0:
        raise custom_api_error("No overviews to delete", status.HTTP_404_NOT_FOUND)
    await repo.delete_all()
    return DeleteAllResult(message=f"Overviews deleted: {total}", deleted=total)


@router.get("/id/{overview_id}", response_model=OverviewRecord)
@handle_api_errors
async def get_overview_by_id(
    overview_id: str, repo: OverviewRepository = Depends(get_repository)
) -> OverviewRecord:
    parsed_id = _parse_id(overview_id)
    overview = await repo.find_by_id(parsed_id) if _in_id_range(parsed_id) else None
    return _require_found(overview, f"id {parsed_id}")


@router.delete("/id/{overview_id}", response_model=OverviewRecord)
@handle_api_errors
async def delete_overview_by_id(
    overview_id: str, repo: OverviewRepository = Depends(get_repository)
) -> OverviewRecord:
    parsed_id = _parse_id(overview_id)
    overview = await repo.find_by_id(parsed_id) if _in_id_range(parsed_id) else None
    record = _require_found(overview, f"id {parsed_id}")
    await repo.delete(overview)
    return record


@router.get("/symbol/{symbol}", response_model=OverviewRecord)
@handle_api_errors
async def get_overview_by_symbol(
    symbol: str, repo: OverviewRepository = Depends(get_repository)
) -> OverviewRecord:
    normalized = _normalize_symbol(symbol)
    return _require_found(await repo.find_by_symbol(normalized), f"symbol {normalized}")


@router.get("/name/{name}", response_model=OverviewRecord)
@handle_api_errors
async def get_overview_by_name(
    name: str, repo: OverviewRepository = Depends(get_repository)
) -> OverviewRecord:
    return _require_found(await repo.find_by_name(name), f"name {name}")


@router.get("/exchange/{exchange}", response_model=list[OverviewRecord])
@handle_api_errors
async def get_overviews_by_exchange(
    exchange: str, repo: OverviewRepository = Depends(get_repository)
) -> list[OverviewRecord]:
    return await _find_many(repo, "exchange", exchange, "exchange")


@router.get("/assetType/{asset_type}", response_model=list[OverviewRecord])
@handle_api_errors
async def get_overviews_by_asset_type(
    asset_type: str, repo: OverviewRepository = Depends(get_repository)
) -> list[OverviewRecord]:
    return await _find_many(repo, "asset_type", asset_type, "asset type")


@router.get("/currency/{currency}", response_model=list[OverviewRecord])
@handle_api_errors
async def get_overviews_by_currency(
    currency: str, repo: OverviewRepository = Depends(get_repository)
) -> list[OverviewRecord]:
    return await _find_many(repo, "currency", currency, "currency")


@router.get("/country/{country}", response_model=list[OverviewRecord])
@handle_api_errors
async def get_overviews_by_country(
    country: str, repo: OverviewRepository = Depends(get_repository)
) -> list[OverviewRecord]:
    return await _find_many(repo, "country", country, "country")


@router.get("/sector/{sector}", response_model=list[OverviewRecord])
@handle_api_errors
async def get_overviews_by_sector(
    sector: str, repo: OverviewRepository = Depends(get_repository)
) -> list[OverviewRecord]:
    return await _find_many(repo, "sector", sector, "sector")


# Registered last so the fixed paths above are matched first.
@router.get("/{symbol}", response_model=OverviewData)
@handle_api_errors
async def fetch_overview(
    symbol: str, client: AlphaVantageClient = Depends(get_overview_client)
) -> OverviewData:
    return await _fetch_overview_data(client, _normalize_symbol(symbol))


@router.post("/{symbol}", response_model=OverviewRecord)
@handle_api_errors
async def upload_overview(
    symbol: str,
    client: AlphaVantageClient = Depends(get_overview_client),
    repo: OverviewRepository = Depends(get_repository),
) -> OverviewRecord:
    data = await _fetch_overview_data(client, _normalize_symbol(symbol))
    try:
        saved = await repo.save(Overview(**data.model_dump()))
    except IntegrityError:
        # Only a clash on the unique symbol is the caller's fault.
        if await repo.find_by_symbol(data.symbol) is None:
            raise
        raise custom_api_error(
            "Can not upload duplicate stock data", status.HTTP_400_BAD_REQUEST
        ) from None
    return _to_record(saved)
