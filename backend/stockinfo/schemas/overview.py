from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class OverviewData(BaseModel):
    """Company overview as the provider names its fields.

    Values are passed through untouched; the provider reports numbers as
    strings and uses "None" or "-" for missing data.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        from_attributes=True,
        coerce_numbers_to_str=True,
    )

    symbol: str | None = Field(default=None, alias="Symbol")
    asset_type: str | None = Field(default=None, alias="AssetType")
    name: str | None = Field(default=None, alias="Name")
    description: str | None = Field(default=None, alias="Description")
    cik: str | None = Field(default=None, alias="CIK")
    exchange: str | None = Field(default=None, alias="Exchange")
    currency: str | None = Field(default=None, alias="Currency")
    country: str | None = Field(default=None, alias="Country")
    sector: str | None = Field(default=None, alias="Sector")
    industry: str | None = Field(default=None, alias="Industry")
    address: str | None = Field(default=None, alias="Address")
    fiscal_year_end: str | None = Field(default=None, alias="FiscalYearEnd")
    latest_quarter: str | None = Field(default=None, alias="LatestQuarter")
    market_capitalization: str | None = Field(default=None, alias="MarketCapitalization")
    ebitda: str | None = Field(default=None, alias="EBITDA")
    pe_ratio: str | None = Field(default=None, alias="PERatio")
    peg_ratio: str | None = Field(default=None, alias="PEGRatio")
    book_value: str | None = Field(default=None, alias="BookValue")
    dividend_per_share: str | None = Field(default=None, alias="DividendPerShare")
    dividend_yield: str | None = Field(default=None, alias="DividendYield")
    eps: str | None = Field(default=None, alias="EPS")
    revenue_per_share_ttm: str | None = Field(default=None, alias="RevenuePerShareTTM")
    profit_margin: str | None = Field(default=None, alias="ProfitMargin")
    operating_margin_ttm: str | None = Field(default=None, alias="OperatingMarginTTM")
    return_on_assets_ttm: str | None = Field(default=None, alias="ReturnOnAssetsTTM")
    return_on_equity_ttm: str | None = Field(default=None, alias="ReturnOnEquityTTM")
    revenue_ttm: str | None = Field(default=None, alias="RevenueTTM")
    gross_profit_ttm: str | None = Field(default=None, alias="GrossProfitTTM")
    diluted_eps_ttm: str | None = Field(default=None, alias="DilutedEPSTTM")
    quarterly_earnings_growth_yoy: str | None = Field(
        default=None, alias="QuarterlyEarningsGrowthYOY"
    )
    quarterly_revenue_growth_yoy: str | None = Field(
        default=None, alias="QuarterlyRevenueGrowthYOY"
    )
    analyst_target_price: str | None = Field(default=None, alias="AnalystTargetPrice")
    trailing_pe: str | None = Field(default=None, alias="TrailingPE")
    forward_pe: str | None = Field(default=None, alias="ForwardPE")
    price_to_sales_ratio_ttm: str | None = Field(default=None, alias="PriceToSalesRatioTTM")
    price_to_book_ratio: str | None = Field(default=None, alias="PriceToBookRatio")
    ev_to_revenue: str | None = Field(default=None, alias="EVToRevenue")
    ev_to_ebitda: str | None = Field(default=None, alias="EVToEBITDA")
    beta: str | None = Field(default=None, alias="Beta")
    week_52_high: str | None = Field(default=None, alias="52WeekHigh")
    week_52_low: str | None = Field(default=None, alias="52WeekLow")
    day_50_moving_average: str | None = Field(default=None, alias="50DayMovingAverage")
    day_200_moving_average: str | None = Field(default=None, alias="200DayMovingAverage")
    shares_outstanding: str | None = Field(default=None, alias="SharesOutstanding")
    dividend_date: str | None = Field(default=None, alias="DividendDate")
    ex_dividend_date: str | None = Field(default=None, alias="ExDividendDate")


class OverviewRecord(OverviewData):
    id: int


class DeleteAllResult(BaseModel):
    message: str
    deleted: int


class ErrorBody(BaseModel):
    message: str
