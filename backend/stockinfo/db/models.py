# backend/stockinfo/db/models.py

import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Overview(Base):
    __tablename__ = "overviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)

    # Identity fields
    symbol = Column(String, unique=True, nullable=False, index=True)
    asset_type = Column(String, index=True)
    name = Column(String, index=True)
    description = Column(Text)
    cik = Column(String)
    exchange = Column(String, index=True)
    currency = Column(String, index=True)
    country = Column(String, index=True)
    sector = Column(String, index=True)
    industry = Column(String)
    address = Column(String)
    fiscal_year_end = Column(String)
    latest_quarter = Column(String)

    # Fundamentals, stored exactly as the provider reports them
    market_capitalization = Column(String)
    ebitda = Column(String)
    pe_ratio = Column(String)
    peg_ratio = Column(String)
    book_value = Column(String)
    dividend_per_share = Column(String)
    dividend_yield = Column(String)
    eps = Column(String)
    revenue_per_share_ttm = Column(String)
    profit_margin = Column(String)
    operating_margin_ttm = Column(String)
    return_on_assets_ttm = Column(String)
    return_on_equity_ttm = Column(String)
    revenue_ttm = Column(String)
    gross_profit_ttm = Column(String)
    diluted_eps_ttm = Column(String)
    quarterly_earnings_growth_yoy = Column(String)
    quarterly_revenue_growth_yoy = Column(String)
    analyst_target_price = Column(String)
    trailing_pe = Column(String)
    forward_pe = Column(String)
    price_to_sales_ratio_ttm = Column(String)
    price_to_book_ratio = Column(String)
    ev_to_revenue = Column(String)
    ev_to_ebitda = Column(String)
    beta = Column(String)
    week_52_high = Column(String)
    week_52_low = Column(String)
    day_50_moving_average = Column(String)
    day_200_moving_average = Column(String)
    shares_outstanding = Column(String)
    dividend_date = Column(String)
    ex_dividend_date = Column(String)

    def __repr__(self):
        return f"<Overview(id={self.id}, symbol='{self.symbol}')>"
