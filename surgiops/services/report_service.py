"""
Sales reports computed from already-fetched opportunity and transaction rows.

Business context:
    Every report type shows the same headline numbers (total sales, growth,
    deals, average deal size); pipeline adds a stage breakdown and the sales
    summary adds top products. Growth needs historical data the store does
    not keep, so it is always the placeholder 0.

Which optional sources exist is an explicit ReportCapabilities value built
from configuration. A disabled source is read as an empty list.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy import select

from surgiops.core.exceptions import ValidationError
from surgiops.models import db
from surgiops.models.sales import SalesOpportunity, SalesTransaction
from surgiops.services.statistics import (
    GROWTH_PLACEHOLDER,
    percentage_breakdown,
    safe_average,
    sum_field,
)

logger = logging.getLogger(__name__)

REPORT_TYPES = ("sales-summary", "pipeline", "performance", "territory", "forecast")

PIPELINE_STAGES = ("lead", "qualified", "proposal", "negotiation", "closed-won")

DATE_RANGE_DAYS = {"week": 7, "month": 30, "quarter": 90, "year": 365}
DEFAULT_DATE_RANGE = "month"


@dataclass(frozen=True)
class ReportCapabilities:
    """Which sales sources are provisioned in this deployment."""

    opportunities: bool = True
    transactions: bool = True

    @classmethod
    def from_config(cls, config) -> "ReportCapabilities":
        return cls(
            opportunities=bool(config.get("REPORTS_OPPORTUNITIES_ENABLED", True)),
            transactions=bool(config.get("REPORTS_TRANSACTIONS_ENABLED", True)),
        )

    @property
    def missing(self) -> list[str]:
        missing = []
        if not self.opportunities:
            missing.append("sales_opportunities")
        if not self.transactions:
            missing.append("sales_transactions")
        return missing

    def to_dict(self) -> dict:
        return {
            "opportunities": self.opportunities,
            "transactions": self.transactions,
            "limited": bool(self.missing),
            "missing": self.missing,
        }


def _stage_label(stage: str) -> str:
    """``closed-won`` → ``Closed won``."""
    return stage[:1].upper() + stage[1:].replace("-", " ", 1)


def build_report_data(opportunities: list[dict], transactions: list[dict]) -> dict[str, dict]:
    """All five report payloads from the given rows.

    total_sales sums transaction amounts; deals counts opportunities;
    avg_deal_size is total_sales ÷ deals (0 with no deals).
    """
    total_sales = sum_field(transactions, "amount")
    deals = len(opportunities)
    base = {
        "total_sales": total_sales,
        "growth": GROWTH_PLACEHOLDER,
        "deals": deals,
        "avg_deal_size": safe_average(total_sales, deals),
    }

    stage_breakdown = []
    for stage in PIPELINE_STAGES:
        rows = [o for o in opportunities if o.get("stage") == stage]
        if rows:
            stage_breakdown.append({
                "stage": _stage_label(stage),
                "count": len(rows),
                "value": sum_field(rows, "estimated_value"),
            })

    top_products = [
        {"name": g["name"], "value": g["value"], "percentage": g["percentage"]}
        for g in percentage_breakdown(transactions, "product_name", "amount")
    ]

    return {
        "sales-summary": {**base, "top_products": top_products},
        "pipeline": {**base, "stage_breakdown": stage_breakdown},
        "performance": dict(base),
        "territory": dict(base),
        "forecast": dict(base),
    }


def range_start(date_range: str, now: datetime | None = None) -> datetime:
    if date_range not in DATE_RANGE_DAYS:
        raise ValidationError(
            f"date_range must be one of: {', '.join(DATE_RANGE_DAYS)}",
            details={"date_range": date_range},
        )
    now = now or datetime.now()
    return now - timedelta(days=DATE_RANGE_DAYS[date_range])


def fetch_report_rows(
    tenant_id: int,
    capabilities: ReportCapabilities,
    *,
    date_range: str = DEFAULT_DATE_RANGE,
    region_id: int | None = None,
    now: datetime | None = None,
) -> tuple[list[dict], list[dict]]:
    """Read the active opportunity and transaction rows a report needs."""
    start = range_start(date_range, now)
    opportunities: list[dict] = []
    transactions: list[dict] = []

    if capabilities.opportunities:
        stmt = select(SalesOpportunity).where(
            SalesOpportunity.tenant_id == tenant_id,
            SalesOpportunity.is_active.is_(True),
            SalesOpportunity.created_at >= start,
        )
        if region_id is not None:
            stmt = stmt.where(SalesOpportunity.region_id == region_id)
        stmt = stmt.order_by(SalesOpportunity.created_at.desc())
        opportunities = [o.to_dict() for o in db.session.execute(stmt).scalars()]

    if capabilities.transactions:
        stmt = select(SalesTransaction).where(
            SalesTransaction.tenant_id == tenant_id,
            SalesTransaction.is_active.is_(True),
            SalesTransaction.transaction_date >= start,
        )
        if region_id is not None:
            stmt = stmt.where(SalesTransaction.region_id == region_id)
        stmt = stmt.order_by(SalesTransaction.transaction_date.desc())
        transactions = [t.to_dict() for t in db.session.execute(stmt).scalars()]

    return opportunities, transactions


def generate_reports(
    tenant_id: int,
    capabilities: ReportCapabilities,
    *,
    date_range: str = DEFAULT_DATE_RANGE,
    region_id: int | None = None,
    report_type: str | None = None,
) -> dict:
    """Fetch rows and build the report payload(s) for one tenant."""
    if report_type is not None and report_type not in REPORT_TYPES:
        raise ValidationError(
            f"report_type must be one of: {', '.join(REPORT_TYPES)}",
            details={"report_type": report_type},
        )
    opportunities, transactions = fetch_report_rows(
        tenant_id, capabilities, date_range=date_range, region_id=region_id,
    )
    reports = build_report_data(opportunities, transactions)
    if capabilities.missing:
        logger.warning("Reports running with limited sources: %s",
                       ", ".join(capabilities.missing), extra={"tenant_id": tenant_id})

    result = {
        "date_range": date_range,
        "region_id": region_id,
        "capabilities": capabilities.to_dict(),
    }
    if report_type is not None:
        result["report_type"] = report_type
        result["report"] = reports[report_type]
    else:
        result["reports"] = reports
    return result
