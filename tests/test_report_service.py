"""Sales report aggregation and source capabilities."""

from datetime import datetime, timedelta

import pytest

from surgiops.core.exceptions import ValidationError
from surgiops.models import db
from surgiops.models.sales import SalesOpportunity, SalesTransaction
from surgiops.services import report_service as svc


def _seed_sales(tenant_id, region_id=None):
    for name, stage, value in (("A", "lead", 100.0), ("B", "closed-won", 300.0), ("C", "lead", 50.0)):
        db.session.add(SalesOpportunity(tenant_id=tenant_id, name=name, stage=stage,
                                        estimated_value=value, region_id=region_id))
    now = datetime.now()
    for days_ago, product, amount in ((2, "Knee", 400.0), (5, "Hip", 200.0), (60, "Knee", 999.0)):
        db.session.add(SalesTransaction(tenant_id=tenant_id, amount=amount, product_name=product,
                                        transaction_date=now - timedelta(days=days_ago),
                                        region_id=region_id))
    db.session.commit()


class TestBuildReportData:
    def test_empty_inputs(self):
        data = svc.build_report_data([], [])
        assert set(data) == set(svc.REPORT_TYPES)
        summary = data["sales-summary"]
        assert summary["total_sales"] == 0
        assert summary["deals"] == 0
        assert summary["avg_deal_size"] == 0
        assert summary["growth"] == 0
        assert summary["top_products"] == []
        assert data["pipeline"]["stage_breakdown"] == []

    def test_totals_and_average(self):
        opps = [{"stage": "lead", "estimated_value": 10}, {"stage": "lead", "estimated_value": 5}]
        txns = [{"amount": 300, "product_name": "Knee"}, {"amount": 100, "product_name": None}]
        data = svc.build_report_data(opps, txns)
        assert data["performance"]["total_sales"] == 400
        assert data["performance"]["deals"] == 2
        assert data["performance"]["avg_deal_size"] == 200
        assert data["sales-summary"]["top_products"][0] == {"name": "Knee", "value": 300, "percentage": 75.0}
        assert data["sales-summary"]["top_products"][1]["name"] == "Unspecified"

    def test_stage_breakdown_in_pipeline_order(self):
        opps = [
            {"stage": "closed-won", "estimated_value": 300},
            {"stage": "lead", "estimated_value": 100},
            {"stage": "lead", "estimated_value": None},
        ]
        stages = svc.build_report_data(opps, [])["pipeline"]["stage_breakdown"]
        assert stages == [
            {"stage": "Lead", "count": 2, "value": 100},
            {"stage": "Closed won", "count": 1, "value": 300},
        ]


class TestGenerate:
    def test_month_window(self, default_tenant):
        _seed_sales(default_tenant.id)
        result = svc.generate_reports(default_tenant.id, svc.ReportCapabilities())
        summary = result["reports"]["sales-summary"]
        assert summary["total_sales"] == 600
        assert summary["deals"] == 3
        assert summary["avg_deal_size"] == 200
        assert result["capabilities"]["limited"] is False

    def test_single_report(self, default_tenant):
        _seed_sales(default_tenant.id)
        result = svc.generate_reports(default_tenant.id, svc.ReportCapabilities(),
                                      report_type="pipeline", date_range="year")
        assert result["report_type"] == "pipeline"
        assert result["report"]["total_sales"] == 1599

    def test_missing_source_reads_as_empty(self, default_tenant):
        _seed_sales(default_tenant.id)
        caps = svc.ReportCapabilities(opportunities=False)
        result = svc.generate_reports(default_tenant.id, caps)
        assert result["reports"]["pipeline"]["deals"] == 0
        assert result["reports"]["pipeline"]["avg_deal_size"] == 0
        assert result["capabilities"]["missing"] == ["sales_opportunities"]

    def test_region_filter(self, default_tenant, region):
        _seed_sales(default_tenant.id, region_id=region["id"])
        _seed_sales(default_tenant.id)
        result = svc.generate_reports(default_tenant.id, svc.ReportCapabilities(), region_id=region["id"])
        assert result["reports"]["performance"]["deals"] == 3

    def test_tenant_scoped(self, default_tenant, other_tenant):
        _seed_sales(default_tenant.id)
        result = svc.generate_reports(other_tenant.id, svc.ReportCapabilities())
        assert result["reports"]["performance"]["total_sales"] == 0

    def test_bad_range(self, default_tenant):
        with pytest.raises(ValidationError):
            svc.generate_reports(default_tenant.id, svc.ReportCapabilities(), date_range="decade")

    def test_bad_report_type(self, default_tenant):
        with pytest.raises(ValidationError):
            svc.generate_reports(default_tenant.id, svc.ReportCapabilities(), report_type="churn")


def test_capabilities_from_config():
    caps = svc.ReportCapabilities.from_config({"REPORTS_TRANSACTIONS_ENABLED": False})
    assert caps.opportunities is True
    assert caps.to_dict()["missing"] == ["sales_transactions"]
