"""Sales reports tab."""

from flask import current_app

from surgiops.services import report_service as reports
from surgiops.tabs.base import TabController

UNAVAILABLE_MESSAGE = "Reports temporarily unavailable. Some database tables may not be configured yet."


def _empty_reports() -> dict[str, dict]:
    return reports.build_report_data([], [])


class ReportsTab(TabController):
    reference_collections = ("regions",)
    load_failed_message = UNAVAILABLE_MESSAGE

    def __init__(self, tenant_id: int, user_id: int | None = None, capabilities=None):
        super().__init__(tenant_id, user_id)
        self.capabilities = capabilities or reports.ReportCapabilities.from_config(current_app.config)
        self.report_type = "sales-summary"
        self.date_range = reports.DEFAULT_DATE_RANGE
        self.region_id: int | None = None
        self.data: dict[str, dict] = _empty_reports()

    def fetch(self):
        # Empty figures stay on screen if the read below fails
        self.data = _empty_reports()
        opportunities, transactions = reports.fetch_report_rows(
            self.tenant_id, self.capabilities,
            date_range=self.date_range, region_id=self.region_id,
        )
        self.data = reports.build_report_data(opportunities, transactions)

    def select_report(self, report_type: str):
        if report_type in reports.REPORT_TYPES:
            self.report_type = report_type

    def set_filters(self, *, date_range: str | None = None, region_id: int | None = None):
        if date_range is not None:
            reports.range_start(date_range)
            self.date_range = date_range
        self.region_id = region_id
        return self.load()

    @property
    def current(self) -> dict:
        return self.data.get(self.report_type) or _empty_reports()["performance"]
