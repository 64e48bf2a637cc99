"""Insight listing, viewed flag, error mapping and the refresh flow."""

import pytest

from surgiops.core.exceptions import InsightGenerationError, NotFoundError, ValidationError
from surgiops.models import db
from surgiops.models.ai import AIInsight, InsightGenerationRun
from surgiops.services import insight_service as svc

from fakes import FakeGateway, failed, ok


def _insight(tenant_id, title, category="operations", confidence=0.7):
    row = AIInsight(tenant_id=tenant_id, insight_type=category, title=title,
                    confidence_score=confidence)
    db.session.add(row)
    db.session.commit()
    return row


class _Sleeps:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


class TestViews:
    def test_newest_first(self, default_tenant):
        a = _insight(default_tenant.id, "A")
        b = _insight(default_tenant.id, "B")
        assert [r["id"] for r in svc.list_insights(default_tenant.id)] == [b.id, a.id]

    def test_category_filter_and_counts(self):
        rows = [{"insight_type": "sales"}, {"insight_type": "operations"}, {"insight_type": "sales"}]
        assert len(svc.filter_by_category(rows, "sales")) == 2
        assert svc.filter_by_category(rows, "all") == rows
        assert svc.count_by_category(rows) == {
            "all": 3, "operations": 1, "sales": 2, "inventory": 0, "general_business": 0,
        }

    @pytest.mark.parametrize("score,expected", [(0.95, "high"), (0.8, "high"), (0.6, "medium"),
                                                (0.59, "low"), (None, "low")])
    def test_priority(self, score, expected):
        assert svc.priority_for(score) == expected

    def test_unknown_category(self):
        with pytest.raises(ValidationError):
            svc.validate_category("marketing")


class TestMarkViewed:
    def test_only_target_row_changes(self, default_tenant):
        a = _insight(default_tenant.id, "A")
        b = _insight(default_tenant.id, "B")
        row = svc.mark_viewed(default_tenant.id, a.id)
        assert row["is_viewed"] is True
        assert row["viewed_at"] is not None
        assert db.session.get(AIInsight, b.id).is_viewed is False

    def test_writes_only_viewed_columns(self, default_tenant):
        a = _insight(default_tenant.id, "A")
        before = db.session.get(AIInsight, a.id).to_dict()

        svc.mark_viewed(default_tenant.id, a.id)
        db.session.expire_all()
        after = db.session.get(AIInsight, a.id).to_dict()

        changed = sorted(k for k in after if after[k] != before[k])
        assert changed == ["is_viewed", "viewed_at"]

    def test_other_tenant(self, other_tenant, default_tenant):
        a = _insight(default_tenant.id, "A")
        with pytest.raises(NotFoundError):
            svc.mark_viewed(other_tenant.id, a.id)


class TestFriendlyError:
    def test_duplicate_key(self):
        assert svc.friendly_error("duplicate key value") == svc.RECENTLY_GENERATED_MESSAGE

    def test_openai(self):
        assert svc.friendly_error("OpenAI API error") == svc.AI_UNAVAILABLE_MESSAGE

    def test_timeout(self):
        assert svc.friendly_error("Request timeout after 60s") == svc.TIMEOUT_MESSAGE

    def test_other(self):
        assert svc.friendly_error("boom") == "Failed to generate insights: boom"


class TestRefresh:
    def test_fixed_delay_with_new_rows(self, default_tenant):
        gateway = FakeGateway(on_invoke=lambda: _insight(default_tenant.id, "Fresh"))
        sleeps = _Sleeps()
        result = svc.refresh_insights(default_tenant.id, gateway=gateway, sleep=sleeps,
                                      refresh_delay=2, retry_delay=3)

        assert sleeps.calls == [2]
        assert result["run"]["mode"] == "fixed_delay"
        assert result["run"]["status"] == "completed"
        assert result["new_insights"] == 1
        assert [r["title"] for r in result["insights"]] == ["Fresh"]

    def test_fixed_delay_retries_once_when_nothing_new(self, default_tenant):
        sleeps = _Sleeps()
        result = svc.refresh_insights(default_tenant.id, gateway=FakeGateway(), sleep=sleeps,
                                      refresh_delay=2, retry_delay=3)
        assert sleeps.calls == [2, 3]
        assert result["new_insights"] == 0

    def test_failure_raises_friendly_message(self, default_tenant):
        gateway = FakeGateway(result=failed("duplicate key value violates unique constraint"))
        with pytest.raises(InsightGenerationError) as excinfo:
            svc.refresh_insights(default_tenant.id, gateway=gateway, sleep=_Sleeps())
        assert str(excinfo.value) == svc.RECENTLY_GENERATED_MESSAGE
        run = InsightGenerationRun.query.one()
        assert run.status == "failed"

    def test_polls_until_terminal(self, default_tenant):
        gateway = FakeGateway(
            result=ok({"run_id": "r-1"}),
            statuses=[ok({"status": "running"}), ok({"status": "completed"})],
            status_url="http://fn.test/runs/{run_id}",
        )
        sleeps = _Sleeps()
        result = svc.refresh_insights(default_tenant.id, gateway=gateway, sleep=sleeps,
                                      refresh_delay=1, poll_attempts=5)
        assert gateway.status_checks == ["r-1", "r-1"]
        assert result["run"]["status"] == "completed"
        assert result["run"]["mode"] == "polled"
        assert result["run"]["poll_attempts"] == 2
        assert result["run"]["external_run_id"] == "r-1"

    def test_polled_failure(self, default_tenant):
        gateway = FakeGateway(
            result=ok({"run_id": "r-2"}),
            statuses=[ok({"status": "failed", "error": "OpenAI rate limit"})],
            status_url="http://fn.test/runs/{run_id}",
        )
        with pytest.raises(InsightGenerationError, match="temporarily unavailable"):
            svc.refresh_insights(default_tenant.id, gateway=gateway, sleep=_Sleeps())

    def test_poll_gives_up_as_unknown(self, default_tenant):
        gateway = FakeGateway(
            result=ok({"run_id": "r-3"}),
            statuses=[ok({"status": "running"})] * 3,
            status_url="http://fn.test/runs/{run_id}",
        )
        result = svc.refresh_insights(default_tenant.id, gateway=gateway, sleep=_Sleeps(),
                                      poll_attempts=3)
        assert result["run"]["status"] == "unknown"
        assert svc.get_run(default_tenant.id, result["run"]["id"])["poll_attempts"] == 3
