"""
SurgiOps
AI insight models.

Models:
    - AIInsight: analytical record written by the external generation
      function. The application only reads it and toggles the viewed flag.
    - InsightGenerationRun: one row per refresh request, tracking the
      external run id and its terminal status.
"""

from datetime import datetime, timezone

from surgiops.models import db
from surgiops.models.base import TenantModel, isoformat


INSIGHT_CATEGORIES = ("operations", "sales", "inventory", "general_business")

RUN_STATUSES = ("pending", "running", "completed", "failed", "unknown")
TERMINAL_RUN_STATUSES = frozenset({"completed", "failed", "unknown"})


class AIInsight(TenantModel):
    __tablename__ = "ai_insights"

    insight_type = db.Column(
        db.String(40), nullable=False, index=True,
        comment="operations | sales | inventory | general_business",
    )
    title = db.Column(db.String(300), nullable=False)
    description = db.Column(db.Text, nullable=True)
    confidence_score = db.Column(db.Float, nullable=True)
    hospital_id = db.Column(db.Integer, db.ForeignKey("hospitals.id"), nullable=True)
    surgeon_id = db.Column(db.Integer, db.ForeignKey("surgeons.id"), nullable=True)
    procedure_id = db.Column(db.Integer, db.ForeignKey("procedures.id"), nullable=True)
    data_points = db.Column(db.JSON, nullable=True)
    recommendations = db.Column(db.JSON, nullable=True)
    is_actionable = db.Column(db.Boolean, nullable=False, default=False)
    is_viewed = db.Column(db.Boolean, nullable=False, default=False)
    viewed_at = db.Column(db.DateTime(timezone=True), nullable=True)
    expires_at = db.Column(db.DateTime(timezone=True), nullable=True)

    def to_dict(self):
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "insight_type": self.insight_type,
            "title": self.title,
            "description": self.description,
            "confidence_score": self.confidence_score,
            "hospital_id": self.hospital_id,
            "surgeon_id": self.surgeon_id,
            "procedure_id": self.procedure_id,
            "data_points": self.data_points or {},
            "recommendations": self.recommendations or [],
            "is_actionable": self.is_actionable,
            "is_viewed": self.is_viewed,
            "viewed_at": isoformat(self.viewed_at),
            "expires_at": isoformat(self.expires_at),
            **self.audit_dict(),
        }

    def __repr__(self):
        return f"<AIInsight {self.id}: {self.insight_type} viewed={self.is_viewed}>"


class InsightGenerationRun(TenantModel):
    """Tracks one invocation of the external insight generation function."""

    __tablename__ = "insight_generation_runs"

    external_run_id = db.Column(db.String(100), nullable=True, index=True)
    status = db.Column(db.String(20), nullable=False, default="pending")
    mode = db.Column(db.String(20), nullable=False, default="polled", comment="polled | fixed_delay")
    insights_before = db.Column(db.Integer, nullable=False, default=0)
    insights_after = db.Column(db.Integer, nullable=True)
    poll_attempts = db.Column(db.Integer, nullable=False, default=0)
    error_message = db.Column(db.Text, nullable=True)
    started_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    completed_at = db.Column(db.DateTime(timezone=True), nullable=True)

    __table_args__ = (
        db.CheckConstraint(
            "status IN ('pending','running','completed','failed','unknown')",
            name="ck_insight_run_status",
        ),
    )

    @property
    def new_insights(self):
        if self.insights_after is None:
            return None
        return max(self.insights_after - self.insights_before, 0)

    def to_dict(self):
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "external_run_id": self.external_run_id,
            "status": self.status,
            "mode": self.mode,
            "insights_before": self.insights_before,
            "insights_after": self.insights_after,
            "new_insights": self.new_insights,
            "poll_attempts": self.poll_attempts,
            "error": self.error_message,
            "started_at": isoformat(self.started_at),
            "completed_at": isoformat(self.completed_at),
        }

    def __repr__(self):
        return f"<InsightGenerationRun {self.id}: {self.status}>"
