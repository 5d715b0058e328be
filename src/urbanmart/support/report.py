"""Report aggregate (CQRS): a problem or request a user raises with the platform.

State Machine:
    PENDING → IN_PROGRESS | RESOLVED
    IN_PROGRESS → PENDING | RESOLVED
    RESOLVED → IN_PROGRESS (reopened)

Assigning a report to an administrator puts it IN_PROGRESS.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Identifier, String, Text

from urbanmart.domain import urbanmart
from urbanmart.utils.errors import InvalidTransitionError


class ReportType(Enum):
    BUG = "BUG"
    FEATURE_REQUEST = "FEATURE_REQUEST"
    COMPLAINT = "COMPLAINT"
    OTHER = "OTHER"


class ReportPriority(Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class ReportStatus(Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"


_VALID_TRANSITIONS = {
    ReportStatus.PENDING: {ReportStatus.IN_PROGRESS, ReportStatus.RESOLVED},
    ReportStatus.IN_PROGRESS: {ReportStatus.PENDING, ReportStatus.RESOLVED},
    ReportStatus.RESOLVED: {ReportStatus.IN_PROGRESS},
}


@urbanmart.aggregate
class Report:
    reporter_id = Identifier(required=True)
    report_type = String(required=True, choices=ReportType)
    title = String(required=True, max_length=200)
    description = Text(required=True)
    priority = String(choices=ReportPriority, default=ReportPriority.MEDIUM.value)
    status = String(choices=ReportStatus, default=ReportStatus.PENDING.value)
    assigned_admin_id = Identifier()
    resolved_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def submit(cls, reporter_id, report_type, title, description, priority=ReportPriority.MEDIUM.value):
        from urbanmart.support.events import ReportSubmitted

        now = datetime.now(UTC)
        report = cls(
            reporter_id=reporter_id,
            report_type=report_type,
            title=title,
            description=description,
            priority=priority,
            created_at=now,
            updated_at=now,
        )
        report.raise_(
            ReportSubmitted(
                report_id=report.id,
                reporter_id=reporter_id,
                report_type=report_type,
                priority=report.priority,
                submitted_at=now,
            )
        )
        return report

    def change_status(self, status):
        from urbanmart.support.events import ReportStatusChanged

        target = ReportStatus(status)
        current = ReportStatus(self.status)
        if target not in _VALID_TRANSITIONS[current]:
            raise InvalidTransitionError(
                {"status": [f"Cannot transition report from {current.value} to {target.value}"]}
            )

        now = datetime.now(UTC)
        self.status = target.value
        self.resolved_at = now if target == ReportStatus.RESOLVED else None
        self.updated_at = now
        self.raise_(
            ReportStatusChanged(
                report_id=self.id,
                previous_status=current.value,
                new_status=target.value,
                changed_at=now,
            )
        )

    def assign_to(self, admin_id):
        from urbanmart.support.events import ReportAssigned

        self.assigned_admin_id = admin_id
        self.updated_at = datetime.now(UTC)
        if self.status != ReportStatus.IN_PROGRESS.value:
            self.change_status(ReportStatus.IN_PROGRESS.value)
        self.raise_(ReportAssigned(report_id=self.id, assigned_admin_id=admin_id))

    def to_dict(self):
        return {
            "id": str(self.id),
            "reporter_id": str(self.reporter_id),
            "type": self.report_type,
            "title": self.title,
            "description": self.description,
            "priority": self.priority,
            "status": self.status,
            "assigned_admin_id": str(self.assigned_admin_id) if self.assigned_admin_id else None,
            "resolved_at": self.resolved_at.isoformat() if self.resolved_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
