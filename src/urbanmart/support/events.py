"""Domain events for user reports."""

from protean.fields import DateTime, Identifier, String

from urbanmart.domain import urbanmart


@urbanmart.event(part_of="Report")
class ReportSubmitted:
    __version__ = 1

    report_id = Identifier(required=True)
    reporter_id = Identifier(required=True)
    report_type = String(required=True)
    priority = String(required=True)
    submitted_at = DateTime(required=True)


@urbanmart.event(part_of="Report")
class ReportAssigned:
    __version__ = 1

    report_id = Identifier(required=True)
    assigned_admin_id = Identifier(required=True)


@urbanmart.event(part_of="Report")
class ReportStatusChanged:
    __version__ = 1

    report_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)
