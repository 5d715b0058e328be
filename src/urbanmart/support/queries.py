"""Report reads for the reporter and for administrators, newest first."""

from urbanmart.support.report import Report, ReportPriority, ReportStatus, ReportType
from urbanmart.utils.lookup import choice_value, find_all


def _newest_first(reports):
    return [r.to_dict() for r in sorted(reports, key=lambda r: r.created_at, reverse=True)]


def my_reports(reporter_id, status=None) -> list[dict]:
    filters = {"reporter_id": str(reporter_id)}
    if status:
        filters["status"] = choice_value(ReportStatus, status)
    return _newest_first(find_all(Report, **filters))


def all_reports(status=None, priority=None, report_type=None) -> list[dict]:
    filters = {}
    if status:
        filters["status"] = choice_value(ReportStatus, status)
    if priority:
        filters["priority"] = choice_value(ReportPriority, priority, "priority")
    if report_type:
        filters["report_type"] = choice_value(ReportType, report_type, "type")
    return _newest_first(find_all(Report, **filters))
