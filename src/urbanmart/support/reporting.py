"""Report commands: any user submits, administrators triage."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from urbanmart.domain import logger, urbanmart
from urbanmart.identity.user import User, UserRole
from urbanmart.support.report import Report, ReportPriority, ReportStatus, ReportType
from urbanmart.utils.lookup import find_one, get_or_raise


@urbanmart.command(part_of="Report")
class SubmitReport:
    reporter_id = Identifier(required=True)
    report_type = String(required=True, choices=ReportType)
    title = String(required=True, max_length=200)
    description = Text(required=True)
    priority = String(choices=ReportPriority, default=ReportPriority.MEDIUM.value)


@urbanmart.command(part_of="Report")
class AssignReport:
    report_id = Identifier(required=True)
    admin_id = Identifier(required=True)


@urbanmart.command(part_of="Report")
class UpdateReportStatus:
    report_id = Identifier(required=True)
    status = String(required=True, choices=ReportStatus)


@urbanmart.command_handler(part_of=Report)
class ReportHandler:
    @handle(SubmitReport)
    def submit(self, command):
        report = Report.submit(
            reporter_id=command.reporter_id,
            report_type=command.report_type,
            title=command.title,
            description=command.description,
            priority=command.priority,
        )
        current_domain.repository_for(Report).add(report)
        logger.info("report_submitted", report_id=str(report.id), report_type=report.report_type)
        return str(report.id)

    @handle(AssignReport)
    def assign(self, command):
        report = get_or_raise(Report, command.report_id, "Report not found")
        admin = find_one(User, id=str(command.admin_id))
        if admin is None or admin.role != UserRole.ADMIN.value or not admin.is_active:
            raise ObjectNotFoundError({"admin_id": ["Administrator not found"]})

        report.assign_to(admin.id)
        current_domain.repository_for(Report).add(report)
        logger.info("report_assigned", report_id=str(report.id), admin_id=str(admin.id))

    @handle(UpdateReportStatus)
    def update_status(self, command):
        report = get_or_raise(Report, command.report_id, "Report not found")
        previous = report.status
        report.change_status(command.status)
        current_domain.repository_for(Report).add(report)
        logger.info("report_status_changed", report_id=str(report.id), previous_status=previous, new_status=report.status)
