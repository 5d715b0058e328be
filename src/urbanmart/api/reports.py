"""Report endpoints for every signed-in user."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from urbanmart.api.auth import get_current_user
from urbanmart.api.responses import ok
from urbanmart.api.schemas import SubmitReportRequest
from urbanmart.identity.user import User
from urbanmart.support import queries
from urbanmart.support.report import Report
from urbanmart.support.reporting import SubmitReport

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.post("", status_code=201)
async def submit_report(body: SubmitReportRequest, user: User = Depends(get_current_user)):
    report_id = current_domain.process(
        SubmitReport(
            reporter_id=user.id,
            report_type=body.type,
            title=body.title,
            description=body.description,
            priority=body.priority,
        ),
        asynchronous=False,
    )
    report = current_domain.repository_for(Report).get(report_id)
    return ok(report.to_dict(), "Report submitted successfully")


@router.get("/my-reports")
async def my_reports(status: str | None = None, user: User = Depends(get_current_user)):
    return ok(queries.my_reports(user.id, status), "Reports retrieved successfully")
