"""Administrator endpoints: dashboard, users, reports, transactions and store verification."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from urbanmart.admin.dashboard import admin_dashboard, list_stores, list_users
from urbanmart.api.auth import require_admin
from urbanmart.api.responses import ok
from urbanmart.api.schemas import (
    AssignReportRequest,
    ChangeRoleRequest,
    ChangeUserStatusRequest,
    ReportStatusRequest,
    VerifyStoreRequest,
)
from urbanmart.catalogue.management import VerifyStore
from urbanmart.catalogue.store import MerchantStore
from urbanmart.identity.account import ChangeUserRole, SetUserActive
from urbanmart.identity.user import User
from urbanmart.payments.ledger import list_transactions
from urbanmart.support import queries as report_queries
from urbanmart.support.report import Report
from urbanmart.support.reporting import AssignReport, UpdateReportStatus

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/dashboard")
async def dashboard(user: User = Depends(require_admin)):
    return ok(admin_dashboard(), "Dashboard data retrieved successfully")


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
@router.get("/users")
async def users(role: str | None = None, user: User = Depends(require_admin)):
    return ok(list_users(role), "Users retrieved successfully")


@router.patch("/users/{user_id}/role")
async def change_role(user_id: str, body: ChangeRoleRequest, user: User = Depends(require_admin)):
    current_domain.process(ChangeUserRole(user_id=user_id, role=body.role), asynchronous=False)
    updated = current_domain.repository_for(User).get(user_id)
    return ok(updated.to_dict(), "User role updated successfully")


@router.patch("/users/{user_id}/status")
async def change_status(user_id: str, body: ChangeUserStatusRequest, user: User = Depends(require_admin)):
    current_domain.process(SetUserActive(user_id=user_id, is_active=body.is_active), asynchronous=False)
    updated = current_domain.repository_for(User).get(user_id)
    message = "User activated successfully" if updated.is_active else "User deactivated successfully"
    return ok(updated.to_dict(), message)


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------
@router.get("/reports")
async def reports(
    status: str | None = None,
    priority: str | None = None,
    type: str | None = None,
    user: User = Depends(require_admin),
):
    return ok(report_queries.all_reports(status, priority, type), "Reports retrieved successfully")


@router.patch("/reports/{report_id}/assign")
async def assign_report(report_id: str, body: AssignReportRequest, user: User = Depends(require_admin)):
    current_domain.process(
        AssignReport(report_id=report_id, admin_id=body.assigned_admin_id or user.id),
        asynchronous=False,
    )
    report = current_domain.repository_for(Report).get(report_id)
    return ok(report.to_dict(), "Report assigned successfully")


@router.patch("/reports/{report_id}/status")
async def update_report_status(report_id: str, body: ReportStatusRequest, user: User = Depends(require_admin)):
    current_domain.process(UpdateReportStatus(report_id=report_id, status=body.status), asynchronous=False)
    report = current_domain.repository_for(Report).get(report_id)
    return ok(report.to_dict(), "Report status updated successfully")


# ---------------------------------------------------------------------------
# Transactions and stores
# ---------------------------------------------------------------------------
@router.get("/transactions")
async def transactions(status: str | None = None, type: str | None = None, user: User = Depends(require_admin)):
    return ok(list_transactions(status, type), "Transactions retrieved successfully")


@router.get("/merchant-stores")
async def merchant_stores(
    is_verified: bool | None = None,
    search: str | None = None,
    user: User = Depends(require_admin),
):
    return ok(list_stores(is_verified, search), "Merchant stores retrieved successfully")


@router.patch("/merchant-stores/{store_id}/verify")
async def verify_store(store_id: str, body: VerifyStoreRequest, user: User = Depends(require_admin)):
    current_domain.process(VerifyStore(store_id=store_id, is_verified=body.is_verified), asynchronous=False)
    store = current_domain.repository_for(MerchantStore).get(store_id)
    return ok(store.to_dict(), "Store verification status updated successfully")
