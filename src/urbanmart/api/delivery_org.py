"""Delivery organization endpoints: organizations, hiring and incoming delivery requests."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from urbanmart.api.auth import get_current_user, require_delivery
from urbanmart.api.responses import ok
from urbanmart.api.schemas import (
    ApplyRequest,
    AssignMemberRequest,
    CreateOrganizationRequest,
    InviteMemberRequest,
    RespondRequest,
)
from urbanmart.delivery import queries
from urbanmart.delivery.assignment import DeliveryAssignment, DeliveryStatus
from urbanmart.delivery.dispatch import AssignDeliveryMember, RespondToDeliveryRequest
from urbanmart.delivery.hiring import (
    ApplyToOrganization,
    CreateDeliveryOrganization,
    InviteMember,
    RespondToHiringRequest,
)
from urbanmart.delivery.hiring_request import HiringRequest, HiringRequestStatus
from urbanmart.delivery.organization import DeliveryOrganization
from urbanmart.identity.user import User

router = APIRouter(prefix="/api/delivery-org", tags=["delivery-org"])


# ---------------------------------------------------------------------------
# Organizations
# ---------------------------------------------------------------------------
@router.get("")
async def list_organizations(user: User = Depends(get_current_user)):
    return ok(queries.list_organizations(), "Organizations retrieved successfully")


@router.post("", status_code=201)
async def create_organization(body: CreateOrganizationRequest, user: User = Depends(require_delivery)):
    org_id = current_domain.process(
        CreateDeliveryOrganization(
            owner_id=user.id,
            name=body.name,
            description=body.description,
            logo=body.logo,
        ),
        asynchronous=False,
    )
    org = current_domain.repository_for(DeliveryOrganization).get(org_id)
    return ok(org.to_dict(), "Organization created successfully")


@router.get("/me")
async def my_organization(user: User = Depends(require_delivery)):
    return ok(queries.my_organization(user.id), "Organization retrieved successfully")


# ---------------------------------------------------------------------------
# Hiring
# ---------------------------------------------------------------------------
@router.post("/members/invite", status_code=201)
async def invite_member(body: InviteMemberRequest, user: User = Depends(require_delivery)):
    request_id = current_domain.process(
        InviteMember(owner_id=user.id, email=body.email, message=body.message),
        asynchronous=False,
    )
    request = current_domain.repository_for(HiringRequest).get(request_id)
    return ok(request.to_dict(), "Invitation sent successfully")


@router.post("/requests/apply", status_code=201)
async def apply_to_organization(body: ApplyRequest, user: User = Depends(require_delivery)):
    request_id = current_domain.process(
        ApplyToOrganization(user_id=user.id, organization_id=body.organization_id, message=body.message),
        asynchronous=False,
    )
    request = current_domain.repository_for(HiringRequest).get(request_id)
    return ok(request.to_dict(), "Application sent successfully")


@router.get("/requests/hiring")
async def list_hiring_requests(user: User = Depends(require_delivery)):
    return ok(queries.my_hiring_requests(user.id), "Hiring requests retrieved successfully")


@router.patch("/requests/hiring/{request_id}")
async def respond_to_hiring_request(request_id: str, body: RespondRequest, user: User = Depends(require_delivery)):
    status = current_domain.process(
        RespondToHiringRequest(request_id=request_id, actor_id=user.id, status=body.status),
        asynchronous=False,
    )
    message = "Organization joined successfully" if status == HiringRequestStatus.ACCEPTED.value else "Request rejected"
    return ok(None, message)


# ---------------------------------------------------------------------------
# Delivery requests addressed to the organization
# ---------------------------------------------------------------------------
@router.get("/requests/delivery")
async def list_delivery_requests(user: User = Depends(require_delivery)):
    return ok(queries.incoming_delivery_requests(user.id), "Delivery requests retrieved successfully")


@router.patch("/requests/delivery/{assignment_id}")
async def respond_to_delivery_request(
    assignment_id: str, body: RespondRequest, user: User = Depends(require_delivery)
):
    status = current_domain.process(
        RespondToDeliveryRequest(owner_id=user.id, assignment_id=assignment_id, status=body.status),
        asynchronous=False,
    )
    assignment = current_domain.repository_for(DeliveryAssignment).get(assignment_id)
    verb = "accepted" if status == DeliveryStatus.ASSIGNED.value else "rejected"
    return ok(assignment.to_dict(), f"Request {verb}")


@router.post("/assignments/{assignment_id}/assign")
async def assign_to_member(assignment_id: str, body: AssignMemberRequest, user: User = Depends(require_delivery)):
    current_domain.process(
        AssignDeliveryMember(owner_id=user.id, assignment_id=assignment_id, member_id=body.member_id),
        asynchronous=False,
    )
    assignment = current_domain.repository_for(DeliveryAssignment).get(assignment_id)
    return ok(assignment.to_dict(), "Assigned to member successfully")
