"""Delivery organization membership: creation, invitations, applications and answers.

Duplicate pending requests are rejected by the handlers with a readable
message, and ``HiringRequest.pending_key`` being unique stops a concurrent
duplicate that slips past the check.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from urbanmart.delivery.hiring_request import (
    HiringRequest,
    HiringRequestStatus,
    HiringRequestType,
    pending_key_for,
)
from urbanmart.delivery.organization import DeliveryOrganization
from urbanmart.domain import logger, urbanmart
from urbanmart.identity.user import User, UserRole
from urbanmart.utils.errors import PermissionDeniedError
from urbanmart.utils.lookup import find_one, get_or_raise


@urbanmart.command(part_of="DeliveryOrganization")
class CreateDeliveryOrganization:
    owner_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    description = Text()
    logo = String(max_length=500)


@urbanmart.command(part_of="HiringRequest")
class InviteMember:
    owner_id = Identifier(required=True)
    email = String(required=True, max_length=254)
    message = Text()


@urbanmart.command(part_of="HiringRequest")
class ApplyToOrganization:
    user_id = Identifier(required=True)
    organization_id = Identifier(required=True)
    message = Text()


@urbanmart.command(part_of="HiringRequest")
class RespondToHiringRequest:
    request_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    status = String(required=True, choices=HiringRequestStatus)


def organization_owned_by(owner_id):
    return find_one(DeliveryOrganization, owner_id=str(owner_id))


def _ensure_no_pending(request_type, organization_id, receiver_id, message):
    if find_one(HiringRequest, pending_key=pending_key_for(request_type, organization_id, receiver_id)):
        raise ValidationError({"request": [message]})


@urbanmart.command_handler(part_of=DeliveryOrganization)
class DeliveryOrganizationHandler:
    @handle(CreateDeliveryOrganization)
    def create_organization(self, command):
        owner = get_or_raise(User, command.owner_id, "User not found")
        if owner.role != UserRole.DELIVERY.value:
            raise PermissionDeniedError("Only delivery personnel can create an organization")
        if organization_owned_by(owner.id) is not None:
            raise ValidationError({"owner_id": ["User already owns an organization"]})

        org = DeliveryOrganization.create(
            owner_id=owner.id,
            name=command.name,
            description=command.description,
            logo=command.logo,
        )
        current_domain.repository_for(DeliveryOrganization).add(org)

        # The owner is also a member
        owner.join_organization(org.id)
        current_domain.repository_for(User).add(owner)

        logger.info("delivery_organization_created", organization_id=str(org.id), owner_id=str(owner.id))
        return str(org.id)


@urbanmart.command_handler(part_of=HiringRequest)
class HiringRequestHandler:
    @handle(InviteMember)
    def invite_member(self, command):
        org = organization_owned_by(command.owner_id)
        if org is None:
            raise ObjectNotFoundError({"organization": ["Organization not found"]})

        receiver = find_one(User, email=command.email.strip().lower())
        if receiver is None or receiver.role != UserRole.DELIVERY.value:
            raise ObjectNotFoundError({"email": ["User not found or not a delivery person"]})
        if receiver.delivery_org_id:
            raise ValidationError({"email": ["User is already a member of an organization"]})

        _ensure_no_pending(HiringRequestType.INVITATION.value, org.id, receiver.id, "Invitation already sent")

        request = HiringRequest.send(
            HiringRequestType.INVITATION.value,
            organization_id=org.id,
            receiver_id=receiver.id,
            message=command.message,
        )
        current_domain.repository_for(HiringRequest).add(request)

        logger.info("hiring_invitation_sent", request_id=str(request.id), organization_id=str(org.id))
        return str(request.id)

    @handle(ApplyToOrganization)
    def apply_to_organization(self, command):
        applicant = get_or_raise(User, command.user_id, "User not found")
        if applicant.delivery_org_id:
            raise ValidationError({"user_id": ["You are already a member of an organization"]})

        org = get_or_raise(DeliveryOrganization, command.organization_id, "Organization not found")
        if not org.is_active:
            raise ObjectNotFoundError({"organization": ["Organization not found"]})

        _ensure_no_pending(HiringRequestType.APPLICATION.value, org.id, applicant.id, "Application already sent")

        request = HiringRequest.send(
            HiringRequestType.APPLICATION.value,
            organization_id=org.id,
            receiver_id=applicant.id,
            message=command.message,
        )
        current_domain.repository_for(HiringRequest).add(request)

        logger.info("hiring_application_sent", request_id=str(request.id), organization_id=str(org.id))
        return str(request.id)

    @handle(RespondToHiringRequest)
    def respond(self, command):
        request_repo = current_domain.repository_for(HiringRequest)
        request = get_or_raise(HiringRequest, command.request_id, "Request not found")
        if not request.is_pending:
            raise ValidationError({"status": ["Request already processed"]})

        org = get_or_raise(DeliveryOrganization, request.organization_id, "Organization not found")
        actor_is_owner = org.is_owned_by(command.actor_id)
        actor_is_receiver = str(request.receiver_id) == str(command.actor_id)

        if command.status == HiringRequestStatus.ACCEPTED.value:
            if request.is_invitation and not actor_is_receiver:
                raise PermissionDeniedError("Not authorized")
            if not request.is_invitation and not actor_is_owner:
                raise PermissionDeniedError("Only organization owners can accept applications")

            person = get_or_raise(User, request.receiver_id, "User not found")
            if person.delivery_org_id and str(person.delivery_org_id) != str(org.id):
                raise ValidationError({"receiver_id": ["User is already a member of an organization"]})

            request.accept()
            person.join_organization(org.id)
            request_repo.add(request)
            current_domain.repository_for(User).add(person)

            logger.info(
                "hiring_request_accepted",
                request_id=str(request.id),
                organization_id=str(org.id),
                member_id=str(person.id),
            )
        elif command.status == HiringRequestStatus.REJECTED.value:
            if not (actor_is_owner or actor_is_receiver):
                raise PermissionDeniedError("Not authorized")

            request.reject()
            request_repo.add(request)
            logger.info("hiring_request_rejected", request_id=str(request.id))
        else:
            raise ValidationError({"status": ["Status must be ACCEPTED or REJECTED"]})

        return request.status
