"""Delivery and organization reads."""

from protean.exceptions import ObjectNotFoundError

from urbanmart.delivery.assignment import DeliveryAssignment, DeliveryStatus
from urbanmart.delivery.hiring_request import HiringRequest, HiringRequestStatus
from urbanmart.delivery.organization import DeliveryOrganization
from urbanmart.identity.user import User, UserRole
from urbanmart.ordering.order import Order
from urbanmart.utils.errors import PermissionDeniedError
from urbanmart.utils.lookup import choice_value, find_all, find_one


def _newest_first(records):
    return sorted(records, key=lambda r: r.created_at, reverse=True)


def _visible_assignments(user_id):
    """Assignments the user delivers, plus every assignment of the org they own."""
    assignments = {str(a.id): a for a in find_all(DeliveryAssignment, delivery_user_id=str(user_id))}

    org = find_one(DeliveryOrganization, owner_id=str(user_id))
    if org is not None:
        for assignment in find_all(DeliveryAssignment, delivery_organization_id=str(org.id)):
            assignments[str(assignment.id)] = assignment

    return list(assignments.values())


def _with_order(assignment):
    data = assignment.to_dict()
    order = find_one(Order, id=str(assignment.order_id))
    data["order"] = order.to_dict() if order is not None else None
    return data


def delivery_orders(user_id, status=None) -> list[dict]:
    assignments = _visible_assignments(user_id)
    if status:
        status = choice_value(DeliveryStatus, status)
        assignments = [a for a in assignments if a.status == status]
    return [_with_order(a) for a in _newest_first(assignments)]


def delivery_stats(user_id) -> dict:
    assignments = _visible_assignments(user_id)

    def _count(*statuses):
        return sum(1 for a in assignments if a.status in {s.value for s in statuses})

    return {
        "total": len(assignments),
        "in_transit": _count(DeliveryStatus.IN_TRANSIT),
        "completed": _count(DeliveryStatus.COMPLETED),
        # Both still wait on someone to act
        "pending": _count(DeliveryStatus.ASSIGNED, DeliveryStatus.REQUESTED),
    }


def available_delivery_persons() -> list[dict]:
    couriers = find_all(User, role=UserRole.DELIVERY.value, is_active=True)
    return [
        {
            "id": str(u.id),
            "first_name": u.first_name,
            "last_name": u.last_name,
            "email": u.email,
            "phone": u.phone,
            "delivery_org_id": str(u.delivery_org_id) if u.delivery_org_id else None,
        }
        for u in couriers
    ]


def incoming_delivery_requests(owner_id) -> list[dict]:
    org = find_one(DeliveryOrganization, owner_id=str(owner_id))
    if org is None:
        raise PermissionDeniedError("Only organization owners can view delivery requests")

    requests = find_all(
        DeliveryAssignment,
        delivery_organization_id=str(org.id),
        status=DeliveryStatus.REQUESTED.value,
    )
    return [_with_order(a) for a in _newest_first(requests)]


def list_organizations() -> list[dict]:
    return [org.to_dict() for org in _newest_first(find_all(DeliveryOrganization, is_active=True))]


def my_organization(user_id) -> dict:
    """The organization the user owns or belongs to, with members and open requests."""
    user = find_one(User, id=str(user_id))
    if user is None:
        raise ObjectNotFoundError({"user": ["User not found"]})

    org = find_one(DeliveryOrganization, owner_id=str(user_id))
    if org is None and user.delivery_org_id:
        org = find_one(DeliveryOrganization, id=str(user.delivery_org_id))
    if org is None:
        return {"organization": None, "is_owner": False}

    is_owner = org.is_owned_by(user_id)
    data = {
        "organization": org.to_dict(),
        "is_owner": is_owner,
        "members": [m.to_dict() for m in find_all(User, delivery_org_id=str(org.id))],
    }
    if is_owner:
        pending = find_all(
            HiringRequest,
            organization_id=str(org.id),
            status=HiringRequestStatus.PENDING.value,
        )
        data["pending_requests"] = [r.to_dict() for r in _newest_first(pending)]
    return data


def my_hiring_requests(user_id) -> list[dict]:
    requests = find_all(HiringRequest, receiver_id=str(user_id))
    result = []
    for request in _newest_first(requests):
        data = request.to_dict()
        org = find_one(DeliveryOrganization, id=str(request.organization_id))
        data["organization"] = org.to_dict() if org is not None else None
        result.append(data)
    return result
