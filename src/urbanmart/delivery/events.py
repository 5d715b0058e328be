"""Domain events for delivery assignments, organizations and hiring."""

from protean.fields import DateTime, Identifier, String

from urbanmart.domain import urbanmart


@urbanmart.event(part_of="DeliveryAssignment")
class DeliveryAssigned:
    __version__ = 1

    assignment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    delivery_user_id = Identifier(required=True)
    assigned_at = DateTime(required=True)


@urbanmart.event(part_of="DeliveryAssignment")
class DeliveryRequested:
    """A merchant asked a delivery organization to take an order."""

    __version__ = 1

    assignment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    delivery_organization_id = Identifier(required=True)


@urbanmart.event(part_of="DeliveryAssignment")
class DeliveryStatusChanged:
    __version__ = 1

    assignment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)


@urbanmart.event(part_of="DeliveryOrganization")
class DeliveryOrganizationCreated:
    __version__ = 1

    organization_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    name = String(required=True)


@urbanmart.event(part_of="HiringRequest")
class HiringRequestSent:
    """An invitation or an application was sent."""

    __version__ = 1

    request_id = Identifier(required=True)
    organization_id = Identifier(required=True)
    receiver_id = Identifier(required=True)
    type = String(required=True)


@urbanmart.event(part_of="HiringRequest")
class HiringRequestAnswered:
    __version__ = 1

    request_id = Identifier(required=True)
    organization_id = Identifier(required=True)
    receiver_id = Identifier(required=True)
    status = String(required=True)
    responded_at = DateTime(required=True)
