"""HiringRequest aggregate: an invitation from an organization or an application to it.

``receiver_id`` is always the delivery person who would join. While a request
is PENDING its ``pending_key`` is ``<type>:<organization>:<receiver>``, which
is unique, so two identical pending requests can never both be stored. Once
answered the key is rewritten to include the request's own id.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String, Text

from urbanmart.domain import urbanmart


class HiringRequestType(Enum):
    INVITATION = "INVITATION"
    APPLICATION = "APPLICATION"


class HiringRequestStatus(Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


def pending_key_for(request_type, organization_id, receiver_id):
    return f"{request_type}:{organization_id}:{receiver_id}"


@urbanmart.aggregate
class HiringRequest:
    organization_id = Identifier(required=True)
    receiver_id = Identifier(required=True)
    type = String(required=True, choices=HiringRequestType)
    status = String(choices=HiringRequestStatus, default=HiringRequestStatus.PENDING.value)
    message = Text()
    pending_key = String(max_length=255, unique=True)
    responded_at = DateTime()
    created_at = DateTime()

    @classmethod
    def send(cls, request_type, organization_id, receiver_id, message=None):
        from urbanmart.delivery.events import HiringRequestSent

        request = cls(
            organization_id=organization_id,
            receiver_id=receiver_id,
            type=request_type,
            message=message,
            pending_key=pending_key_for(request_type, organization_id, receiver_id),
            created_at=datetime.now(UTC),
        )
        request.raise_(
            HiringRequestSent(
                request_id=request.id,
                organization_id=organization_id,
                receiver_id=receiver_id,
                type=request_type,
            )
        )
        return request

    @property
    def is_invitation(self):
        return self.type == HiringRequestType.INVITATION.value

    @property
    def is_pending(self):
        return self.status == HiringRequestStatus.PENDING.value

    def _answer(self, status):
        from urbanmart.delivery.events import HiringRequestAnswered

        if not self.is_pending:
            raise ValidationError({"status": ["Request already processed"]})

        now = datetime.now(UTC)
        self.status = status.value
        self.responded_at = now
        self.pending_key = f"{pending_key_for(self.type, self.organization_id, self.receiver_id)}:{self.id}"
        self.raise_(
            HiringRequestAnswered(
                request_id=self.id,
                organization_id=self.organization_id,
                receiver_id=self.receiver_id,
                status=status.value,
                responded_at=now,
            )
        )

    def accept(self):
        self._answer(HiringRequestStatus.ACCEPTED)

    def reject(self):
        self._answer(HiringRequestStatus.REJECTED)

    def to_dict(self):
        return {
            "id": str(self.id),
            "organization_id": str(self.organization_id),
            "receiver_id": str(self.receiver_id),
            "type": self.type,
            "status": self.status,
            "message": self.message,
            "responded_at": self.responded_at.isoformat() if self.responded_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
