"""The signed-in user's profile and address book."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from urbanmart.api.auth import get_current_user
from urbanmart.api.responses import ok
from urbanmart.api.schemas import AddAddressRequest
from urbanmart.identity.addresses import AddAddress, RemoveAddress
from urbanmart.identity.user import User

router = APIRouter(prefix="/api/users", tags=["users"])


def _addresses(user_id):
    user = current_domain.repository_for(User).get(user_id)
    return [a.to_dict() for a in user.addresses]


@router.get("/me")
async def me(user: User = Depends(get_current_user)):
    data = user.to_dict()
    data["addresses"] = [a.to_dict() for a in user.addresses]
    return ok(data, "Profile retrieved successfully")


@router.get("/me/addresses")
async def list_addresses(user: User = Depends(get_current_user)):
    return ok(_addresses(user.id), "Addresses retrieved successfully")


@router.post("/me/addresses", status_code=201)
async def add_address(body: AddAddressRequest, user: User = Depends(get_current_user)):
    address_id = current_domain.process(AddAddress(user_id=user.id, **body.model_dump()), asynchronous=False)
    return ok({"id": address_id, "addresses": _addresses(user.id)}, "Address added successfully")


@router.delete("/me/addresses/{address_id}")
async def remove_address(address_id: str, user: User = Depends(get_current_user)):
    current_domain.process(RemoveAddress(user_id=user.id, address_id=address_id), asynchronous=False)
    return ok(_addresses(user.id), "Address removed successfully")
