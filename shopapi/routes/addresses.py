from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from shopapi.database import get_db
from shopapi.models import Address
from shopapi.responses import envelope
from shopapi.schemas import AddressCreate, AddressUpdate
from shopapi.services import addresses as address_service

router = APIRouter(prefix="/addresses", tags=["addresses"])


def _serialize_address(addr: Address) -> dict:
    return {
        "address_id":     addr.id,
        "user_id":        addr.user_id,
        "receiver_name":  addr.receiver_name,
        "phone_number":   addr.phone_number,
        "street_address": addr.street_address,
        "city":           addr.city,
        "is_default":     addr.is_default,
    }


# =====================================================
# USER: ADDRESS DETAIL
# =====================================================
@router.get("/detail/{address_id}", status_code=status.HTTP_200_OK)
def get_address(address_id: int, db: Session = Depends(get_db)):
    address = address_service.get_address(db, address_id)
    return envelope(data=_serialize_address(address))


# =====================================================
# USER: GET ALL ADDRESSES
# =====================================================
@router.get("/{user_id}", status_code=status.HTTP_200_OK)
def list_addresses(user_id: int, db: Session = Depends(get_db)):
    addresses = address_service.list_addresses(db, user_id)
    return envelope(data=[_serialize_address(a) for a in addresses])


# =====================================================
# USER: CREATE ADDRESS
# =====================================================
@router.post("", status_code=status.HTTP_201_CREATED)
def create_address(payload: AddressCreate, db: Session = Depends(get_db)):
    address = address_service.create_address(db, payload)
    return envelope(
        data={"address_id": address.id},
        message="Address added",
    )


# =====================================================
# USER: UPDATE ADDRESS
# =====================================================
@router.put("/{address_id}", status_code=status.HTTP_200_OK)
def update_address(
    address_id: int,
    payload: AddressUpdate,
    db: Session = Depends(get_db),
):
    address = address_service.update_address(db, address_id, payload)
    return envelope(data=_serialize_address(address), message="Address updated")


# =====================================================
# USER: DELETE ADDRESS
# =====================================================
@router.delete("/{address_id}", status_code=status.HTTP_200_OK)
def delete_address(address_id: int, db: Session = Depends(get_db)):
    address_service.delete_address(db, address_id)
    return envelope(message="Address deleted")
