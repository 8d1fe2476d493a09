"""Address writes that keep at most one default address per user."""
import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shopapi.database import atomic
from shopapi.errors import InvalidRequest, NotFound, PersistenceError
from shopapi.models import Address
from shopapi.schemas import AddressCreate, AddressUpdate

logger = logging.getLogger(__name__)


def _clear_defaults(db: Session, user_id: int, exclude_id: Optional[int] = None) -> None:
    query = db.query(Address).filter(
        Address.user_id == user_id,
        Address.is_default.is_(True),
    )
    if exclude_id is not None:
        query = query.filter(Address.id != exclude_id)
    query.update({"is_default": False}, synchronize_session=False)


def list_addresses(db: Session, user_id: int) -> List[Address]:
    """Default address first, then newest first."""
    return (
        db.query(Address)
        .filter(Address.user_id == user_id)
        .order_by(Address.is_default.desc(), Address.created_at.desc(), Address.id.desc())
        .all()
    )


def get_address(db: Session, address_id: int) -> Address:
    address = db.get(Address, address_id)
    if not address:
        raise NotFound("Address not found")
    return address


def create_address(db: Session, payload: AddressCreate) -> Address:
    try:
        with atomic(db):
            if payload.is_default:
                _clear_defaults(db, payload.user_id)

            address = Address(
                user_id=payload.user_id,
                receiver_name=payload.receiver_name,
                phone_number=payload.phone_number,
                street_address=payload.street_address,
                city=payload.city,
                is_default=payload.is_default,
            )
            db.add(address)
    except SQLAlchemyError as e:
        logger.exception("Address create failed | user_id=%s", payload.user_id)
        raise PersistenceError(cause=e) from e

    db.refresh(address)
    return address


def update_address(db: Session, address_id: int, payload: AddressUpdate) -> Address:
    """
    Apply a partial update. Setting ``is_default`` to true clears the flag
    on the owner's other addresses in the same transaction; setting it to
    false touches nothing else.
    """
    fields = {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if value is not None
    }
    if not fields:
        raise InvalidRequest("No fields provided for update")

    try:
        with atomic(db):
            address = db.get(Address, address_id)
            if not address:
                raise NotFound("Address not found")

            if fields.get("is_default"):
                _clear_defaults(db, address.user_id, exclude_id=address.id)

            for field, value in fields.items():
                setattr(address, field, value)
    except SQLAlchemyError as e:
        logger.exception("Address update failed | address_id=%s", address_id)
        raise PersistenceError(cause=e) from e

    db.refresh(address)
    return address


def delete_address(db: Session, address_id: int) -> None:
    try:
        with atomic(db):
            deleted = (
                db.query(Address)
                .filter(Address.id == address_id)
                .delete(synchronize_session=False)
            )
            if not deleted:
                raise NotFound("Address not found")
    except SQLAlchemyError as e:
        raise PersistenceError(cause=e) from e
