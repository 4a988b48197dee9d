# database/contacts.py
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from loguru import logger
from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from core.errors import NotFoundError, ValidationError
from database.models import Contact

NEWEST_FIRST = (Contact.created_at.desc(), Contact.id.desc())
OLDEST_FIRST = (Contact.created_at.asc(), Contact.id.asc())


@dataclass
class ContactFilters:
    firm: Optional[str] = None
    role: Optional[str] = None
    reached_out: Optional[bool] = None
    responded: Optional[bool] = None
    search: Optional[str] = None


def _with_relations(query):
    return query.options(
        selectinload(Contact.referred_by),
        selectinload(Contact.referred_contacts),
        selectinload(Contact.notes),
    )


def find_contact(db: Session, user_id: int, contact_id: Optional[int]) -> Optional[Contact]:
    if contact_id is None:
        return None
    return db.query(Contact).filter(Contact.id == contact_id, Contact.user_id == user_id).first()


def get_owned_contact(db: Session, user_id: int, contact_id: int) -> Contact:
    contact = find_contact(db, user_id, contact_id)
    if contact is None:
        raise NotFoundError("Contact not found")
    return contact


def _check_referrer(db: Session, user_id: int, referrer_id: int, contact_id: Optional[int] = None) -> None:
    if contact_id is not None and referrer_id == contact_id:
        raise ValidationError("Invalid referrer")
    if find_contact(db, user_id, referrer_id) is None:
        raise ValidationError("Invalid referrer")


def list_contacts(db: Session, user_id: int, filters: Optional[ContactFilters] = None) -> List[Contact]:
    filters = filters or ContactFilters()
    query = db.query(Contact).filter(Contact.user_id == user_id)

    if filters.firm:
        query = query.filter(Contact.firm == filters.firm)
    if filters.role:
        query = query.filter(Contact.role == filters.role)
    if filters.reached_out is not None:
        query = query.filter(Contact.reached_out == filters.reached_out)
    if filters.responded is not None:
        query = query.filter(Contact.responded == filters.responded)
    if filters.search:
        pattern = f"%{filters.search}%"
        query = query.filter(
            or_(
                Contact.full_name.ilike(pattern),
                Contact.firm.ilike(pattern),
                Contact.role.ilike(pattern),
                Contact.email.ilike(pattern),
            )
        )

    return _with_relations(query).order_by(*NEWEST_FIRST).all()


def get_contact(db: Session, user_id: int, contact_id: int) -> Contact:
    contact = (
        _with_relations(db.query(Contact))
        .filter(Contact.id == contact_id, Contact.user_id == user_id)
        .first()
    )
    if contact is None:
        raise NotFoundError("Contact not found")
    return contact


def create_contact(db: Session, user_id: int, data: Dict[str, Any]) -> Contact:
    if not data.get("full_name"):
        raise ValidationError("Full name is required")
    referrer_id = data.get("referred_by_id")
    if referrer_id is not None:
        _check_referrer(db, user_id, referrer_id)

    db_contact = Contact(
        user_id=user_id,
        full_name=data["full_name"],
        job_title=data.get("job_title"),
        firm=data.get("firm"),
        role=data.get("role"),
        email=data.get("email"),
        phone=data.get("phone"),
        linked_in=data.get("linked_in"),
        reached_out=bool(data.get("reached_out")),
        responded=bool(data.get("responded")),
        referred_by_id=referrer_id,
    )
    db.add(db_contact)
    db.commit()
    logger.info(f"User {user_id} created contact {db_contact.id}")
    return get_contact(db, user_id, db_contact.id)


def update_contact(db: Session, user_id: int, contact_id: int, data: Dict[str, Any]) -> Contact:
    """Write only the keys present in ``data``; everything else is left as is."""
    db_contact = get_owned_contact(db, user_id, contact_id)

    if "full_name" in data and not data["full_name"]:
        raise ValidationError("Full name is required")
    for flag in ("reached_out", "responded"):
        if flag in data and data[flag] is None:
            data.pop(flag)

    referrer_id = data.get("referred_by_id")
    if referrer_id is not None and referrer_id != db_contact.referred_by_id:
        _check_referrer(db, user_id, referrer_id, contact_id=db_contact.id)

    for key, value in data.items():
        setattr(db_contact, key, value)
    db.commit()
    db.expire_all()
    return get_contact(db, user_id, contact_id)


def delete_contact(db: Session, user_id: int, contact_id: int) -> None:
    """Delete a contact and its notes; contacts it referred lose their referrer."""
    db_contact = get_owned_contact(db, user_id, contact_id)
    db.query(Contact).filter(
        Contact.referred_by_id == db_contact.id, Contact.user_id == user_id
    ).update({Contact.referred_by_id: None}, synchronize_session="fetch")
    db.delete(db_contact)
    db.commit()
    logger.info(f"User {user_id} deleted contact {contact_id}")
