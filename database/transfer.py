# database/transfer.py
"""
Bulk export and import of a user's contacts in a flat record shape.

Export renders one record per contact, oldest first. Import is best-effort:
each record is validated, checked for duplicates and committed on its own,
so a bad record never aborts the rest of the batch.
"""

from typing import Any, Dict, List, Optional, Sequence

from loguru import logger
from pydantic import ValidationError as RecordValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from core.schemas import ContactRecord
from database.contacts import OLDEST_FIRST
from database.models import Contact

NOTES_SEPARATOR = " | "


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def _flag(value: Any) -> bool:
    return value is True or value == "Yes"


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    return value or None


def export_contacts(db: Session, user_id: int) -> List[Dict[str, str]]:
    contacts = (
        db.query(Contact)
        .filter(Contact.user_id == user_id)
        .options(selectinload(Contact.referred_by), selectinload(Contact.notes))
        .order_by(*OLDEST_FIRST)
        .all()
    )
    return [
        {
            "full_name": contact.full_name,
            "job_title": contact.job_title or "",
            "firm": contact.firm or "",
            "role": contact.role or "",
            "email": contact.email or "",
            "phone": contact.phone or "",
            "linked_in": contact.linked_in or "",
            "reached_out": _yes_no(contact.reached_out),
            "responded": _yes_no(contact.responded),
            "referred_by": contact.referred_by.full_name if contact.referred_by else "",
            "notes": NOTES_SEPARATOR.join(note.content for note in contact.notes),
            "created_at": contact.created_at.isoformat(),
            "updated_at": contact.updated_at.isoformat(),
        }
        for contact in contacts
    ]


def _find_duplicate(db: Session, user_id: int, full_name: str, firm: Optional[str]) -> Optional[Contact]:
    return (
        db.query(Contact)
        .filter(Contact.user_id == user_id, Contact.full_name == full_name, Contact.firm == firm)
        .first()
    )


def _find_referrer(db: Session, user_id: int, full_name: Optional[str]) -> Optional[Contact]:
    if not full_name:
        return None
    return (
        db.query(Contact)
        .filter(Contact.user_id == user_id, Contact.full_name == full_name)
        .order_by(*OLDEST_FIRST)
        .first()
    )


def _raw_name(raw: Any) -> Any:
    if isinstance(raw, dict):
        return raw.get("fullName", raw.get("full_name"))
    return None


def import_contacts(db: Session, user_id: int, records: Sequence[Any]) -> Dict[str, Any]:
    """Import raw records; each is validated, de-duplicated and committed on its own."""
    results = {"success": 0, "failed": 0, "errors": []}

    for raw in records:
        try:
            record = ContactRecord.model_validate(raw, from_attributes=False)
        except RecordValidationError as e:
            fields = ", ".join(".".join(str(part) for part in err["loc"]) or "record" for err in e.errors())
            logger.warning(f"Skipping malformed import record: {fields}")
            results["failed"] += 1
            results["errors"].append(f"Error importing {_raw_name(raw) or 'record'}: invalid {fields}")
            continue

        if not record.full_name:
            results["failed"] += 1
            results["errors"].append("Missing full name for contact")
            continue

        firm = _blank_to_none(record.firm)
        if _find_duplicate(db, user_id, record.full_name, firm):
            results["failed"] += 1
            results["errors"].append(f"Duplicate contact: {record.full_name}")
            continue

        referrer = _find_referrer(db, user_id, record.referred_by)
        try:
            db.add(
                Contact(
                    user_id=user_id,
                    full_name=record.full_name,
                    job_title=_blank_to_none(record.job_title),
                    firm=firm,
                    role=_blank_to_none(record.role),
                    email=_blank_to_none(record.email),
                    phone=_blank_to_none(record.phone),
                    linked_in=_blank_to_none(record.linked_in),
                    reached_out=_flag(record.reached_out),
                    responded=_flag(record.responded),
                    referred_by_id=referrer.id if referrer else None,
                )
            )
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.warning(f"Import of {record.full_name!r} failed: {e}")
            results["failed"] += 1
            results["errors"].append(f"Error importing {record.full_name}: {e}")
            continue
        results["success"] += 1

    logger.info(f"User {user_id} imported contacts: {results['success']} succeeded, {results['failed']} failed")
    return results
