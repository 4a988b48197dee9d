# database/notes.py
from typing import List, Optional

from sqlalchemy.orm import Session

from core.errors import NotFoundError, ValidationError
from database.contacts import get_owned_contact
from database.models import Note


def _get_owned_note(db: Session, user_id: int, note_id: int) -> Note:
    note = db.query(Note).filter(Note.id == note_id, Note.user_id == user_id).first()
    if note is None:
        raise NotFoundError("Note not found")
    return note


def list_notes(db: Session, user_id: int, contact_id: int) -> List[Note]:
    get_owned_contact(db, user_id, contact_id)
    return (
        db.query(Note)
        .filter(Note.contact_id == contact_id, Note.user_id == user_id)
        .order_by(Note.created_at.desc(), Note.id.desc())
        .all()
    )


def create_note(db: Session, user_id: int, contact_id: Optional[int], content: Optional[str]) -> Note:
    if not contact_id or not content:
        raise ValidationError("Contact ID and content are required")
    get_owned_contact(db, user_id, contact_id)
    note = Note(user_id=user_id, contact_id=contact_id, content=content)
    db.add(note)
    db.commit()
    db.refresh(note)
    return note


def update_note(db: Session, user_id: int, note_id: int, content: Optional[str]) -> Note:
    if not content:
        raise ValidationError("Content is required")
    note = _get_owned_note(db, user_id, note_id)
    note.content = content
    db.commit()
    db.refresh(note)
    return note


def delete_note(db: Session, user_id: int, note_id: int) -> None:
    note = _get_owned_note(db, user_id, note_id)
    db.delete(note)
    db.commit()
