# main.py
import time
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import settings
from core.errors import CRMError
from core.google_auth import verify_google_credential
from core.logging import setup_logging
from core.schemas import (
    AuthResponse,
    ContactCreate,
    ContactDetail,
    ContactRecord,
    ContactSummary,
    ContactUpdate,
    DashboardStats,
    GoogleAuthResponse,
    GoogleLogin,
    ImportRequest,
    ImportResponse,
    MeResponse,
    MessageResponse,
    NoteCreate,
    NoteResponse,
    NoteUpdate,
    UserCreate,
    UserLogin,
)
from core.tokens_access import create_access_token, get_current_user_id
from database import contacts, dashboard, notes, transfer
from database.database import Database, get_db
from database.users import authenticate_user, create_user, get_user_by_id, upsert_google_user

setup_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    database = getattr(app.state, "database", None)
    if database is None:
        database = Database(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
        app.state.database = database
    database.connect()
    logger.info(f"Starting {settings.APP_NAME} {settings.APP_VERSION} ({settings.ENVIRONMENT})")
    yield
    database.disconnect()
    logger.info(f"Stopped {settings.APP_NAME}")


app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start_time) * 1000
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms:.1f}ms)")
    return response


def error_body(message) -> dict:
    # "message" is what the web client reads, "detail" is the FastAPI convention
    return {"detail": message, "message": message}


@app.exception_handler(CRMError)
async def crm_error_handler(request: Request, exc: CRMError):
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.detail), headers=exc.headers)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    content = error_body("Internal server error")
    if settings.is_development:
        content["error"] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


@app.get("/health")
def health():
    return {"status": "OK", "message": "Server is running"}


# Auth

@app.post("/api/auth/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register_user(user: UserCreate, db: Session = Depends(get_db)):
    created_user = create_user(db, user.email, user.password, user.name)
    token = create_access_token(created_user.id, created_user.email)
    return {"message": "User created successfully", "token": token, "user": created_user}


@app.post("/api/auth/login", response_model=AuthResponse)
def login(credentials: UserLogin, db: Session = Depends(get_db)):
    db_user = authenticate_user(db, credentials.email, credentials.password)
    if not db_user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    token = create_access_token(db_user.id, db_user.email)
    return {"message": "Login successful", "token": token, "user": db_user}


@app.post("/api/auth/google", response_model=GoogleAuthResponse)
def google_login(body: GoogleLogin, db: Session = Depends(get_db)):
    if not body.credential:
        raise HTTPException(status_code=400, detail="No credential provided")
    if not settings.GOOGLE_CLIENT_ID:
        raise HTTPException(status_code=503, detail="Google sign-in is not configured")
    identity = verify_google_credential(body.credential, settings.GOOGLE_CLIENT_ID)
    db_user = upsert_google_user(db, identity)
    token = create_access_token(db_user.id, db_user.email)
    return {"success": True, "token": token, "user": db_user}


@app.get("/api/auth/me", response_model=MeResponse)
def read_me(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    db_user = get_user_by_id(db, user_id)
    if db_user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return {"user": db_user}


# Contacts

def _flag_param(value: Optional[str]) -> Optional[bool]:
    """A supplied flag filter matches true only for the literal "true"."""
    if value is None:
        return None
    return value == "true"


@app.get("/api/contacts", response_model=List[ContactSummary])
def read_contacts(
    firm: Optional[str] = Query(None),
    role: Optional[str] = Query(None),
    reached_out: Optional[str] = Query(None, alias="reachedOut"),
    responded: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Matches name, firm, role or email"),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    filters = contacts.ContactFilters(
        firm=firm,
        role=role,
        reached_out=_flag_param(reached_out),
        responded=_flag_param(responded),
        search=search,
    )
    return contacts.list_contacts(db, user_id, filters)


@app.post("/api/contacts", response_model=ContactDetail, status_code=status.HTTP_201_CREATED)
def create_contact(
    contact: ContactCreate, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)
):
    return contacts.create_contact(db, user_id, contact.model_dump())


@app.get("/api/contacts/{contact_id}", response_model=ContactDetail)
def read_contact(contact_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return contacts.get_contact(db, user_id, contact_id)


@app.put("/api/contacts/{contact_id}", response_model=ContactDetail)
def update_contact(
    contact_id: int,
    contact: ContactUpdate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return contacts.update_contact(db, user_id, contact_id, contact.model_dump(exclude_unset=True))


@app.delete("/api/contacts/{contact_id}", response_model=MessageResponse)
def delete_contact(contact_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    contacts.delete_contact(db, user_id, contact_id)
    return {"message": "Contact deleted successfully"}


# Notes

@app.get("/api/notes/contact/{contact_id}", response_model=List[NoteResponse])
def read_notes(contact_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return notes.list_notes(db, user_id, contact_id)


@app.post("/api/notes", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
def create_note(note: NoteCreate, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return notes.create_note(db, user_id, note.contact_id, note.content)


@app.put("/api/notes/{note_id}", response_model=NoteResponse)
def update_note(
    note_id: int, note: NoteUpdate, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)
):
    return notes.update_note(db, user_id, note_id, note.content)


@app.delete("/api/notes/{note_id}", response_model=MessageResponse)
def delete_note(note_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    notes.delete_note(db, user_id, note_id)
    return {"message": "Note deleted successfully"}


# Dashboard

@app.get("/api/dashboard/stats", response_model=DashboardStats)
def read_dashboard_stats(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return dashboard.get_stats(db, user_id)


# Import / export

@app.get("/api/export", response_model=List[ContactRecord])
def export_contacts(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return transfer.export_contacts(db, user_id)


@app.post("/api/import", response_model=ImportResponse)
def import_contacts(
    payload: ImportRequest, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)
):
    results = transfer.import_contacts(db, user_id, payload.contacts)
    return {
        "message": f"Import completed: {results['success']} succeeded, {results['failed']} failed",
        "results": results,
    }
