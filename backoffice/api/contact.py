"""Public contact form router."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from backoffice.core.config import settings
from backoffice.core.rate_limiter import limiter
from backoffice.db.session import get_db
from backoffice.schemas.schemas import ContactCreate, ContactOut
from backoffice.services.contact_service import contact_service

router = APIRouter(tags=["contact"])


@router.post("/contact")
@limiter.limit(settings.CONTACT_RATE_LIMIT)
def submit_contact(request: Request, body: ContactCreate, db: Session = Depends(get_db)):
    """Store a contact form submission. No authentication required."""
    contact = contact_service.create(
        db, body.name, body.email, body.message, body.company,
    )
    return {"success": True, "contact": ContactOut.model_validate(contact)}
