"""Contact service — stores and lists contact form submissions."""

from typing import List, Optional

from sqlalchemy.orm import Session

from backoffice.models.contact import Contact


class ContactService:
    """Single-table storage for inquiries from the public site."""

    @staticmethod
    def create(
        db: Session,
        name: str,
        email: str,
        message: str,
        company: Optional[str] = None,
    ) -> Contact:
        contact = Contact(name=name, email=email, message=message, company=company)
        db.add(contact)
        db.commit()
        db.refresh(contact)
        return contact

    @staticmethod
    def list_contacts(db: Session) -> List[Contact]:
        """All submissions, newest first."""
        return (
            db.query(Contact)
            .order_by(Contact.created_at.desc(), Contact.id.desc())
            .all()
        )


contact_service = ContactService()
