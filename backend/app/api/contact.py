"""
Contact API Endpoint
"""
from fastapi import APIRouter, HTTPException

from app.domain.customer import ContactMessageCreate
from app.services.contact_service import ContactService

router = APIRouter()


@router.post("/")
async def submit_contact_form(body: ContactMessageCreate):
    """Store a contact form message and notify the admin"""
    try:
        message = ContactService().submit(body)

        return {
            "status": "success",
            "message": "Contact form submitted successfully",
            "data": {"id": message.id}
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error submitting contact form: {str(e)}")
