"""
Payments API Endpoints
JazzCash / EasyPaisa hosted checkout and the JazzCash return callback

- POST /api/v1/payments/jazzcash           - Signed JazzCash form for an order
- POST /api/v1/payments/jazzcash/callback  - Gateway result (form post, 302 redirect)
- POST /api/v1/payments/easypaisa          - EasyPaisa form for an order
"""
import logging
from urllib.parse import urlencode
from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import RedirectResponse, PlainTextResponse

from app.core.config import settings
from app.domain.order import PaymentRequest
from app.services.payment_service import PaymentService, PaymentError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/jazzcash")
async def create_jazzcash_payment(body: PaymentRequest):
    """
    Returns payment_url and form_data; the storefront posts form_data to
    payment_url from the browser
    """
    try:
        result = PaymentService().create_jazzcash_payment(body.order_id, body.amount, body.currency)

        return {
            "status": "success",
            "data": result
        }

    except PaymentError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"JazzCash payment error: {e}")
        raise HTTPException(status_code=500, detail=f"Error creating JazzCash payment: {str(e)}")


@router.post("/jazzcash/callback")
async def jazzcash_callback(request: Request):
    """
    JazzCash posts the transaction result here

    Response code 000 marks the order paid, anything else cancels it. The
    customer is redirected to the storefront success or failure page.
    """
    try:
        form = await request.form()
        data = {key: str(value) for key, value in form.items()}

        _, redirect_url = PaymentService().handle_jazzcash_callback(data)
        return RedirectResponse(url=redirect_url, status_code=302)

    except PaymentError as e:
        return PlainTextResponse(e.message, status_code=e.status_code)
    except Exception as e:
        logger.error(f"JazzCash callback error: {e}")
        error_url = f"{settings.SITE_URL}/payment/failed?{urlencode({'error': 'Payment processing error'})}"
        return RedirectResponse(url=error_url, status_code=302)


@router.post("/easypaisa")
async def create_easypaisa_payment(body: PaymentRequest):
    try:
        result = PaymentService().create_easypaisa_payment(body.order_id, body.amount)

        return {
            "status": "success",
            "data": result
        }

    except PaymentError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"EasyPaisa payment error: {e}")
        raise HTTPException(status_code=500, detail=f"Error creating EasyPaisa payment: {str(e)}")
