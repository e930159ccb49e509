from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from booking_service.api.schemas import (
    AvailabilityRequestSchema,
    AvailabilityResponseSchema,
    BookingRequestSchema,
    BookingResponseSchema,
    ErrorResponseSchema,
    SlotSchema,
)
from booking_service.application.exceptions import InvalidInput, SlotConflict, UnexpectedError
from booking_service.application.use_cases.availability import CheckAvailabilityUseCase
from booking_service.application.use_cases.booking import BookingUseCase
from booking_service.application.utils.booking_input import parse_booking_date
from booking_service.domain.entities.booking import BookingRequest
from booking_service.wiring.dependencies import get_booking_use_case, get_check_availability_use_case

router = APIRouter(prefix="/api")
logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    400: {"model": ErrorResponseSchema},
    500: {"model": ErrorResponseSchema},
}


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("CF-Connecting-IP") or request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


@router.post("/availability", response_model=AvailabilityResponseSchema, responses=ERROR_RESPONSES)
async def check_availability(
    req: AvailabilityRequestSchema,
    request: Request,
    uc: CheckAvailabilityUseCase = Depends(get_check_availability_use_case),
):
    try:
        day = parse_booking_date(req.date)
        slots = await uc.execute(day, req.duration_minutes, client_ip(request))
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Error checking availability", extra={"error": str(e)})
        raise HTTPException(status_code=500, detail="Failed to check availability")

    return AvailabilityResponseSchema(
        available_slots=[SlotSchema(start_time=s.start_time, end_time=s.end_time) for s in slots],
    )


@router.post(
    "/book",
    response_model=BookingResponseSchema,
    response_model_exclude_none=True,
    responses={**ERROR_RESPONSES, 409: {"model": ErrorResponseSchema}},
)
async def create_booking(
    req: BookingRequestSchema,
    request: Request,
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    booking = BookingRequest(
        client_name=req.name,
        email=req.email,
        phone=req.phone,
        date=req.date,
        time=req.time,
        service_names=list(req.services),
        notes=req.notes,
        agreed_to_terms=req.agreed_to_terms,
    )
    try:
        outcome = await uc.execute(booking, client_ip(request))
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SlotConflict as e:
        raise HTTPException(status_code=409, detail=str(e))
    except UnexpectedError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.exception("Error creating booking", extra={"error": str(e)})
        raise HTTPException(status_code=500, detail="Failed to create booking. Please try again later.")

    return BookingResponseSchema(
        message=outcome.message,
        booking_id=outcome.booking_id,
        event_id=outcome.event_id,
    )
