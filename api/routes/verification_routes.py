import asyncio
import logging
from typing import Dict, Optional

from fastapi import APIRouter, Body, HTTPException, Query, status
from fastapi.responses import JSONResponse

from models.carrier_record import LookupMiss
from models.verification import VerificationSummary, VerifyCarrierRequest, VerifyDotMcRequest
from services.verification_service import VerificationService
from utils.identifiers import IdentifierError, normalize_dot, normalize_mc

logger = logging.getLogger(__name__)

router = APIRouter(tags=["verification"])
service = VerificationService()

UNAVAILABLE_MESSAGE = "Verification service temporarily unavailable"


async def _verify_carrier(mc: Optional[str], dot: Optional[str]):
    try:
        return await asyncio.to_thread(service.verify_carrier, mc, dot)
    except IdentifierError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Carrier verification failed for MC '{mc}' DOT '{dot}': {e}", exc_info=True)
        miss = LookupMiss(
            mc_number=normalize_mc(mc),
            dot_number=normalize_dot(dot),
            error=UNAVAILABLE_MESSAGE,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=miss.to_response()
        )


@router.get("/api/verify-carrier",
            response_model=Dict,
            summary="Verify a carrier",
            description="Look a carrier up on FMCSA SAFER by MC and/or DOT number")
async def verify_carrier(
    mc: Optional[str] = Query(None, description="MC number, prefixes and dashes allowed"),
    dot: Optional[str] = Query(None, description="USDOT number")
):
    """Verify a carrier by MC or DOT number.

    DOT is used for the lookup when both are given.

    Returns:
        dict: Carrier record, or a not-found shape. A not-found shape with an
        `error` field means SAFER could not be reached, not that the carrier
        does not exist.

    Raises:
        HTTPException: 400 if neither number is given or one is malformed
    """
    return await _verify_carrier(mc, dot)


@router.post("/api/verify-carrier",
             response_model=Dict,
             summary="Verify a carrier (JSON body)",
             description="Same as the GET form; numbers may come from the query string or the body")
async def verify_carrier_post(
    body: Optional[VerifyCarrierRequest] = Body(None),
    mc: Optional[str] = Query(None, description="MC number, prefixes and dashes allowed"),
    dot: Optional[str] = Query(None, description="USDOT number")
):
    """Verify a carrier with identifiers from the query string or a JSON body."""
    if body is not None:
        mc = mc or body.mc
        dot = dot or body.dot
    return await _verify_carrier(mc, dot)


@router.post("/functions/verify-dot-mc",
             response_model=Dict,
             summary="Verify a carrier and explain the verdict",
             description="Returns verified/status, the carrier record, a message and warnings")
async def verify_dot_mc(request: Optional[VerifyDotMcRequest] = Body(None)):
    """Verify a carrier for onboarding and return a verdict envelope.

    Returns:
        dict: VerificationSummary. 400 with status "error" for bad input,
        500 with status "error" for unexpected faults.
    """
    dot = request.dot_number if request else None
    mc = request.mc_number if request else None
    try:
        summary = await asyncio.to_thread(service.verify_dot_mc, dot, mc)
    except IdentifierError as e:
        summary = VerificationSummary(status="error", message=str(e))
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=summary.to_response())
    except Exception as e:
        logger.error(f"verify-dot-mc failed for DOT '{dot}' MC '{mc}': {e}", exc_info=True)
        summary = VerificationSummary(
            status="error",
            message="An unexpected error occurred while verifying the carrier. Please try again."
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=summary.to_response()
        )
    return summary.to_response()
