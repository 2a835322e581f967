"""Notification subscription endpoints."""

import logging

from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

from statuspage.subscriptions.models import SubscribeRequest
from statuspage.subscriptions.store import InvalidEmailError, SubscriptionStore, SubscriptionStoreError

router = APIRouter(prefix="/api", tags=["subscriptions"])
logger = logging.getLogger("statuspage.routers.subscribe")


@router.post("/subscribe")
async def subscribe(body: SubscribeRequest, request: Request) -> JSONResponse:
    store: SubscriptionStore = request.app.state.subscriptions
    try:
        subscription, created = store.add(body.email, body.types)
    except InvalidEmailError:
        return JSONResponse({"error": "Invalid email address"}, status_code=400)
    except SubscriptionStoreError:
        logger.exception("Subscription store write failed")
        return JSONResponse({"error": "Failed to save subscription"}, status_code=500)

    if not created:
        return JSONResponse({"message": "Email already subscribed"}, status_code=200)

    return JSONResponse(
        {"message": "Subscription created", "subscription": subscription.to_payload()},
        status_code=201,
    )


@router.delete("/subscribe")
async def unsubscribe(request: Request, email: str = "") -> JSONResponse:
    store: SubscriptionStore = request.app.state.subscriptions
    try:
        removed = store.remove(email)
    except InvalidEmailError:
        return JSONResponse({"error": "Invalid email address"}, status_code=400)
    except SubscriptionStoreError:
        logger.exception("Subscription store write failed")
        return JSONResponse({"error": "Failed to remove subscription"}, status_code=500)

    if not removed:
        return JSONResponse({"error": "Subscription not found"}, status_code=404)
    return JSONResponse({"message": "Unsubscribed"}, status_code=200)
