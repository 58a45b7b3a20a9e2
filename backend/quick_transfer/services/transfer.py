"""Stock transfer between two locations.

A transfer runs as::

    validating -> activating_destination -> adjusting_quantities -> succeeded
                                                                 -> failed_user_error
                                                                 -> failed_transport

Validation failures raise ``ValidationError`` before anything is sent.
Activating the destination is best-effort: whatever goes wrong there is
logged and reported back as a warning, and the adjustment is still sent.
The adjustment carries both deltas in one ``inventoryAdjustQuantities``
call, so the remote service applies them as a single adjustment group.
There is no retry; a transport failure after the mutation was sent leaves
the outcome unknown to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from quick_transfer.core.config import get_settings
from quick_transfer.core.errors import RemoteUserError, TransportError, ValidationError
from quick_transfer.schemas.inventory import (
    TransferRequest,
    TransferResult,
    TransferState,
    TransferWarning,
    UserError,
)
from quick_transfer.schemas.remote import ActivateResult, AdjustQuantitiesResult
from quick_transfer.services.inventory import GraphQLExecutor
from quick_transfer.services.queries import ACTIVATE_INVENTORY_MUTATION, ADJUST_INVENTORY_MUTATION


logger = logging.getLogger(__name__)

QUANTITY_NAME = "available"
REFERENCE_DOCUMENT_PREFIX = "gid://quick-transfer/Transfer/"

_FIELD_ALIASES = {name: info.alias or name for name, info in TransferRequest.model_fields.items()}


def build_transfer_input(
    inventory_item_id: str,
    origin_location_id: str,
    destination_location_id: str,
    quantity: int,
    reason: str = "correction",
    reference_document_uri: str | None = None,
) -> dict[str, Any]:
    amount = abs(quantity)
    transfer_input: dict[str, Any] = {
        "reason": reason,
        "name": QUANTITY_NAME,
        "changes": [
            {"inventoryItemId": inventory_item_id, "locationId": origin_location_id, "delta": -amount},
            {"inventoryItemId": inventory_item_id, "locationId": destination_location_id, "delta": amount},
        ],
    }
    if reference_document_uri:
        transfer_input["referenceDocumentUri"] = reference_document_uri
    return transfer_input


def validate_transfer_request(payload: TransferRequest | Mapping[str, Any]) -> TransferRequest:
    if isinstance(payload, TransferRequest):
        payload = payload.model_dump(by_alias=True)
    if not isinstance(payload, Mapping):
        raise ValidationError("Request body must be a JSON object")

    try:
        request = TransferRequest.model_validate(payload)
    except PydanticValidationError as exc:
        fields = sorted({_field_alias(error["loc"]) for error in exc.errors()})
        raise ValidationError(_validation_message(fields), fields) from exc

    if request.origin_location_id == request.destination_location_id:
        raise ValidationError(
            "Origin and destination locations must differ",
            ["originLocationId", "destinationLocationId"],
        )
    return request


def _field_alias(loc: tuple) -> str:
    if not loc:
        return "body"
    return _FIELD_ALIASES.get(str(loc[0]), str(loc[0]))


def _validation_message(fields: list[str]) -> str:
    messages = []
    missing = [field for field in fields if field != "quantity"]
    if missing:
        messages.append(f"Missing or invalid fields: {', '.join(missing)}")
    if "quantity" in fields:
        messages.append("Quantity must be a positive integer")
    return "; ".join(messages)


class TransferOrchestrator:
    def __init__(self, client: GraphQLExecutor, reason: str | None = None) -> None:
        self.client = client
        self.reason = reason or get_settings().adjustment_reason

    async def transfer(self, request: TransferRequest | Mapping[str, Any]) -> TransferResult:
        self._enter(TransferState.VALIDATING)
        try:
            transfer_request = validate_transfer_request(request)
        except ValidationError as exc:
            self._enter(TransferState.FAILED_VALIDATION, fields=exc.fields)
            raise

        warnings = await self._activate_destination(transfer_request)
        return await self._adjust_quantities(transfer_request, warnings)

    async def _activate_destination(self, request: TransferRequest) -> list[TransferWarning]:
        self._enter(
            TransferState.ACTIVATING_DESTINATION,
            item=request.inventory_item_id,
            location=request.destination_location_id,
        )
        try:
            data = await self.client.execute(
                ACTIVATE_INVENTORY_MUTATION,
                {
                    "inventoryItemId": request.inventory_item_id,
                    "locationId": request.destination_location_id,
                },
            )
            payload = ActivateResult.model_validate(data).inventory_activate
        except RemoteUserError as exc:
            logger.warning("activation rejected item=%s location=%s errors=%s", request.inventory_item_id, request.destination_location_id, exc.user_errors)
            return [
                TransferWarning(
                    stage="activation",
                    message=exc.message,
                    errors=[UserError.model_validate(error) for error in exc.user_errors],
                )
            ]
        except Exception as exc:
            logger.warning(
                "activation failed item=%s location=%s error=%r",
                request.inventory_item_id,
                request.destination_location_id,
                exc,
                exc_info=True,
            )
            return [TransferWarning(stage="activation", message=str(exc) or exc.__class__.__name__)]

        user_errors = payload.user_errors if payload else []
        if not user_errors:
            return []

        logger.warning(
            "activation user errors item=%s location=%s errors=%s",
            request.inventory_item_id,
            request.destination_location_id,
            [error.message for error in user_errors],
        )
        return [
            TransferWarning(
                stage="activation",
                message="Destination activation reported errors; the item may already be stocked there",
                errors=[UserError(field=error.field, message=error.message) for error in user_errors],
            )
        ]

    async def _adjust_quantities(self, request: TransferRequest, warnings: list[TransferWarning]) -> TransferResult:
        reference = f"{REFERENCE_DOCUMENT_PREFIX}{request.idempotency_key}" if request.idempotency_key else None
        transfer_input = build_transfer_input(
            request.inventory_item_id,
            request.origin_location_id,
            request.destination_location_id,
            request.quantity,
            reason=self.reason,
            reference_document_uri=reference,
        )
        self._enter(TransferState.ADJUSTING_QUANTITIES, input=transfer_input)

        try:
            data = await self.client.execute(ADJUST_INVENTORY_MUTATION, {"input": transfer_input})
            payload = AdjustQuantitiesResult.model_validate(data).inventory_adjust_quantities
        except RemoteUserError as exc:
            return self._user_error_result(request, exc.user_errors, warnings)
        except TransportError as exc:
            return self._transport_result(request, exc.message, warnings)
        except PydanticValidationError as exc:
            logger.error("unexpected adjust response shape: %s", exc)
            return self._transport_result(request, "Unexpected response from remote service", warnings)

        if payload.user_errors:
            return self._user_error_result(
                request,
                [{"field": error.field, "message": error.message} for error in payload.user_errors],
                warnings,
            )

        group = payload.inventory_adjustment_group
        if group is None or not group.id:
            return self._transport_result(request, "Remote service returned no adjustment group", warnings)

        self._enter(TransferState.SUCCEEDED, adjustment=group.id)
        logger.info(
            "transfer succeeded item=%s origin=%s destination=%s quantity=%s adjustment=%s",
            request.inventory_item_id,
            request.origin_location_id,
            request.destination_location_id,
            request.quantity,
            group.id,
        )
        return TransferResult(
            success=True,
            state=TransferState.SUCCEEDED,
            adjustment_id=group.id,
            created_at=group.created_at,
            reason=group.reason or self.reason,
            warnings=warnings,
        )

    def _user_error_result(
        self, request: TransferRequest, user_errors: list[dict[str, Any]], warnings: list[TransferWarning]
    ) -> TransferResult:
        errors = [UserError.model_validate(error) for error in user_errors]
        self._enter(TransferState.FAILED_USER_ERROR, item=request.inventory_item_id, errors=[e.message for e in errors])
        return TransferResult(
            success=False,
            state=TransferState.FAILED_USER_ERROR,
            error=", ".join(error.message for error in errors),
            errors=errors,
            warnings=warnings,
        )

    def _transport_result(self, request: TransferRequest, message: str, warnings: list[TransferWarning]) -> TransferResult:
        self._enter(TransferState.FAILED_TRANSPORT)
        logger.error(
            "transfer transport failure item=%s origin=%s destination=%s quantity=%s error=%s",
            request.inventory_item_id,
            request.origin_location_id,
            request.destination_location_id,
            request.quantity,
            message,
        )
        return TransferResult(
            success=False,
            state=TransferState.FAILED_TRANSPORT,
            error=message,
            warnings=warnings,
        )

    @staticmethod
    def _enter(state: TransferState, **context: Any) -> None:
        details = " ".join(f"{key}={value}" for key, value in context.items())
        logger.debug("transfer state=%s %s", state.value, details)
