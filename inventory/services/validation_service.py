import logging
from typing import Dict, Any

from django.db import DatabaseError, transaction
from django.utils import timezone

from inventory.models import OperationStatus
from inventory.services.base_service import (
    success_response, ServiceError, NotFoundError, InvalidStatusError,
    NoItemsError, CommitError,
)
from inventory.services.ledger_service import StockLedgerService
from inventory.services.mutation_service import StockMutationService
from inventory.services.policies import StockProjection

logger = logging.getLogger(__name__)


class StockValidationService:
    """
    Commits an operation's stock effects and marks it done.

    ``operation_service`` is one of the receipt, delivery, transfer or
    adjustment services. It provides ``model``, ``VALIDATABLE_STATUSES``,
    ``lines_for(operation)`` and ``plan(operation, lines, projection)``;
    everything else (locking, mutation, ledger, status) happens here inside
    a single database transaction.
    """

    @classmethod
    def validate(cls, operation_service, operation_id: int, user_id: int = None) -> Dict[str, Any]:
        model = operation_service.model
        label = model.__name__
        reference_number = None

        logger.info(f"Validating {label} {operation_id}")

        try:
            with transaction.atomic():
                try:
                    operation = model.objects.select_for_update().get(id=operation_id)
                except (model.DoesNotExist, ValueError, TypeError):
                    raise NotFoundError(label, operation_id)

                reference_number = operation.reference_number

                if operation.status not in operation_service.VALIDATABLE_STATUSES:
                    raise InvalidStatusError(
                        f"{label} {reference_number} cannot be validated in status '{operation.status}'",
                        operation.status,
                    )

                lines = operation_service.lines_for(operation)
                if not lines:
                    raise NoItemsError(reference_number)

                rows = StockMutationService.lock_rows(line.product_id for line in lines)
                projection = StockProjection(
                    {key: row.quantity for key, row in rows.items()}
                )
                moves = operation_service.plan(operation, lines, projection)

                stock_updates = []
                for move in moves:
                    change = StockMutationService.apply_delta(
                        move.product_id,
                        move.warehouse_id,
                        move.delta,
                        adjust_product=move.adjust_product,
                    )
                    StockLedgerService.append(
                        product_id=move.product_id,
                        warehouse_id=move.warehouse_id,
                        operation_type=move.operation_type,
                        reference_number=reference_number,
                        quantity_change=move.delta,
                        quantity_after=change.warehouse_after,
                        user_id=user_id,
                        notes=move.notes,
                    )
                    stock_updates.append({
                        "product_id": move.product_id,
                        "warehouse_id": move.warehouse_id,
                        "operation_type": move.operation_type,
                        "quantity_change": move.delta,
                        "quantity_after": change.warehouse_after,
                        "product_stock_after": change.product_after,
                    })

                operation.status = OperationStatus.DONE
                operation.validated_at = timezone.now()
                operation.save(update_fields=["status", "validated_at", "updated_at"])

        except ServiceError as e:
            logger.warning(f"{label} {reference_number or operation_id} not validated: {e.code} {e.message}")
            raise
        except DatabaseError as e:
            logger.exception(f"{label} {reference_number or operation_id} validation rolled back")
            cls.record_failure(model, operation_id, str(e))
            raise CommitError(
                f"Validation of {reference_number or operation_id} failed and was rolled back",
                reference_number,
            )

        logger.info(
            f"{label} {reference_number} validated: {len(lines)} items, {len(stock_updates)} stock moves"
        )

        return success_response({
            "reference_number": reference_number,
            "items_processed": len(lines),
            "stock_updates": stock_updates,
        }, f"{label} {reference_number} validated")

    @classmethod
    def record_failure(cls, model, operation_id: int, reason: str):
        """Best effort note on the operation once the failed commit is rolled back."""
        try:
            operation = model.objects.filter(id=operation_id).first()
            if operation is None:
                return
            note = f"Validation failed: {reason}"
            operation.notes = f"{operation.notes}\n{note}" if operation.notes else note
            operation.save(update_fields=["notes", "updated_at"])
        except DatabaseError:
            logger.exception(f"Could not record validation failure on {model.__name__} {operation_id}")
