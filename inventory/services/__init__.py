from .base_service import (
    ServiceError,
    ValidationError,
    NotFoundError,
    InvalidStatusError,
    NoItemsError,
    InsufficientStockError,
    DuplicateNumberError,
    InvalidWarehousesError,
    CommitError,
    success_response,
    paginate_queryset,
)

from .numbering_service import NumberingService
from .ledger_service import StockLedgerService
from .mutation_service import StockMutationService, StockChange
from .policies import (
    StockLine,
    StockMove,
    StockProjection,
    NoCheckPolicy,
    SingleWarehousePolicy,
    MultiWarehouseSplitPolicy,
    AggregateDeltaPolicy,
)
from .validation_service import StockValidationService
from .operation_service import OperationService
from .receipt_service import ReceiptService
from .delivery_service import DeliveryService
from .transfer_service import TransferService
from .adjustment_service import AdjustmentService
from .product_service import ProductService


__all__ = [
    # Errors
    'ServiceError',
    'ValidationError',
    'NotFoundError',
    'InvalidStatusError',
    'NoItemsError',
    'InsufficientStockError',
    'DuplicateNumberError',
    'InvalidWarehousesError',
    'CommitError',
    'success_response',
    'paginate_queryset',

    # Stock core
    'NumberingService',
    'StockLedgerService',
    'StockMutationService',
    'StockChange',
    'StockLine',
    'StockMove',
    'StockProjection',
    'NoCheckPolicy',
    'SingleWarehousePolicy',
    'MultiWarehouseSplitPolicy',
    'AggregateDeltaPolicy',
    'StockValidationService',

    # Operations
    'OperationService',
    'ReceiptService',
    'DeliveryService',
    'TransferService',
    'AdjustmentService',

    # Queries
    'ProductService',
]
