"""
Sufficiency policies used by the stock validator.

A policy turns the lines of an operation into signed stock moves and
rejects the whole plan before anything is written when stock would run
short. Policies work on a ``StockProjection`` so several lines for the
same product are checked against what the earlier lines already took.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

from inventory.services.base_service import InsufficientStockError


@dataclass
class StockLine:
    product_id: int
    product_name: str
    quantity: int


@dataclass
class StockMove:
    product_id: int
    warehouse_id: int
    delta: int
    operation_type: str
    notes: str = ""
    adjust_product: bool = True


class StockProjection:
    """Warehouse quantities as they will be once the planned moves are applied."""

    def __init__(self, quantities: Dict[Tuple[int, int], int] = None):
        self.quantities = dict(quantities or {})

    def quantity(self, product_id: int, warehouse_id: int) -> int:
        return self.quantities.get((product_id, warehouse_id), 0)

    def total(self, product_id: int) -> int:
        return sum(q for (p, _), q in self.quantities.items() if p == product_id)

    def warehouses(self, product_id: int) -> List[Tuple[int, int]]:
        """(warehouse_id, quantity) pairs, largest quantity first, ties by warehouse id."""
        rows = [(w, q) for (p, w), q in self.quantities.items() if p == product_id]
        return sorted(rows, key=lambda row: (-row[1], row[0]))

    def move(self, product_id: int, warehouse_id: int, delta: int):
        key = (product_id, warehouse_id)
        self.quantities[key] = self.quantities.get(key, 0) + delta


class SufficiencyPolicy:
    operation_type = None

    def __init__(self, projection: StockProjection, notes: str = ""):
        self.projection = projection
        self.notes = notes

    def plan(self, lines: List[StockLine]) -> List[StockMove]:
        raise NotImplementedError

    def _move(self, product_id, warehouse_id, delta, adjust_product=True) -> StockMove:
        self.projection.move(product_id, warehouse_id, delta)
        return StockMove(
            product_id=product_id,
            warehouse_id=warehouse_id,
            delta=delta,
            operation_type=self.operation_type,
            notes=self.notes,
            adjust_product=adjust_product,
        )


class NoCheckPolicy(SufficiencyPolicy):
    """Incoming stock, nothing to check."""

    def __init__(self, projection, warehouse_id: int, operation_type: str, notes: str = "",
                 adjust_product: bool = True):
        super().__init__(projection, notes)
        self.warehouse_id = warehouse_id
        self.operation_type = operation_type
        self.adjust_product = adjust_product

    def plan(self, lines):
        return [
            self._move(line.product_id, self.warehouse_id, line.quantity, self.adjust_product)
            for line in lines
        ]


class SingleWarehousePolicy(SufficiencyPolicy):
    """Outgoing stock taken from one named warehouse."""

    def __init__(self, projection, warehouse_id: int, operation_type: str, notes: str = "",
                 adjust_product: bool = True):
        super().__init__(projection, notes)
        self.warehouse_id = warehouse_id
        self.operation_type = operation_type
        self.adjust_product = adjust_product

    def check(self, line: StockLine):
        available = self.projection.quantity(line.product_id, self.warehouse_id)
        if available < line.quantity:
            raise InsufficientStockError(
                line.product_id, line.product_name, line.quantity, available,
                warehouse_id=self.warehouse_id,
            )

    def plan(self, lines):
        moves = []
        for line in lines:
            self.check(line)
            moves.append(
                self._move(line.product_id, self.warehouse_id, -line.quantity, self.adjust_product)
            )
        return moves


class MultiWarehouseSplitPolicy(SufficiencyPolicy):
    """
    Outgoing stock with no warehouse named: the total across warehouses
    must cover the line, then the fullest warehouses are drained first.
    """

    def __init__(self, projection, operation_type: str, notes: str = ""):
        super().__init__(projection, notes)
        self.operation_type = operation_type

    def plan(self, lines):
        moves = []
        for line in lines:
            available = self.projection.total(line.product_id)
            if available < line.quantity:
                raise InsufficientStockError(
                    line.product_id, line.product_name, line.quantity, available
                )

            remaining = line.quantity
            for warehouse_id, quantity in self.projection.warehouses(line.product_id):
                if remaining <= 0:
                    break
                if quantity <= 0:
                    continue
                take = min(quantity, remaining)
                moves.append(self._move(line.product_id, warehouse_id, -take))
                remaining -= take
        return moves


class AggregateDeltaPolicy(SufficiencyPolicy):
    """A single signed correction that may not drive the row below zero."""

    def __init__(self, projection, warehouse_id: int, delta: int, operation_type: str,
                 notes: str = ""):
        super().__init__(projection, notes)
        self.warehouse_id = warehouse_id
        self.delta = delta
        self.operation_type = operation_type

    def plan(self, lines):
        moves = []
        for line in lines:
            available = self.projection.quantity(line.product_id, self.warehouse_id)
            if available + self.delta < 0:
                raise InsufficientStockError(
                    line.product_id, line.product_name, -self.delta, available,
                    warehouse_id=self.warehouse_id,
                )
            moves.append(self._move(line.product_id, self.warehouse_id, self.delta))
        return moves
