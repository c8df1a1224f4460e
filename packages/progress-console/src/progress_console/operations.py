"""In-memory forest of the operations currently in progress."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Hashable, Iterator

from .errors import ProgressProtocolError


@dataclass(eq=False)
class ProgressOperation:
    operation_id: Hashable
    short_description: str
    status: str
    parent: "ProgressOperation | None" = None
    active_children: set = field(default_factory=set, init=False, repr=False)

    @property
    def parent_id(self) -> Hashable | None:
        return self.parent.operation_id if self.parent is not None else None

    @property
    def message(self) -> str:
        return self.status or self.short_description

    @property
    def has_active_children(self) -> bool:
        return bool(self.active_children)


class ProgressOperations:
    def __init__(self) -> None:
        self._operations: dict[Hashable, ProgressOperation] = {}

    def __len__(self) -> int:
        return len(self._operations)

    def __contains__(self, operation_id: object) -> bool:
        return operation_id in self._operations

    def __iter__(self) -> Iterator[ProgressOperation]:
        return iter(list(self._operations.values()))

    def get(self, operation_id: Hashable) -> ProgressOperation | None:
        return self._operations.get(operation_id)

    def start(
        self,
        description: str,
        status: str,
        operation_id: Hashable,
        parent_id: Hashable | None = None,
    ) -> ProgressOperation:
        if operation_id in self._operations:
            raise ProgressProtocolError(f"Operation {operation_id!r} has already been started")
        parent = None
        if parent_id is not None:
            parent = self._operations.get(parent_id)
            if parent is None:
                raise ProgressProtocolError(
                    f"Operation {operation_id!r} started with parent {parent_id!r} which is not in progress"
                )
        operation = ProgressOperation(operation_id, description, status or "", parent)
        if parent is not None:
            parent.active_children.add(operation_id)
        self._operations[operation_id] = operation
        return operation

    def progress(self, status: str, operation_id: Hashable) -> ProgressOperation:
        operation = self._operations.get(operation_id)
        if operation is None:
            raise ProgressProtocolError(f"Received progress for operation {operation_id!r} which is not in progress")
        operation.status = status
        return operation

    def complete(self, operation_id: Hashable) -> ProgressOperation:
        operation = self._operations.get(operation_id)
        if operation is None:
            raise ProgressProtocolError(f"Received completion for operation {operation_id!r} which is not in progress")
        if operation.has_active_children:
            children = ", ".join(repr(c) for c in sorted(operation.active_children, key=repr))
            raise ProgressProtocolError(
                f"Operation {operation_id!r} completed while its children are still in progress: {children}"
            )
        del self._operations[operation_id]
        if operation.parent is not None:
            operation.parent.active_children.discard(operation_id)
        return operation
