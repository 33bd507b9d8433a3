"""Exceptions raised by the order engine."""

from __future__ import annotations


class InvalidSelection(ValueError):
    """A selection references ids foreign to its item or misses a required choice."""

    def __init__(self, item_id: str, message: str) -> None:
        super().__init__(f"{item_id}: {message}")
        self.item_id = item_id
        self.message = message


class IllegalTransition(ValueError):
    """A status change that the transition table does not offer."""

    def __init__(self, entity_id: str, current: str, target: str) -> None:
        super().__init__(f"{entity_id}: cannot move from {current} to {target}")
        self.entity_id = entity_id
        self.current = current
        self.target = target
