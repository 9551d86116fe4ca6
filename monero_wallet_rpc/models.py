"""
Typed shapes for wallet RPC payloads.

Response payloads are plain dicts as decoded from JSON; these TypedDicts
describe them without copying or filtering fields. Amounts are integers
in atomic units, exactly as the daemon returns them.
"""

from __future__ import annotations

from decimal import Decimal
from typing import NotRequired, TypedDict


class Destination(TypedDict):
    """Transfer recipient. ``amount`` is in XMR (decimal), not atomic units."""

    amount: Decimal | float | int | str
    address: str


class Balance(TypedDict):
    balance: int
    unlocked_balance: int


class Payment(TypedDict):
    amount: int
    payment_id: str
    tx_hash: str
    block_height: int
    unlock_time: int


class Transfer(TypedDict):
    fee: int
    tx_hash: str
    tx_key: str
    tx_blob: str


class TransferSplit(TypedDict):
    fee_list: list[int]
    tx_hash_list: list[str]
    tx_blob_list: list[str]
    amount_list: list[int]
    tx_key_list: list[str]


class IncomingTransfer(TypedDict):
    amount: int
    spent: bool
    global_index: int
    tx_hash: str
    tx_size: int


class SweepAll(TypedDict):
    tx_hash_list: list[str]
    tx_key_list: NotRequired[list[str]]
    tx_blob_list: NotRequired[list[str]]


class SplitIntegratedAddress(TypedDict):
    standard_address: str
    payment_id: str


class EmptyResult(TypedDict):
    """Result of operations that return no fields (open, create, stop)."""
