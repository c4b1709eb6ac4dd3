"""Sequencer application: orders transactions and writes them to a data stream."""

from __future__ import annotations

import json
import logging
import random
from dataclasses import dataclass, field
from enum import IntEnum

from dseq.entries import EntryType, StreamEntry
from dseq.state import State

APP_VERSION = 1
ABCI_VERSION = "2.0.0"
CODE_TYPE_OK = 0


class StreamError(Exception):
    """Raised when the data stream cannot accept an operation."""


class DataServer:
    """In-memory data stream whose entries are written in atomic operations."""

    def __init__(self):
        self._entries: list[StreamEntry] = []
        self._pending: list[StreamEntry] | None = None

    @property
    def entries(self):
        """Committed entries, in order."""
        return tuple(self._entries)

    def start_atomic_op(self):
        if self._pending is not None:
            raise StreamError("atomic operation already in progress")
        self._pending = []

    def add_stream_entry(self, entry_type, data):
        """Stage an entry and return its entry number."""
        if self._pending is None:
            raise StreamError("no atomic operation in progress")
        number = len(self._entries) + len(self._pending)
        self._pending.append(StreamEntry(number, int(entry_type), bytes(data)))
        return number

    def commit_atomic_op(self):
        if self._pending is None:
            raise StreamError("no atomic operation in progress")
        self._entries.extend(self._pending)
        self._pending = None

    def rollback_atomic_op(self):
        if self._pending is None:
            raise StreamError("no atomic operation in progress")
        self._pending = None


class ProposalStatus(IntEnum):
    UNKNOWN = 0
    ACCEPT = 1
    REJECT = 2


@dataclass(frozen=True)
class ExecTxResult:
    code: int = CODE_TYPE_OK


@dataclass(frozen=True)
class FinalizeBlockResponse:
    tx_results: list[ExecTxResult]
    app_hash: bytes


@dataclass(frozen=True)
class InfoResponse:
    data: str
    version: str
    app_version: int
    last_block_height: int
    last_block_app_hash: bytes


@dataclass(frozen=True)
class QueryResponse:
    code: int = CODE_TYPE_OK
    value: bytes = b""
    log: str = ""


class SequencerApplication:
    """Consensus application that shuffles proposals and streams finalized blocks."""

    def __init__(self, logger, *, identity="", address=b"", state=None, data_server=None):
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self.identity = identity
        self.address = bytes(address)
        self.state = state if state is not None else State()
        self.data_server = data_server if data_server is not None else DataServer()
        self.staged_txs: list[bytes] = []

    def check_tx(self, tx):
        return ExecTxResult(code=CODE_TYPE_OK)

    def init_chain(self, chain_id, initial_height):
        self.logger.info(
            "initializing chain chain-id=%s initial-height=%s", chain_id, initial_height
        )

    def prepare_proposal(self, txs):
        """Return the proposed transactions in a random order."""
        ordered = list(txs)
        random.shuffle(ordered)
        return ordered

    def process_proposal(self, txs):
        return ProposalStatus.ACCEPT

    def finalize_block(self, height, txs):
        """Write a block's transactions to the stream and advance the state."""
        txs = list(txs)
        self.staged_txs = []
        if not txs:
            return FinalizeBlockResponse(tx_results=[], app_hash=self.state.hash())

        server = self.data_server
        server.start_atomic_op()
        block_num = None
        try:
            block_num = server.add_stream_entry(EntryType.BLOCK_START, b"")
            results = []
            for tx in txs:
                self.staged_txs.append(tx)
                results.append(ExecTxResult(code=CODE_TYPE_OK))
                self.state.size += 1
                server.add_stream_entry(EntryType.TRANSACTION, tx)
            server.add_stream_entry(EntryType.BLOCK_END, b"")
        except Exception as exc:
            self.logger.error(
                "error finalizing block to stream block=%s error=%s", block_num, exc
            )
            server.rollback_atomic_op()
            raise
        server.commit_atomic_op()

        self.state.height = height
        return FinalizeBlockResponse(tx_results=results, app_hash=self.state.hash())

    def extend_vote(self):
        return b""

    def verify_vote_extension(self):
        return ProposalStatus.UNKNOWN

    def commit(self):
        """Persist the state."""
        try:
            self.state.save()
        except Exception as exc:
            self.logger.error("app failed to save state error=%s", exc)
            raise

    def info(self):
        data = json.dumps(
            {"size": self.state.size, "height": self.state.height}, separators=(",", ":")
        )
        return InfoResponse(
            data=data,
            version=ABCI_VERSION,
            app_version=APP_VERSION,
            last_block_height=self.state.height,
            last_block_app_hash=self.state.hash(),
        )

    def query(self, path):
        return QueryResponse()