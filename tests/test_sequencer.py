import json
import logging

import pytest

from dseq.entries import EntryType
from dseq.sequencer import (
    APP_VERSION,
    DataServer,
    ExecTxResult,
    ProposalStatus,
    QueryResponse,
    SequencerApplication,
    StreamError,
)
from dseq.state import State


class FailingServer:
    """Stream that refuses transaction entries."""

    def __init__(self):
        self.entries = []
        self.pending = None
        self.rolled_back = False

    def start_atomic_op(self):
        self.pending = []

    def add_stream_entry(self, entry_type, data):
        if entry_type == EntryType.TRANSACTION:
            raise StreamError("disk full")
        self.pending.append((entry_type, data))
        return len(self.pending) - 1

    def commit_atomic_op(self):
        self.entries.extend(self.pending)

    def rollback_atomic_op(self):
        self.rolled_back = True
        self.pending = None


@pytest.fixture
def app():
    return SequencerApplication(logging.getLogger("test"), identity="node0", state=State())


def test_check_tx_ok(app):
    assert app.check_tx(b"tx").code == 0


def test_process_proposal_accepts(app):
    assert app.process_proposal([b"a"]) is ProposalStatus.ACCEPT


def test_prepare_proposal_is_permutation(app):
    txs = [bytes([i]) for i in range(20)]
    original = list(txs)
    shuffled = app.prepare_proposal(txs)
    assert sorted(shuffled) == sorted(original)
    assert txs == original


def test_finalize_empty_block(app):
    response = app.finalize_block(4, [])
    assert response.tx_results == []
    assert response.app_hash == app.state.hash()
    assert app.state.height == 0
    assert app.data_server.entries == ()


def test_finalize_block_writes_entries(app):
    txs = [b"one", b"two", b"three"]
    response = app.finalize_block(5, txs)
    entries = app.data_server.entries
    assert [e.entry_type for e in entries] == [1, 2, 2, 2, 3]
    assert [e.data for e in entries[1:4]] == txs
    assert [e.number for e in entries] == list(range(5))
    assert response.tx_results == [ExecTxResult()] * 3
    assert app.state.size == 3
    assert app.state.height == 5
    assert response.app_hash == app.state.hash()
    assert app.staged_txs == txs


def test_entry_numbers_continue_across_blocks(app):
    app.finalize_block(1, [b"a"])
    app.finalize_block(2, [b"b"])
    assert [e.number for e in app.data_server.entries] == list(range(6))


def test_failed_stream_rolls_back():
    server = FailingServer()
    app = SequencerApplication(None, state=State(), data_server=server)
    with pytest.raises(StreamError):
        app.finalize_block(1, [b"tx"])
    assert server.rolled_back
    assert server.entries == []
    assert app.state.height == 0


def test_data_server_requires_atomic_op():
    server = DataServer()
    with pytest.raises(StreamError):
        server.add_stream_entry(EntryType.TRANSACTION, b"x")
    with pytest.raises(StreamError):
        server.commit_atomic_op()


def test_data_server_rejects_nested_op():
    server = DataServer()
    server.start_atomic_op()
    with pytest.raises(StreamError):
        server.start_atomic_op()


def test_data_server_rollback_discards():
    server = DataServer()
    server.start_atomic_op()
    server.add_stream_entry(EntryType.BLOCK_START, b"")
    server.rollback_atomic_op()
    assert server.entries == ()


def test_commit_persists_state(tmp_path):
    with State.open(tmp_path) as state:
        app = SequencerApplication(None, state=state)
        app.finalize_block(8, [b"a", b"b"])
        app.commit()
    with State.open(tmp_path) as reloaded:
        assert (reloaded.size, reloaded.height) == (2, 8)


def test_commit_without_store_raises(app):
    with pytest.raises(RuntimeError):
        app.commit()


def test_info_reports_state(app):
    app.finalize_block(3, [b"x", b"y"])
    info = app.info()
    assert json.loads(info.data) == {"size": 2, "height": 3}
    assert info.app_version == APP_VERSION
    assert info.last_block_height == 3
    assert info.last_block_app_hash == app.state.hash()


def test_query_returns_empty_response(app):
    assert app.query("/anything") == QueryResponse()


def test_vote_extension_defaults(app):
    assert app.extend_vote() == b""
    assert app.verify_vote_extension() is ProposalStatus.UNKNOWN