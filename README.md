# dseq

`dseq` is a small sequencer application for a replicated state machine.
Each finalized block with transactions is written to a data stream as a
block-start entry, one entry per transaction and a block-end entry, all
inside a single atomic operation. The application keeps a tiny persistent
state (the number of transactions processed and the last block height);
the size, as an 8-byte big-endian unsigned integer, is the application
hash.

The package also ships a load generator that sends random transactions to
a set of nodes over HTTP and reports the average request time.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Command line

Send test transactions to one or more nodes, one picked at random for each
request:

```
dseq load --nodes localhost:26657,localhost:26660 -r 100 -c 9
```

Options:

- `--nodes`, `-n`: comma-separated `host:port` list of nodes (required)
- `--requests`, `-r`: total number of requests to send (default 10)
- `--concurrency`, `-c`: number of requests in flight at once (default 1)

Each transaction is 32 random bytes, hex-encoded, sent as a GET to
`http://<node>/broadcast_tx_commit?tx="0x..."`. The URL and status code of
each response are printed; failed requests print an error and count as
zero time. At the end a line such as

```
requests 100, concurrency 9, avg: 12.34 ms, total 1.234s
```

is printed. Invalid arguments (for example a concurrency of 0 with
requests to send) print a message to standard error and exit with status 1.

Show the version:

```
dseq --version
```

## Library use

```python
import logging

from dseq.entries import format_entry
from dseq.sequencer import DataServer, SequencerApplication
from dseq.state import State

server = DataServer()
with State.open("/path/to/home") as state:
    app = SequencerApplication(
        logging.getLogger("dseq"),
        identity="node0",
        address=b"\x00" * 20,
        state=state,
        data_server=server,
    )
    ordered = app.prepare_proposal([b"tx-1", b"tx-2"])
    response = app.finalize_block(1, ordered)
    app.commit()

for entry in server.entries:
    print(format_entry(entry))
```

- `dseq.state.State` holds `size` and `height`. `State.open(path)` creates
  the directory if needed and keeps the state in an SQLite file `state.db`
  inside it; `save()` writes it, `hash()` returns the application hash,
  `to_json()` gives the stored JSON form, and `close()` (or leaving the
  `with` block) closes the store.
- `dseq.sequencer.SequencerApplication` provides `check_tx`, `init_chain`,
  `prepare_proposal` (returns the transactions shuffled), `process_proposal`
  (always `ProposalStatus.ACCEPT`), `finalize_block`, `extend_vote`,
  `verify_vote_extension`, `commit` (saves the state), `info` and `query`.
  `finalize_block` returns a `FinalizeBlockResponse` with one `ExecTxResult`
  per transaction and the new application hash; an empty block writes
  nothing and leaves the height unchanged. If writing to the stream fails,
  the atomic operation is rolled back and the error is raised.
- `dseq.sequencer.DataServer` is an in-memory stream. Any object with its
  methods `start_atomic_op`, `add_stream_entry`, `commit_atomic_op` and
  `rollback_atomic_op` can be passed as `data_server`. Misuse of the atomic
  operations raises `StreamError`.
- `dseq.entries` defines `EntryType` (`BLOCK_START`, `TRANSACTION`,
  `BLOCK_END`), the `StreamEntry` record, `entry_kind` and `format_entry`,
  which renders an entry as `number | kind | 0x<hex data>`.
- `dseq.load.run_load(nodes, requests, concurrency)` runs a load test and
  returns a `LoadReport`; `make_tx` and `send_tx` build and send a single
  transaction.

## What this package does not do

- It does not run a consensus node: there is no command that starts a node,
  joins peers or drives `SequencerApplication` from a network.
- The data stream is held in memory only. There is no stream file, no
  server that serves the stream over the network, and no command that
  connects to a node and reads its stream.