"""Load generator sending random transactions to nodes over HTTP."""

from __future__ import annotations

import math
import os
import random
import time
import urllib.error
import urllib.request
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass


@dataclass(frozen=True)
class LoadReport:
    """Summary of a load run."""

    requests: int
    concurrency: int
    average_ms: float
    total_seconds: float

    def __str__(self):
        return (
            f"requests {self.requests}, concurrency {self.concurrency}, "
            f"avg: {self.average_ms} ms, total {self.total_seconds:.3f}s"
        )


def make_tx(node):
    """Build a broadcast URL carrying a random 32-byte transaction."""
    tx = os.urandom(40)[-32:]
    return f'http://{node}/broadcast_tx_commit?tx="0x{tx.hex()}"'


def _drain(response):
    try:
        response.read()
    except OSError as warn:
        print("Warn:", warn)


def send_tx(url):
    """GET ``url``; return the elapsed seconds, or 0.0 if the request failed."""
    start = time.monotonic()
    try:
        with urllib.request.urlopen(url) as response:
            status = response.status
            _drain(response)
    except urllib.error.HTTPError as exc:
        status = exc.code
        with exc:
            _drain(exc)
    except (OSError, ValueError) as exc:
        print("Error:", exc)
        return 0.0
    print(f"URL: {url}, Status Code: {status}")
    return time.monotonic() - start


def run_load(nodes, requests, concurrency):
    """Send ``requests`` transactions to random nodes, ``concurrency`` at a time."""
    nodes = list(nodes)
    if requests < 0:
        raise ValueError("requests must not be negative")
    if requests and concurrency < 1:
        raise ValueError("concurrency must be at least 1")
    if requests and not nodes:
        raise ValueError("no nodes given")

    start = time.monotonic()
    durations = []
    if requests:
        with ThreadPoolExecutor(max_workers=concurrency) as pool:
            durations = list(
                pool.map(lambda _: send_tx(make_tx(random.choice(nodes))), range(requests))
            )
    total_ms = int(sum(durations) * 1000)
    average = total_ms / requests if requests else math.nan
    return LoadReport(
        requests=requests,
        concurrency=concurrency,
        average_ms=average,
        total_seconds=time.monotonic() - start,
    )