"""Shards point sums and pairing products across worker processes.

Group addition and multiplication in GT are commutative and associative, so
large aggregations and Miller-loop products can be split into chunks, reduced
independently and combined in any order with an identical result. The pure
Python field arithmetic holds the GIL, so the work is spread over a
`ProcessPoolExecutor` rather than threads.

Workers receive and return plain `py_ecc` points and field elements, never
the package's wrapper types.
"""
from __future__ import annotations

import logging
import os
from concurrent.futures import ProcessPoolExecutor
from typing import List, Optional, Sequence, Tuple

from py_ecc.optimized_bls12_381 import FQ12, add

from bls_signatures.utils.curve import PointG1, miller_loop_product, sum_points
from bls_signatures.utils.hash import hash_message_to_point

logger = logging.getLogger(__name__)

__all__ = [
    "par_sum_points",
    "par_distinct_message_product",
]


def _worker_count(n_items: int, max_workers: Optional[int]) -> int:
    workers = max_workers or os.cpu_count() or 1
    return max(1, min(workers, n_items))


def _chunks(items: Sequence, n_chunks: int) -> List[list]:
    """Splits items into n_chunks contiguous, nearly equal slices."""
    size, extra = divmod(len(items), n_chunks)
    out, start = [], 0
    for i in range(n_chunks):
        end = start + size + (1 if i < extra else 0)
        out.append(list(items[start:end]))
        start = end
    return [chunk for chunk in out if chunk]


# --- Worker functions (module level so they can be pickled) ---

def _sum_chunk(job: Tuple[list, tuple]):
    points, identity = job
    return sum_points(points, identity)


def _distinct_chunk(items: List[Tuple[bytes, PointG1]]) -> FQ12:
    return miller_loop_product([(hash_message_to_point(msg), pk) for msg, pk in items])


# --- Public API ---

def par_sum_points(points: Sequence, identity, max_workers: Optional[int] = None):
    """Sums points across worker processes.

    Args:
        points: Projective points of one group.
        identity: The identity of that group, used to seed every partial sum.
        max_workers: Upper bound on worker processes (default: CPU count).

    Returns:
        The projective sum, equal to `sum_points(points, identity)`.
    """
    workers = _worker_count(len(points), max_workers)
    chunks = _chunks(points, workers)
    logger.debug("Summing %d points in %d chunks", len(points), len(chunks))
    with ProcessPoolExecutor(max_workers=workers) as executor:
        partials = list(executor.map(_sum_chunk, [(chunk, identity) for chunk in chunks]))
    acc = identity
    for partial in partials:
        acc = add(acc, partial)
    return acc


def _reduce_products(partials) -> FQ12:
    product = FQ12.one()
    for partial in partials:
        product = product * partial
    return product


def par_distinct_message_product(
    pubkeys: Sequence[PointG1],
    messages: Sequence[bytes],
    max_workers: Optional[int] = None,
) -> FQ12:
    """Hashes messages and pairs them with their keys across worker processes.

    Returns the product of e(pubkey_i, H(message_i)) before final
    exponentiation. Hashing to G2 dominates the cost of distinct-message
    verification, so it runs inside the workers too.
    """
    items = [(bytes(msg), pk) for pk, msg in zip(pubkeys, messages)]
    workers = _worker_count(len(items), max_workers)
    chunks = _chunks(items, workers)
    logger.debug("Hashing and pairing %d messages in %d chunks", len(items), len(chunks))
    with ProcessPoolExecutor(max_workers=workers) as executor:
        return _reduce_products(executor.map(_distinct_chunk, chunks))
