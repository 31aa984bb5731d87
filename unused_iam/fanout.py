"""
Fan-out / join helpers shared by the audit pipelines
"""

import logging
import concurrent.futures
from typing import Any, Callable, Iterable, List, Optional, Tuple

from .errors import AggregatedFailure, DetailFetchFailure

logger = logging.getLogger(__name__)


def fan_out(func: Callable[[Any], Any], keys: Iterable[Any], operation: str,
            max_workers: Optional[int] = None) -> Tuple[List[Tuple[Any, Any]], List[DetailFetchFailure]]:
    """Call func once per key concurrently and wait for every call to finish.

    Returns ``(results, failures)`` where results holds ``(key, value)`` pairs
    in completion order and failures holds one DetailFetchFailure per call
    that raised. No call is cancelled when another one fails.
    """
    keys = list(keys)
    results = []
    failures = []

    if not keys:
        return results, failures

    workers = max_workers or len(keys)
    logger.info(f"Calling {operation} for {len(keys)} item(s) with {workers} worker(s)")

    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {executor.submit(func, key): key for key in keys}

        for future in concurrent.futures.as_completed(futures):
            key = futures[future]
            try:
                results.append((key, future.result()))
            except Exception as e:
                logger.debug(f"{operation} failed for {key!r}: {e}")
                failures.append(DetailFetchFailure(operation, key, e))

    return results, failures


def raise_for_failures(stage: str, failures: List[DetailFetchFailure]):
    """Abort the stage if any of its requests failed"""
    if failures:
        raise AggregatedFailure(stage, failures)
