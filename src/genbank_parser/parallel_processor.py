"""Parallel parsing of many record texts."""

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, TypeVar

from .assembler import parse

logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')


@dataclass
class ProcessingResult:
    """Result of processing an item."""
    item: Any
    index: int
    result: Optional[Any] = None
    error: Optional[Exception] = None
    duration: float = 0.0

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass
class BatchProcessingStats:
    """Statistics for batch processing."""
    total_items: int = 0
    processed: int = 0
    successful: int = 0
    failed: int = 0
    total_duration: float = 0.0

    @property
    def success_rate(self) -> float:
        return self.successful / self.processed if self.processed > 0 else 0.0

    @property
    def average_duration(self) -> float:
        return self.total_duration / self.processed if self.processed > 0 else 0.0


class ParallelProcessor:
    """Processes items on a thread pool, keeping results in input order."""

    def __init__(self,
                 max_workers: int = 4,
                 progress_callback: Optional[Callable[[int, int], None]] = None):
        """
        Initialize parallel processor.

        Args:
            max_workers: Maximum number of worker threads
            progress_callback: Callback for progress updates (processed, total)
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self.max_workers = max_workers
        self.progress_callback = progress_callback

    def process_batch(self,
                      items: Sequence[T],
                      process_func: Callable[[T], R],
                      error_handler: Optional[Callable[[int, T, Exception], Any]] = None
                      ) -> Tuple[List[ProcessingResult], BatchProcessingStats]:
        """
        Process a batch of items in parallel.

        Args:
            items: Items to process
            process_func: Function to process each item
            error_handler: Called as ``error_handler(index, item, error)`` for each failure,
                after all items are processed and in input order

        Returns:
            Tuple of (results in input order, statistics)
        """
        stats = BatchProcessingStats(total_items=len(items))
        if not items:
            return [], stats

        results: List[Optional[ProcessingResult]] = [None] * len(items)

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_index: Dict[Future, int] = {
                executor.submit(self._process_single, index, item, process_func): index
                for index, item in enumerate(items)
            }

            for future in as_completed(future_to_index):
                result = future.result()
                results[result.index] = result

                stats.processed += 1
                stats.total_duration += result.duration
                if result.success:
                    stats.successful += 1
                else:
                    stats.failed += 1

                if self.progress_callback:
                    self.progress_callback(stats.processed, stats.total_items)

        ordered = [result for result in results if result is not None]

        if error_handler:
            for result in ordered:
                if not result.success:
                    error_handler(result.index, result.item, result.error)

        return ordered, stats

    def _process_single(self, index: int, item: T, process_func: Callable[[T], R]) -> ProcessingResult:
        """Process a single item, capturing any exception."""
        start_time = time.time()

        try:
            result = process_func(item)
            return ProcessingResult(item=item, index=index, result=result,
                                    duration=time.time() - start_time)
        except Exception as e:
            logger.debug(f"Error processing item {index}: {e}")
            return ProcessingResult(item=item, index=index, error=e,
                                    duration=time.time() - start_time)


def parse_records_parallel(texts: Sequence[str],
                           max_workers: int = 4,
                           progress_callback: Optional[Callable[[int, int], None]] = None) -> List[ProcessingResult]:
    """
    Parse record texts in parallel.

    Args:
        texts: Raw record texts
        max_workers: Maximum number of workers
        progress_callback: Progress callback function

    Returns:
        One ProcessingResult per text, in input order; ``result`` holds the
        GenbankRecord and ``error`` the parse error of a failed record
    """
    processor = ParallelProcessor(max_workers=max_workers, progress_callback=progress_callback)
    results, stats = processor.process_batch(texts, parse)

    logger.info(f"Parsed {stats.successful}/{stats.total_items} records, "
                f"avg duration: {stats.average_duration:.4f}s")

    return results
