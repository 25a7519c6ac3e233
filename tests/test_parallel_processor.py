"""Tests for parallel processor."""

import time

import pytest

from genbank_parser.errors import UnrecognizedSectionError
from genbank_parser.parallel_processor import (
    BatchProcessingStats,
    ParallelProcessor,
    ProcessingResult,
    parse_records_parallel,
)


class TestParallelProcessor:
    """Test cases for parallel processor."""

    def test_basic_processing(self):
        """Test basic parallel processing."""
        items = list(range(10))

        processor = ParallelProcessor(max_workers=3)
        results, stats = processor.process_batch(items, lambda x: x * 2)

        assert len(results) == 10
        assert all(r.success for r in results)
        assert [r.result for r in results] == [x * 2 for x in range(10)]

        assert stats.total_items == 10
        assert stats.successful == 10
        assert stats.failed == 0
        assert stats.success_rate == 1.0

    def test_results_keep_input_order(self):
        """Test that slow early items don't reorder results."""
        def process_func(x):
            time.sleep(0.05 if x == 0 else 0)
            return x

        processor = ParallelProcessor(max_workers=4)
        results, _ = processor.process_batch([0, 1, 2, 3], process_func)

        assert [r.index for r in results] == [0, 1, 2, 3]
        assert [r.item for r in results] == [0, 1, 2, 3]

    def test_error_handling(self):
        """Test error handling in parallel processing."""
        def process_func(x):
            if x == 2:
                raise ValueError(f"Error processing {x}")
            return x * 2

        errors_caught = []

        def error_handler(index, item, error):
            errors_caught.append((index, item, str(error)))

        processor = ParallelProcessor(max_workers=2)
        results, stats = processor.process_batch(list(range(5)), process_func, error_handler)

        assert stats.successful == 4
        assert stats.failed == 1
        assert not results[2].success
        assert isinstance(results[2].error, ValueError)
        assert errors_caught == [(2, 2, "Error processing 2")]

    def test_progress_callback(self):
        """Test progress callback functionality."""
        progress_updates = []

        processor = ParallelProcessor(
            max_workers=2,
            progress_callback=lambda done, total: progress_updates.append((done, total))
        )
        processor.process_batch(list(range(5)), lambda x: x)

        assert len(progress_updates) == 5
        assert progress_updates[-1] == (5, 5)

    def test_empty_batch(self):
        processor = ParallelProcessor(max_workers=2)
        results, stats = processor.process_batch([], lambda x: x)

        assert results == []
        assert stats.total_items == 0
        assert stats.success_rate == 0.0

    def test_invalid_worker_count(self):
        with pytest.raises(ValueError):
            ParallelProcessor(max_workers=0)


class TestDataClasses:
    """Test cases for result and statistics data classes."""

    def test_processing_result(self):
        assert ProcessingResult(item="a", index=0, result=1).success
        assert not ProcessingResult(item="a", index=0, error=ValueError("x")).success

    def test_stats(self):
        stats = BatchProcessingStats(total_items=4, processed=4, successful=3, failed=1, total_duration=2.0)

        assert stats.success_rate == 0.75
        assert stats.average_duration == 0.5


class TestParseRecordsParallel:
    """Test cases for parallel record parsing."""

    def test_parse_records(self, full_record_text, minimal_record_text, second_record_text):
        texts = [full_record_text, "not a record\n", minimal_record_text, second_record_text]

        results = parse_records_parallel(texts, max_workers=3)

        assert len(results) == 4
        assert results[0].result.accession == "AB123456"
        assert results[0].result.locus.sequence_length == 120
        assert isinstance(results[1].error, UnrecognizedSectionError)
        assert results[2].result.sequence == "actgactg"
        assert results[3].result.accession == "X56734"
