"""Error policy for batches of records."""

import json
import logging
import time
import traceback
from dataclasses import dataclass, asdict
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .errors import (
    GenbankParseError,
    IncompleteRecordError,
    StructuralError,
    UnrecognizedSectionError,
)


class ErrorPolicy(Enum):
    """What to do when a record fails to parse."""
    ABORT = "abort"  # re-raise, stopping the batch
    LOG = "log"      # log at error level and continue
    SKIP = "skip"    # drop the record quietly


class ErrorType(Enum):
    """Types of errors that can occur."""
    STRUCTURAL = "structural"
    INCOMPLETE = "incomplete"
    UNRECOGNIZED_SECTION = "unrecognized_section"
    FILE_IO = "file_io"
    UNKNOWN = "unknown"


@dataclass
class ErrorContext:
    """Context information for an error."""
    error_type: ErrorType
    message: str
    timestamp: float
    source: Optional[str] = None
    record_index: Optional[int] = None
    section: Optional[str] = None
    line: Optional[int] = None
    exception: Optional[Exception] = None
    traceback: Optional[str] = None
    suggestion: Optional[str] = None


SUGGESTIONS = {
    ErrorType.STRUCTURAL: "Check that the sections are complete and in the standard order.",
    ErrorType.INCOMPLETE: "The record appears truncated. Check that the file was fully written.",
    ErrorType.UNRECOGNIZED_SECTION: "The record contains a section keyword that is not supported.",
    ErrorType.FILE_IO: "Check that the file exists and is readable.",
}


class ErrorHandler:
    """Applies an error policy to failed records and keeps an error history."""

    def __init__(self, policy: Union[ErrorPolicy, str] = ErrorPolicy.ABORT):
        """
        Initialize error handler.

        Args:
            policy: Error policy, as an ErrorPolicy or its value
        """
        self.policy = ErrorPolicy(policy)
        self.logger = logging.getLogger(__name__)
        self.error_history: List[ErrorContext] = []

    def handle_error(self,
                     error: Exception,
                     source: Optional[str] = None,
                     record_index: Optional[int] = None) -> ErrorContext:
        """
        Handle a failed record according to the policy.

        Args:
            error: The exception that occurred
            source: Where the record came from (usually a file name)
            record_index: 1-based position of the record in its source

        Returns:
            ErrorContext with error details and suggestions

        Raises:
            The original error when the policy is ``abort``
        """
        error_type = self._classify_error(error)

        context = ErrorContext(
            error_type=error_type,
            message=str(error),
            timestamp=time.time(),
            source=source,
            record_index=record_index,
            section=getattr(error, 'section', None),
            line=getattr(error, 'line', None),
            exception=error,
            traceback=self._format_traceback(error) if error_type is ErrorType.UNKNOWN else None,
            suggestion=SUGGESTIONS.get(error_type)
        )

        self.error_history.append(context)
        self._log_error(context)

        if self.policy is ErrorPolicy.ABORT:
            raise error

        return context

    def _classify_error(self, error: Exception) -> ErrorType:
        """Classify the error type based on exception."""
        if isinstance(error, IncompleteRecordError):
            return ErrorType.INCOMPLETE
        if isinstance(error, UnrecognizedSectionError):
            return ErrorType.UNRECOGNIZED_SECTION
        if isinstance(error, (StructuralError, GenbankParseError)):
            return ErrorType.STRUCTURAL
        if isinstance(error, OSError):
            return ErrorType.FILE_IO
        return ErrorType.UNKNOWN

    @staticmethod
    def _format_traceback(error: Exception) -> Optional[str]:
        if error.__traceback__ is None:
            return None
        return ''.join(traceback.format_exception(type(error), error, error.__traceback__))

    def _log_error(self, context: ErrorContext):
        """Log error with the level the policy calls for."""
        log_message = f"{context.error_type.value}: {context.message}"

        if context.source:
            log_message += f" (source: {context.source}"
            if context.record_index is not None:
                log_message += f", record {context.record_index}"
            log_message += ")"
        elif context.record_index is not None:
            log_message += f" (record {context.record_index})"

        if self.policy is ErrorPolicy.SKIP:
            self.logger.debug(f"Skipped record - {log_message}")
            return
        if self.policy is ErrorPolicy.ABORT:
            # The caller reports the re-raised error
            self.logger.debug(f"Aborting - {log_message}")
            return

        self.logger.error(log_message)
        if context.traceback:
            self.logger.debug(f"Traceback:\n{context.traceback}")
        if context.suggestion:
            self.logger.info(f"Suggestion: {context.suggestion}")

    @property
    def error_count(self) -> int:
        return len(self.error_history)

    def get_error_summary(self) -> Dict[str, Any]:
        """Get summary of errors for reporting."""
        by_type: Dict[str, int] = {}
        for error in self.error_history:
            error_type = error.error_type.value
            by_type[error_type] = by_type.get(error_type, 0) + 1

        recent_errors = []
        for error in self.error_history[-5:]:
            recent_errors.append({
                'type': error.error_type.value,
                'message': error.message,
                'source': error.source,
                'record_index': error.record_index,
                'timestamp': datetime.fromtimestamp(error.timestamp).isoformat(),
                'suggestion': error.suggestion
            })

        return {
            'policy': self.policy.value,
            'total_errors': len(self.error_history),
            'by_type': by_type,
            'recent_errors': recent_errors
        }

    def export_error_report(self, output_file: Union[str, Path]):
        """Export detailed error report as JSON."""
        report = {
            'generated_at': datetime.now().isoformat(),
            'summary': self.get_error_summary(),
            'detailed_errors': []
        }

        for error in self.error_history:
            error_dict = asdict(error)
            # Exception objects are not serializable
            error_dict.pop('exception', None)
            error_dict['error_type'] = error.error_type.value
            error_dict['timestamp'] = datetime.fromtimestamp(error.timestamp).isoformat()

            report['detailed_errors'].append(error_dict)

        with open(output_file, 'w') as f:
            json.dump(report, f, indent=2)

        self.logger.info(f"Error report exported to {output_file}")
