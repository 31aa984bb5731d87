"""
Error kinds raised while auditing IAM entities
"""

from typing import List, Optional


class AuditError(Exception):
    """Base class for every failure that aborts an audit run"""


class ListFailure(AuditError):
    """The primary listing call of a pipeline failed"""

    def __init__(self, operation: str, key: Optional[str] = None):
        self.operation = operation
        self.key = key
        super().__init__(f"Failed to call the {operation} API (path_prefix={key!r})")


class DetailFetchFailure(AuditError):
    """A single per-entity request inside a fan-out stage failed"""

    def __init__(self, operation: str, key: Optional[str], cause: BaseException):
        self.operation = operation
        self.key = key
        self.cause = cause
        super().__init__(f"Failed to call the {operation} API for {key!r}: {cause}")


class AggregatedFailure(AuditError):
    """One or more requests of a fan-out stage failed; no partial report is produced"""

    def __init__(self, stage: str, failures: List[DetailFetchFailure]):
        self.stage = stage
        self.failures = list(failures)
        lines = [f"{stage}: {len(self.failures)} request(s) failed"]
        lines.extend(f"  - {failure}" for failure in self.failures)
        super().__init__("\n".join(lines))


class OutputFailure(AuditError):
    """Writing the report or scripts to the output stream failed"""
