"""
Decision rules for unused roles and policies

Everything here works on already-fetched data and never calls AWS.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Optional

from .models import LastUsedInfo

DEFAULT_LAST_ACCESSED_DAYS = 90

SERVICE_ROLE_PATTERN = re.compile(r'^arn:aws:iam::\d{12}:role/(aws-service-role|service-role)/')


def days_since(timestamp: datetime, now: Optional[datetime] = None) -> int:
    """Whole days elapsed since timestamp, truncated toward zero"""
    now = now or datetime.now(timezone.utc)
    return int((now - timestamp) / timedelta(days=1))


def is_unused_role(last_used: Optional[LastUsedInfo],
                   last_accessed_days: Optional[int] = None,
                   exclude_last_accessed_none: bool = False,
                   now: Optional[datetime] = None) -> bool:
    """Check whether a role counts as unused given its RoleLastUsed block"""
    if last_accessed_days is None:
        last_accessed_days = DEFAULT_LAST_ACCESSED_DAYS

    # A missing record and a record without a date both mean "never used"
    if last_used is None or last_used.last_used_at is None:
        return not exclude_last_accessed_none

    return days_since(last_used.last_used_at, now) >= last_accessed_days


def is_service_role(arn: Optional[str]) -> bool:
    """Check if an ARN belongs to a service role or service-linked role"""
    if not arn:
        return False
    return SERVICE_ROLE_PATTERN.match(arn) is not None


def is_unused_policy(attachment_count: Optional[int]) -> bool:
    """Check whether a managed policy counts as unused

    Only a policy whose AttachmentCount is missing is reported. Any present
    count, zero included, is treated as attached.
    """
    # NOTE: zero attachments is not reported as unused; keep this polarity
    return attachment_count is None
