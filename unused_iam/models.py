"""
Data models for audited IAM roles and policies
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class LastUsedInfo:
    """RoleLastUsed block of a role; every field may be missing"""
    last_used_at: Optional[datetime] = None
    region: Optional[str] = None
    service_name: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'LastUsedInfo':
        return cls(
            last_used_at=data.get('LastUsedDate'),
            region=data.get('Region'),
            service_name=data.get('ServiceName'),
        )


@dataclass(frozen=True)
class RoleSummary:
    """Role detail merged from list-roles and get-role"""
    name: Optional[str]
    arn: Optional[str] = None
    path: Optional[str] = None
    created_at: Optional[datetime] = None
    last_used: Optional[LastUsedInfo] = None
    description: Optional[str] = None

    @classmethod
    def from_api(cls, role: Dict[str, Any]) -> 'RoleSummary':
        # get-role returns an empty RoleLastUsed for roles that were never used,
        # a missing key means the record itself is absent
        last_used = role.get('RoleLastUsed')
        return cls(
            name=role.get('RoleName'),
            arn=role.get('Arn'),
            path=role.get('Path'),
            created_at=role.get('CreateDate'),
            last_used=LastUsedInfo.from_api(last_used) if last_used is not None else None,
            description=role.get('Description'),
        )


@dataclass(frozen=True)
class PolicySummary:
    """Managed policy detail merged from list-policies and get-policy"""
    name: Optional[str]
    arn: Optional[str] = None
    path: Optional[str] = None
    created_at: Optional[datetime] = None
    description: Optional[str] = None
    attachment_count: Optional[int] = None

    @classmethod
    def from_api(cls, policy: Dict[str, Any]) -> 'PolicySummary':
        return cls(
            name=policy.get('PolicyName'),
            arn=policy.get('Arn'),
            path=policy.get('Path'),
            created_at=policy.get('CreateDate'),
            description=policy.get('Description'),
            attachment_count=policy.get('AttachmentCount'),
        )


@dataclass(frozen=True)
class UnusedRole:
    """Report row for an unused role"""
    role_name: Optional[str]
    arn: Optional[str]
    path: Optional[str]
    created_date: Optional[datetime]
    role_last_used: Optional[LastUsedInfo]
    description: Optional[str]

    @classmethod
    def from_summary(cls, role: RoleSummary) -> 'UnusedRole':
        return cls(
            role_name=role.name,
            arn=role.arn,
            path=role.path,
            created_date=role.created_at,
            role_last_used=role.last_used,
            description=role.description,
        )


@dataclass(frozen=True)
class UnusedPolicy:
    """Report row for an unused policy"""
    policy_name: Optional[str]
    arn: Optional[str]
    path: Optional[str]
    create_date: Optional[datetime]
    description: Optional[str]

    @classmethod
    def from_summary(cls, policy: PolicySummary) -> 'UnusedPolicy':
        return cls(
            policy_name=policy.name,
            arn=policy.arn,
            path=policy.path,
            create_date=policy.created_at,
            description=policy.description,
        )


@dataclass(frozen=True)
class RolePolicies:
    """Managed policy ARNs currently attached to an unused role"""
    role_name: Optional[str]
    policy_arns: List[str] = field(default_factory=list)
