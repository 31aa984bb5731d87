"""
Thin wrapper over the boto3 IAM client

SDK errors (ClientError, BotoCoreError) are not caught here; the audit
pipelines translate them into audit errors with the failing key attached.
"""

import logging
from typing import Any, Dict, List, Optional

import boto3

logger = logging.getLogger(__name__)


def create_session(profile_name: Optional[str] = None, region_name: Optional[str] = None):
    """Create a boto3 session from the standard credential chain or a named profile"""
    return boto3.Session(profile_name=profile_name, region_name=region_name)


def _path_prefix_args(path_prefix: Optional[str]) -> Dict[str, str]:
    return {'PathPrefix': path_prefix} if path_prefix else {}


class AccessGateway:
    """IAM operations used by the audit pipelines"""

    def __init__(self, iam_client):
        # boto3 clients are thread-safe, so one client is shared by all workers
        self.iam = iam_client

    @classmethod
    def from_session(cls, session) -> 'AccessGateway':
        return cls(session.client('iam'))

    def list_roles(self, path_prefix: Optional[str] = None) -> List[Dict[str, Any]]:
        roles = []
        paginator = self.iam.get_paginator('list_roles')
        for page in paginator.paginate(**_path_prefix_args(path_prefix)):
            roles.extend(page.get('Roles', []))
        logger.info(f"Found {len(roles)} IAM roles")
        return roles

    def get_role(self, role_name: str) -> Dict[str, Any]:
        return self.iam.get_role(RoleName=role_name)['Role']

    def list_attached_role_policies(self, role_name: str) -> List[Dict[str, Any]]:
        attached = []
        paginator = self.iam.get_paginator('list_attached_role_policies')
        for page in paginator.paginate(RoleName=role_name):
            attached.extend(page.get('AttachedPolicies', []))
        return attached

    def list_policies(self, path_prefix: Optional[str] = None, scope: str = 'Local') -> List[Dict[str, Any]]:
        policies = []
        paginator = self.iam.get_paginator('list_policies')
        for page in paginator.paginate(Scope=scope, **_path_prefix_args(path_prefix)):
            policies.extend(page.get('Policies', []))
        logger.info(f"Found {len(policies)} IAM policies (scope={scope})")
        return policies

    def get_policy(self, policy_arn: str) -> Dict[str, Any]:
        return self.iam.get_policy(PolicyArn=policy_arn)['Policy']
