"""
Unused IAM role audit

list-roles -> get-role per role (concurrent) -> classify -> error gate,
plus an optional list-attached-role-policies pass over the unused roles.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from .classifiers import is_service_role, is_unused_role
from .errors import ListFailure
from .fanout import fan_out, raise_for_failures
from .models import RolePolicies, RoleSummary, UnusedRole


class RoleAuditPipeline:
    def __init__(self, gateway, max_workers: Optional[int] = None):
        self.gateway = gateway
        self.max_workers = max_workers
        self.logger = logging.getLogger(__name__)

    def list_role_names(self, path_prefix: Optional[str] = None) -> List[str]:
        """Fetch the names of every role under path_prefix"""
        try:
            roles = self.gateway.list_roles(path_prefix)
        except (ClientError, BotoCoreError) as e:
            raise ListFailure('list-roles', path_prefix) from e

        return [r['RoleName'] for r in roles if r.get('RoleName')]

    def fetch_role_details(self, role_names: List[str]) -> List[RoleSummary]:
        """Fetch get-role for every name, failing if any single request fails"""
        results, failures = fan_out(
            self.gateway.get_role, role_names, 'get-role', self.max_workers
        )
        raise_for_failures('fetch_role_details', failures)
        return [RoleSummary.from_api(role) for _, role in results]

    def fetch_unused_roles(self,
                           path_prefix: Optional[str] = None,
                           last_accessed_days: Optional[int] = None,
                           include_service_roles: bool = False,
                           exclude_last_accessed_none: bool = False,
                           now: Optional[datetime] = None) -> List[UnusedRole]:
        """Find roles not used within last_accessed_days (default 90).

        Row order follows request completion and is not stable.
        """
        now = now or datetime.now(timezone.utc)

        role_names = self.list_role_names(path_prefix)
        roles = self.fetch_role_details(role_names)

        unused_roles = []
        for role in roles:
            if not is_unused_role(role.last_used, last_accessed_days, exclude_last_accessed_none, now):
                self.logger.debug(f"Role {role.name} is in use")
                continue
            if not include_service_roles and is_service_role(role.arn):
                self.logger.debug(f"Skipping service role {role.name}")
                continue
            unused_roles.append(UnusedRole.from_summary(role))

        self.logger.info(f"{len(unused_roles)} of {len(roles)} roles are unused")
        return unused_roles

    def fetch_role_policies(self, unused_roles: List[UnusedRole]) -> List[RolePolicies]:
        """Fetch the managed policies attached to each unused role"""
        role_names = [r.role_name for r in unused_roles if r.role_name]

        results, failures = fan_out(
            self.gateway.list_attached_role_policies, role_names,
            'list-attached-role-policies', self.max_workers
        )
        raise_for_failures('fetch_role_policies', failures)

        return [
            RolePolicies(
                role_name=role_name,
                policy_arns=[p['PolicyArn'] for p in attached if p.get('PolicyArn')]
            )
            for role_name, attached in results
        ]
