"""
Unused managed policy audit
"""

import logging
from typing import List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from .classifiers import is_unused_policy
from .errors import ListFailure
from .fanout import fan_out, raise_for_failures
from .models import PolicySummary, UnusedPolicy


class PolicyAuditPipeline:
    def __init__(self, gateway, max_workers: Optional[int] = None):
        self.gateway = gateway
        self.max_workers = max_workers
        self.logger = logging.getLogger(__name__)

    def list_policy_arns(self, path_prefix: Optional[str] = None, scope: str = 'Local') -> List[str]:
        try:
            policies = self.gateway.list_policies(path_prefix, scope)
        except (ClientError, BotoCoreError) as e:
            raise ListFailure('list-policies', path_prefix) from e

        return [p['Arn'] for p in policies if p.get('Arn')]

    def fetch_policy_details(self, policy_arns: List[str]) -> List[PolicySummary]:
        # list-policies does not always carry AttachmentCount, so get-policy is required
        results, failures = fan_out(
            self.gateway.get_policy, policy_arns, 'get-policy', self.max_workers
        )
        raise_for_failures('fetch_policy_details', failures)
        return [PolicySummary.from_api(policy) for _, policy in results]

    def fetch_unused_policies(self, path_prefix: Optional[str] = None, scope: str = 'Local') -> List[UnusedPolicy]:
        """Find managed policies that are not attached to anything"""
        policies = self.fetch_policy_details(self.list_policy_arns(path_prefix, scope))

        unused_policies = [
            UnusedPolicy.from_summary(p) for p in policies
            if is_unused_policy(p.attachment_count)
        ]

        self.logger.info(f"{len(unused_policies)} of {len(policies)} policies are unused")
        return unused_policies
