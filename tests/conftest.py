"""
Shared fixtures: an in-memory IAM gateway with scripted responses and failures
"""

from datetime import datetime, timedelta, timezone

import pytest
from botocore.exceptions import ClientError

# The CLI path classifies against the real clock, so fixture dates follow it
NOW = datetime.now(timezone.utc).replace(microsecond=0)
ACCOUNT = '123456789012'


def client_error(operation, code='AccessDenied', message='denied'):
    return ClientError({'Error': {'Code': code, 'Message': message}}, operation)


def make_role(name, path='/', last_used=None, role_last_used=True, description=None):
    """Build a get-role response body; last_used is a datetime or None"""
    role = {
        'RoleName': name,
        'Arn': f'arn:aws:iam::{ACCOUNT}:role{path}{name}',
        'Path': path,
        'CreateDate': NOW - timedelta(days=400),
    }
    if role_last_used:
        role['RoleLastUsed'] = {'LastUsedDate': last_used, 'Region': 'us-east-1'} if last_used else {}
    if description:
        role['Description'] = description
    return role


def make_policy(name, attachment_count=None, path='/'):
    policy = {
        'PolicyName': name,
        'Arn': f'arn:aws:iam::{ACCOUNT}:policy{path}{name}',
        'Path': path,
        'CreateDate': NOW - timedelta(days=30),
    }
    if attachment_count is not None:
        policy['AttachmentCount'] = attachment_count
    return policy


class FakeGateway:
    """Scripted stand-in for AccessGateway"""

    def __init__(self, roles=None, policies=None, attached=None):
        self.roles = {r['RoleName']: r for r in (roles or [])}
        self.policies = {p['Arn']: p for p in (policies or [])}
        self.attached = attached or {}
        self.failures = {}
        self.calls = []

    def fail(self, operation, key=None, error=None):
        self.failures[(operation, key)] = error or client_error(operation)

    def _check(self, operation, key=None):
        self.calls.append((operation, key))
        for scripted in ((operation, key), (operation, None)):
            if scripted in self.failures:
                raise self.failures[scripted]

    def list_roles(self, path_prefix=None):
        self._check('ListRoles')
        return [
            {'RoleName': r['RoleName'], 'Path': r['Path']}
            for r in self.roles.values()
            if not path_prefix or r['Path'].startswith(path_prefix)
        ]

    def get_role(self, role_name):
        self._check('GetRole', role_name)
        return self.roles[role_name]

    def list_attached_role_policies(self, role_name):
        self._check('ListAttachedRolePolicies', role_name)
        return [{'PolicyName': arn.rsplit('/', 1)[-1], 'PolicyArn': arn} for arn in self.attached.get(role_name, [])]

    def list_policies(self, path_prefix=None, scope='Local'):
        self._check('ListPolicies', scope)
        return [
            {'PolicyName': p['PolicyName'], 'Arn': p['Arn'], 'Path': p['Path']}
            for p in self.policies.values()
            if not path_prefix or p['Path'].startswith(path_prefix)
        ]

    def get_policy(self, policy_arn):
        self._check('GetPolicy', policy_arn)
        return self.policies[policy_arn]


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def gateway():
    return FakeGateway(
        roles=[
            make_role('never-used', last_used=None),
            make_role('recent', last_used=NOW - timedelta(days=10)),
            make_role('stale', path='/app/', last_used=NOW - timedelta(days=200), description='old worker'),
            make_role('AWSServiceRoleForSupport', path='/aws-service-role/support.amazonaws.com/', last_used=None),
        ],
        policies=[
            make_policy('no-count'),
            make_policy('zero', attachment_count=0),
            make_policy('attached', attachment_count=3),
        ],
        attached={
            'never-used': [f'arn:aws:iam::{ACCOUNT}:policy/p1', f'arn:aws:iam::{ACCOUNT}:policy/p2'],
            'stale': [],
        },
    )
