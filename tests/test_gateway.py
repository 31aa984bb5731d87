"""
Tests for the boto3-backed IAM gateway.
"""

from unittest.mock import MagicMock, Mock, patch

from unused_iam.gateway import AccessGateway, create_session


def paginated(*pages):
    paginator = Mock()
    paginator.paginate.return_value = iter(pages)
    return paginator


class TestAccessGateway:

    def test_list_roles_reads_every_page(self):
        iam = Mock()
        paginator = paginated({'Roles': [{'RoleName': 'a'}]}, {'Roles': [{'RoleName': 'b'}]})
        iam.get_paginator.return_value = paginator

        roles = AccessGateway(iam).list_roles()

        assert [r['RoleName'] for r in roles] == ['a', 'b']
        iam.get_paginator.assert_called_once_with('list_roles')
        paginator.paginate.assert_called_once_with()

    def test_list_roles_path_prefix(self):
        iam = Mock()
        paginator = paginated({'Roles': []})
        iam.get_paginator.return_value = paginator

        AccessGateway(iam).list_roles('/app/')

        paginator.paginate.assert_called_once_with(PathPrefix='/app/')

    def test_get_role(self):
        iam = Mock()
        iam.get_role.return_value = {'Role': {'RoleName': 'a', 'RoleLastUsed': {}}}

        assert AccessGateway(iam).get_role('a') == {'RoleName': 'a', 'RoleLastUsed': {}}
        iam.get_role.assert_called_once_with(RoleName='a')

    def test_list_attached_role_policies(self):
        iam = Mock()
        paginator = paginated({'AttachedPolicies': [{'PolicyArn': 'arn:p1'}]}, {'AttachedPolicies': [{'PolicyArn': 'arn:p2'}]})
        iam.get_paginator.return_value = paginator

        attached = AccessGateway(iam).list_attached_role_policies('a')

        assert [p['PolicyArn'] for p in attached] == ['arn:p1', 'arn:p2']
        paginator.paginate.assert_called_once_with(RoleName='a')

    def test_list_policies_scope(self):
        iam = Mock()
        paginator = paginated({'Policies': [{'Arn': 'arn:p'}]})
        iam.get_paginator.return_value = paginator

        policies = AccessGateway(iam).list_policies('/team/', scope='All')

        assert policies == [{'Arn': 'arn:p'}]
        iam.get_paginator.assert_called_once_with('list_policies')
        paginator.paginate.assert_called_once_with(Scope='All', PathPrefix='/team/')

    def test_get_policy(self):
        iam = Mock()
        iam.get_policy.return_value = {'Policy': {'Arn': 'arn:p', 'AttachmentCount': 0}}

        assert AccessGateway(iam).get_policy('arn:p')['AttachmentCount'] == 0
        iam.get_policy.assert_called_once_with(PolicyArn='arn:p')

    def test_from_session(self):
        session = MagicMock()
        gateway = AccessGateway.from_session(session)
        session.client.assert_called_once_with('iam')
        assert gateway.iam is session.client.return_value


class TestCreateSession:

    @patch('unused_iam.gateway.boto3.Session')
    def test_profile_and_region(self, session_cls):
        create_session('prod', 'eu-west-1')
        session_cls.assert_called_once_with(profile_name='prod', region_name='eu-west-1')
