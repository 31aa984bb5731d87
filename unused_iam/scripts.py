"""
AWS CLI commands that remove unused roles and policies
"""

from typing import List, TextIO

from .errors import OutputFailure
from .models import RolePolicies, UnusedPolicy


def role_delete_commands(role_policies: RolePolicies) -> List[str]:
    """Detach every managed policy, delete the role, then a blank separator"""
    role_name = role_policies.role_name
    if not role_name:
        return []

    lines = [
        f"aws iam detach-role-policy --role-name '{role_name}' --policy-arn '{policy_arn}'"
        for policy_arn in role_policies.policy_arns
    ]
    lines.append(f"aws iam delete-role --role-name '{role_name}'")
    lines.append("")
    return lines


def policy_delete_command(policy: UnusedPolicy) -> List[str]:
    if not policy.arn:
        return []
    return [f"aws iam delete-policy --policy-arn '{policy.arn}'"]


def _write_lines(out: TextIO, lines: List[str]):
    try:
        for line in lines:
            out.write(line + "\n")
        out.flush()
    except OSError as e:
        raise OutputFailure(f"Failed to write delete scripts: {e}") from e


def print_delete_roles_scripts(out: TextIO, role_policies: List[RolePolicies]):
    lines = []
    for rp in role_policies:
        lines.extend(role_delete_commands(rp))
    _write_lines(out, lines)


def print_delete_policies_scripts(out: TextIO, unused_policies: List[UnusedPolicy]):
    lines = []
    for policy in unused_policies:
        lines.extend(policy_delete_command(policy))
    _write_lines(out, lines)
