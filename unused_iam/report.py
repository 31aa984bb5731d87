"""
Tabular output for unused role and policy reports
"""

import csv
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, TextIO

from tabulate import tabulate

from .errors import OutputFailure
from .models import UnusedPolicy, UnusedRole

ROLE_FIELDS = ['role_name', 'arn', 'path', 'created_date', 'role_last_used', 'description']
POLICY_FIELDS = ['policy_name', 'arn', 'path', 'create_date', 'description']


def format_timestamp(value: Optional[datetime]) -> str:
    """RFC 3339 UTC timestamp, empty string when missing"""
    if value is None:
        return ''
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime('%Y-%m-%dT%H:%M:%SZ')


def role_row(role: UnusedRole) -> Dict[str, Any]:
    last_used_at = role.role_last_used.last_used_at if role.role_last_used else None
    return {
        'role_name': role.role_name or '',
        'arn': role.arn or '',
        'path': role.path or '',
        'created_date': format_timestamp(role.created_date),
        'role_last_used': format_timestamp(last_used_at),
        'description': role.description or '',
    }


def policy_row(policy: UnusedPolicy) -> Dict[str, Any]:
    return {
        'policy_name': policy.policy_name or '',
        'arn': policy.arn or '',
        'path': policy.path or '',
        'create_date': format_timestamp(policy.create_date),
        'description': policy.description or '',
    }


def write_rows(out: TextIO, rows: List[Dict[str, Any]], fieldnames: List[str], output_format: str = 'csv'):
    """Write report rows as CSV (header + rows) or as a grid table"""
    try:
        if output_format == 'table':
            table = [[row[f] for f in fieldnames] for row in rows]
            out.write(tabulate(table, headers=fieldnames, tablefmt='grid') + "\n")
        elif output_format == 'csv':
            writer = csv.DictWriter(out, fieldnames=fieldnames, lineterminator='\n')
            writer.writeheader()
            writer.writerows(rows)
        else:
            raise ValueError(f"Unsupported output format: {output_format}")
        out.flush()
    except (OSError, csv.Error) as e:
        raise OutputFailure(f"Failed to write report: {e}") from e


def write_unused_roles(out: TextIO, unused_roles: List[UnusedRole], output_format: str = 'csv'):
    write_rows(out, [role_row(r) for r in unused_roles], ROLE_FIELDS, output_format)


def write_unused_policies(out: TextIO, unused_policies: List[UnusedPolicy], output_format: str = 'csv'):
    write_rows(out, [policy_row(p) for p in unused_policies], POLICY_FIELDS, output_format)
