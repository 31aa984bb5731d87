#!/usr/bin/env python3
"""
Identify Unused IAM
List unused IAM roles and managed policies, or print AWS CLI scripts that delete them
"""

import argparse
import logging
import sys
from typing import List, Optional

from botocore.exceptions import NoCredentialsError, ProfileNotFound

from . import __version__
from .config import build_config, setup_logging
from .errors import AuditError
from .gateway import AccessGateway, create_session
from .policies import PolicyAuditPipeline
from .report import write_unused_policies, write_unused_roles
from .roles import RoleAuditPipeline
from .scripts import print_delete_policies_scripts, print_delete_roles_scripts

logger = logging.getLogger(__name__)

ROLE_COMMANDS = ('list-unused-roles', 'print-delete-unused-roles-scripts')
POLICY_COMMANDS = ('list-unused-policies', 'print-delete-unused-policies-scripts')


def non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be zero or greater, got {value}")
    return number


def positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return number


def _add_role_arguments(parser):
    parser.add_argument('--path-prefix', help='Only audit roles whose path starts with this prefix')
    parser.add_argument('--last-accessed', type=non_negative_int, metavar='DAYS',
                        help='Days without use after which a role is unused (default: 90)')
    parser.add_argument('--include-service-roles', action='store_true',
                        help='Also report service roles and service-linked roles')
    parser.add_argument('--exclude-last-accessed-none', action='store_true',
                        help='Do not report roles that have never been used')


def _add_policy_arguments(parser):
    parser.add_argument('--path-prefix', help='Only audit policies whose path starts with this prefix')
    parser.add_argument('--scope', choices=['All', 'AWS', 'Local'],
                        help='Which managed policies to list (default: Local)')


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('--profile', help='AWS profile name to use')
    common.add_argument('--region', help='AWS region for the IAM client')
    common.add_argument('--max-workers', type=positive_int,
                        help='Cap on concurrent requests per stage (default: one per request)')
    common.add_argument('--log-file', help='Also write logs to this file')
    verbosity = common.add_mutually_exclusive_group()
    verbosity.add_argument('-v', '--verbose', action='store_true', help='Log progress to stderr')
    verbosity.add_argument('--debug', action='store_true', help='Log every classification decision')

    parser = argparse.ArgumentParser(
        prog='identify-unused-iam',
        description='Identify unused IAM roles and managed policies'
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    sub = parser.add_subparsers(dest='command', metavar='COMMAND')
    sub.required = True

    p = sub.add_parser('list-unused-roles', parents=[common], help='Lists the unused IAM roles')
    _add_role_arguments(p)
    p.add_argument('--output-format', choices=['csv', 'table'], help='Output format (default: csv)')

    p = sub.add_parser('print-delete-unused-roles-scripts', parents=[common],
                       help='Prints scripts that delete the unused IAM roles')
    _add_role_arguments(p)

    p = sub.add_parser('list-unused-policies', parents=[common], help='Lists the unused policies')
    _add_policy_arguments(p)
    p.add_argument('--output-format', choices=['csv', 'table'], help='Output format (default: csv)')

    p = sub.add_parser('print-delete-unused-policies-scripts', parents=[common],
                       help='Prints scripts that delete the unused policies')
    _add_policy_arguments(p)

    return parser


def config_from_args(args: argparse.Namespace) -> dict:
    log_level = None
    if args.debug:
        log_level = 'DEBUG'
    elif args.verbose:
        log_level = 'INFO'

    return build_config({
        'last_accessed_days': getattr(args, 'last_accessed', None),
        'include_service_roles': getattr(args, 'include_service_roles', None),
        'exclude_last_accessed_none': getattr(args, 'exclude_last_accessed_none', None),
        'policy_scope': getattr(args, 'scope', None),
        'max_workers': args.max_workers,
        'output_format': getattr(args, 'output_format', None),
        'log_level': log_level,
        'log_file': args.log_file,
        'profile': args.profile,
        'region': args.region,
    })


def run_command(command: str, config: dict, path_prefix: Optional[str], gateway, out):
    """Run one subcommand against gateway and write its output to out"""
    if command in ROLE_COMMANDS:
        pipeline = RoleAuditPipeline(gateway, config['max_workers'])
        unused_roles = pipeline.fetch_unused_roles(
            path_prefix=path_prefix,
            last_accessed_days=config['last_accessed_days'],
            include_service_roles=config['include_service_roles'],
            exclude_last_accessed_none=config['exclude_last_accessed_none'],
        )
        if command == 'list-unused-roles':
            write_unused_roles(out, unused_roles, config['output_format'])
        else:
            role_policies = pipeline.fetch_role_policies(unused_roles)
            print_delete_roles_scripts(out, role_policies)

    elif command in POLICY_COMMANDS:
        pipeline = PolicyAuditPipeline(gateway, config['max_workers'])
        unused_policies = pipeline.fetch_unused_policies(path_prefix, config['policy_scope'])
        if command == 'list-unused-policies':
            write_unused_policies(out, unused_policies, config['output_format'])
        else:
            print_delete_policies_scripts(out, unused_policies)

    else:
        raise ValueError(f"Unknown command: {command}")


def describe_error(error: BaseException) -> str:
    """Render an exception together with its chain of causes"""
    lines = [str(error)]
    cause = error.__cause__
    while cause is not None:
        lines.append(f"Caused by: {cause}")
        cause = cause.__cause__
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = config_from_args(args)
    setup_logging(config['log_level'], config['log_file'])

    try:
        session = create_session(config['profile'], config['region'])
        gateway = AccessGateway.from_session(session)
        run_command(args.command, config, args.path_prefix, gateway, sys.stdout)
    except (AuditError, NoCredentialsError, ProfileNotFound) as e:
        logger.error(f"{args.command} failed:\n{describe_error(e)}")
        return 1
    except KeyboardInterrupt:
        logger.error("Operation cancelled by user.")
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
