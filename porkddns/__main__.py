import os
import sys
import logging
import argparse
from typing import Optional
from porkddns.config import Account, read_account_config
from porkddns.controller import controller_loop, run_once
from porkddns.domain import parse_domain, require_root
from porkddns.errors import ConfigError, PorkddnsError

LOG = logging.getLogger('porkddns')


def select_account(config_path: str, name: Optional[str] = None) -> Account:
    accounts = read_account_config(config_path)
    if name is not None:
        if name not in accounts:
            raise ConfigError(f'No usable account named {name} in {config_path}')
        return accounts[name]
    if len(accounts) != 1:
        raise ConfigError(f'{config_path} has {len(accounts)} usable accounts, select one with --account')
    return next(iter(accounts.values()))


def cmd_run(args) -> int:
    if args.once:
        return 1 if run_once(args.config) else 0
    controller_loop(args)
    return 0


def cmd_list(args) -> int:
    root = require_root(parse_domain(args.domain))
    account = select_account(args.config, args.account)
    for record in account.provider.retrieve(root):
        print(f'{record.id}\t{record.name}\t{record.content.tag}\t{record.content.render()}')
    return 0


def cmd_delete(args) -> int:
    root = require_root(parse_domain(args.domain))
    account = select_account(args.config, args.account)
    account.provider.delete(root, args.record_id)
    LOG.info(f'Deleted record {args.record_id} from {root}')
    return 0


def cmd_check_auth(args) -> int:
    account = select_account(args.config, args.account)
    ip = account.provider.ping()
    print(f'Authenticated as account {account.name}, provider sees IP {ip}')
    return 0


def build_parser() -> argparse.ArgumentParser:
    argparser = argparse.ArgumentParser('porkddns')
    argparser.add_argument('-c', '--config', type=str, help='Path to DNS config',
                           default=os.environ.get('PORKDDNS_CONFIG'), required='PORKDDNS_CONFIG' not in os.environ)
    argparser.add_argument('-l', '--log-level', type=str, help='Logging level', default='INFO',
                           choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    commands = argparser.add_subparsers(dest='command')

    run = commands.add_parser('run', help='Keep DNS records in sync with the machine addresses')
    run.add_argument('-p', '--loop-period', type=int, help='How often attempt record reconciliation', default=300)
    run.add_argument('--once', action='store_true', help='Reconcile once and exit')
    run.set_defaults(func=cmd_run)

    list_cmd = commands.add_parser('list', help='List all records of a root domain')
    list_cmd.add_argument('domain')
    list_cmd.add_argument('-a', '--account', type=str, help='Account to use')
    list_cmd.set_defaults(func=cmd_list)

    delete = commands.add_parser('delete', help='Delete a record of a root domain by ID')
    delete.add_argument('domain')
    delete.add_argument('record_id', type=int)
    delete.add_argument('-a', '--account', type=str, help='Account to use')
    delete.set_defaults(func=cmd_delete)

    check_auth = commands.add_parser('check-auth', help='Check that account credentials work')
    check_auth.add_argument('-a', '--account', type=str, help='Account to use')
    check_auth.set_defaults(func=cmd_check_auth)

    return argparser


def main(argv=None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    argparser = build_parser()
    args = argparser.parse_args(argv)
    if args.command is None:
        args = argparser.parse_args([*argv, 'run'])

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    try:
        return args.func(args)
    except PorkddnsError as E:
        LOG.error(str(E))
        return 1


if __name__ == '__main__':
    sys.exit(main())
