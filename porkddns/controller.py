import time
import logging
from enum import Enum
from typing import Mapping
from porkddns.config import Config, DesiredRecord, DomainConfig, read_dns_config
from porkddns.dns import RecordContent, IPAddress
from porkddns.domain import DomainName
from porkddns.errors import AmbiguousStateError, ConfigError, IpSourceError, PorkddnsError
from porkddns.ping import AddressFamily, Scope, current_address
from porkddns.providers import DNSProvider

LOG = logging.getLogger('porkddns')

Addresses = Mapping[tuple[AddressFamily, Scope], IPAddress]


class ReconcileOutcome(Enum):
    CREATED = 'created'
    EDITED = 'edited'
    UNCHANGED = 'unchanged'


def _same_name(name: str, domain: DomainName) -> bool:
    return name.lower().rstrip('.') == domain.name


def reconcile_record(provider: DNSProvider, domain: DomainName, desired: RecordContent) -> ReconcileOutcome:
    '''
    Make the provider hold exactly one record of `desired`'s type at `domain`, with `desired` as
    its content.

    Creates the record if there is none and edits it if its content differs. If the provider
    holds several records of that type at `domain`, none of them are touched and
    `AmbiguousStateError` is raised. Provider errors propagate as `GatewayError`.
    '''
    record_type = desired.type
    existing_records = provider.retrieve_by_name_type(domain.root, record_type, domain.prefix)

    # The provider is asked for an exact name and type, but only trust records that really match
    matches = [
        record for record in existing_records
        if record.content.type == record_type and _same_name(record.name, domain)
    ]

    if len(matches) > 1:
        raise AmbiguousStateError(domain.name, record_type, len(matches))

    if not matches:
        LOG.info(f'Creating DNS record: {record_type.value} {domain} -> {desired.render()}')
        record_id = provider.create(domain.root, domain.prefix, desired)
        LOG.debug(f'Created {record_type.value} {domain} with ID {record_id}')
        return ReconcileOutcome.CREATED

    record = matches[0]
    if record.content == desired:
        LOG.debug(f'{record_type.value} {domain} is up to date')
        return ReconcileOutcome.UNCHANGED

    LOG.info(f'Mismatch detected: updating record {record.id} - '
             f'{record_type.value} {domain}: {record.content.render()} -> {desired.render()}')
    provider.edit(domain.root, record.id, domain.prefix, desired)
    return ReconcileOutcome.EDITED


def resolve_addresses(config: Config) -> dict[tuple[AddressFamily, Scope], IPAddress]:
    '''Look up the machine addresses needed by the dynamic records in `config`'''
    addresses = {}
    for family, scope in sorted(config.address_sources, key=lambda source: (source[0].value, source[1].value)):
        try:
            addresses[(family, scope)] = current_address(family, scope)
            LOG.info(f'Current {scope.value} IP{family.value} is: {addresses[(family, scope)]}')
        except IpSourceError as E:
            LOG.warning(f'Failed to get {scope.value} IP{family.value}, '
                        f'dynamic records using it will not be reconciled\n{E}')
    return addresses


def desired_content(record: DesiredRecord, addresses: Addresses) -> RecordContent:
    if not record.dynamic:
        return record.content
    address = addresses.get((record.family, record.scope))
    if address is None:
        raise IpSourceError(f'No {record.scope.value} IP{record.family.value} address is available')
    return RecordContent.from_address(address)


def reconcile_domain_records(domain: DomainConfig, addresses: Addresses) -> int:
    '''
    Reconcile each desired record of a domain, one at a time.
    A failure is logged and does not stop the remaining records. Returns the number of failures.
    '''
    LOG.info(f'Reconciling DNS records for domain: {domain.name}')
    failures = 0
    for record in domain.records:
        try:
            content = desired_content(record, addresses)
            reconcile_record(domain.account.provider, record.domain, content)
        except PorkddnsError as E:
            failures += 1
            LOG.warning(f'An error occured while reconciling {record}\n{E}')
    return failures


def reconcile_domains(config: Config, addresses: Addresses) -> int:
    '''Reconcile every configured domain. Returns the total number of failed records.'''
    return sum(reconcile_domain_records(domain, addresses) for domain in config.domains)


def run_once(config_path: str) -> int:
    config = read_dns_config(config_path)
    if not config.domains:
        LOG.warning('No domain configuration detected!')
        return 0
    return reconcile_domains(config, resolve_addresses(config))


def controller_loop(args):
    LOG.info('Entering porkddns controller loop')
    while True:
        try:
            run_once(args.config)
        except ConfigError as E:
            LOG.warning('An error occured while reading the DNS configuration. '
                        f'Reconciliation will resume when the configuration file is valid.\n{E}')
        except Exception:
            LOG.exception('An unexpected error occured while reconciling. Retrying next period.')

        time.sleep(args.loop_period)
