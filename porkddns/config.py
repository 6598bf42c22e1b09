import os
import logging
from typing import Optional
from dataclasses import dataclass, field
import yaml
from porkddns.dns import RecordContent, RecordType
from porkddns.domain import DomainName, parse_domain
from porkddns.errors import ConfigError, ContentError, DomainError
from porkddns.ping import AddressFamily, Scope
from porkddns.providers import ALL_PROVIDERS, DNSProvider

LOG = logging.getLogger('porkddns')

DYNAMIC_FAMILIES = {
    RecordType.A: AddressFamily.V4,
    RecordType.AAAA: AddressFamily.V6,
}


@dataclass
class Account:
    name: str
    '''Name of the account, as referenced by domains'''

    provider: DNSProvider
    '''Authenticated provider instance used for this account's domains'''


@dataclass(frozen=True)
class DesiredRecord:
    domain: DomainName
    '''Fully-qualified name the record should exist at'''

    type: RecordType
    '''The type of record'''

    content: Optional[RecordContent] = None
    '''
    The desired content of the record.
    `None` if this is a dynamic record, whose content is the machine's current address.
    '''

    scope: Scope = Scope.PUBLIC
    '''Only used for dynamic records. Which of the machine's addresses to publish.'''

    @property
    def dynamic(self) -> bool:
        return self.content is None

    @property
    def family(self) -> AddressFamily:
        return DYNAMIC_FAMILIES[self.type]

    def __str__(self) -> str:
        answer = f'<{self.scope.value} IP{self.family.value}>' if self.dynamic else self.content.render()
        return f'{self.type.value} {self.domain} -> {answer}'


@dataclass
class DomainConfig:
    name: str
    '''The name of the domain this config is for'''

    records: list[DesiredRecord]
    '''A list of desired records for this domain'''

    account: Account = None
    '''The account to use when reconciling records for this domain'''


@dataclass
class Config:
    domains: list[DomainConfig] = field(default_factory=list)

    @property
    def address_sources(self) -> set[tuple[AddressFamily, Scope]]:
        '''The (family, scope) pairs dynamic records need an address for'''
        return {
            (record.family, record.scope)
            for domain in self.domains
            for record in domain.records
            if record.dynamic
        }


def _load_yaml(config_path: str) -> dict:
    if not os.path.exists(config_path):
        raise ConfigError(f'The configuration file {config_path} does not exist!')

    LOG.info(f'Reading DNS configuration from {config_path}')
    try:
        with open(config_path, 'r') as cfg_file:
            config = yaml.safe_load(cfg_file)
    except (OSError, yaml.YAMLError) as E:
        raise ConfigError(f'Could not read {config_path}: {E}') from E

    if not isinstance(config, dict):
        raise ConfigError(f'The configuration file {config_path} must contain a mapping')
    return config


def read_accounts(config: dict) -> dict[str, Account]:
    if 'accounts' not in config:
        raise ConfigError('The DNS config file is missing account configuration!')

    all_accounts = {}
    accounts = config['accounts'] or []
    if not isinstance(accounts, list):
        raise ConfigError('The accounts in the DNS config file must be a list!')
    for account in accounts:
        # Check for account misconfiguration
        if not isinstance(account, dict):
            LOG.warning('Misconfigured account detected. '
                        f'An account entry is not a mapping ({account!r}) and will not be created!')
            continue
        if not isinstance(account.get('name'), str):
            LOG.warning('Misconfigured account detected. '
                        'An account is missing a name and will not be created!')
            continue
        name = account['name']

        provider_name = account.get('provider')
        if not isinstance(provider_name, str) or provider_name not in ALL_PROVIDERS:
            LOG.warning('Misconfigured account detected. '
                        f'The account {name} has an unknown provider "{provider_name}" and will not be created!')
            continue

        # Setup the account provider
        options = account.get('options') or {}
        if not isinstance(options, dict):
            LOG.warning('Misconfigured account detected. '
                        f'The account {name} has options that are not a mapping and will not be created!')
            continue
        account_provider = ALL_PROVIDERS[provider_name](name, options)
        try:
            account_provider.authenticate(account.get('credentials', {}))
        except ConfigError as E:
            LOG.warning(f'Failed to configure credentials for account {name}. '
                        f'This account will not be created!\n{E}')
            continue

        all_accounts[name] = Account(name=name, provider=account_provider)
        LOG.info(f'Registered account {name} with provider {provider_name}')

    return all_accounts


def read_record(domain_name: str, record: dict) -> DesiredRecord:
    '''
    Marshal a single record entry of a domain.
    Raises `ConfigError`, `DomainError` or `ContentError` if the entry is invalid.
    '''
    if not isinstance(record, dict):
        raise ConfigError(f'A record entry for {domain_name} is not a mapping: {record!r}')
    if 'type' not in record:
        raise ConfigError(f'A record for {domain_name} has not set type')
    record_type = RecordType.from_tag(str(record['type']).upper())

    hostname = record.get('hostname', '')
    domain = parse_domain(f'{hostname}.{domain_name}' if hostname else domain_name)

    if not record.get('dynamic', False):
        if 'answer' not in record:
            raise ConfigError(f'The {record_type.value} record for {domain} has not set answer')
        return DesiredRecord(
            domain=domain,
            type=record_type,
            content=RecordContent.parse(record_type.value, str(record['answer'])),
        )

    if record_type not in DYNAMIC_FAMILIES:
        raise ConfigError(f'The {record_type.value} record for {domain} is dynamic, '
                          'but only A and AAAA records can be')
    try:
        scope = Scope(record.get('scope', Scope.PUBLIC.value))
    except ValueError:
        raise ConfigError(f'The {record_type.value} record for {domain} has an invalid scope '
                          f'"{record.get("scope")}"') from None

    return DesiredRecord(domain=domain, type=record_type, scope=scope)


def read_dns_config(config_path: str) -> Config:
    '''
    Reads the DNS configuration file used for the desired state and marshals it into a list of
    DomainConfigs
    '''
    config = _load_yaml(config_path)
    all_accounts = read_accounts(config)

    if 'domains' not in config:
        raise ConfigError('The DNS config file is missing domain configuration!')

    domains = config['domains'] or []
    if not isinstance(domains, list):
        raise ConfigError('The domains in the DNS config file must be a list!')

    domain_configs = []
    seen = set()
    for domain in domains:
        # Check for misconfiguration of the domain
        if not isinstance(domain, dict):
            LOG.warning('Misconfigured domain detected. '
                        f'A domain entry is not a mapping ({domain!r}) and will not be reconciled!')
            continue
        if not isinstance(domain.get('name'), str):
            LOG.warning('Misconfigured domain detected. '
                        'A domain is missing a name and will not be reconciled!')
            continue
        name = domain['name']

        if 'account' not in domain:
            LOG.warning('Misconfigured domain detected. '
                        f'The domain {name} has not set the account and will not be reconciled!')
            continue
        if not isinstance(domain['account'], str) or domain['account'] not in all_accounts:
            LOG.warning('Misconfigured domain detected. '
                        f'The domain {name} is using the non-existent account {domain["account"]} '
                        'and will not be reconciled!')
            continue

        if not domain.get('records') or not isinstance(domain['records'], list):
            LOG.warning('Misconfigured domain detected. '
                        f'The domain {name} has no records and will not be reconciled!')
            continue

        # Now read the desired records for this domain
        records = []
        for record in domain['records']:
            try:
                desired = read_record(name, record)
            except (ConfigError, DomainError, ContentError) as E:
                LOG.warning(f'Misconfigured record detected for {name} and will not be reconciled!\n{E}')
                continue

            # Two desired values for the same name and type would overwrite each other every pass
            key = (desired.domain, desired.type)
            if key in seen:
                LOG.warning(f'Duplicate record detected. {desired.type.value} {desired.domain} is already '
                            'configured, this entry will not be reconciled!')
                continue
            seen.add(key)
            records.append(desired)

        domain_configs.append(DomainConfig(
            name=name,
            records=records,
            account=all_accounts[domain['account']],
        ))
        LOG.info(f'Registered domain {name} with {len(records)} record(s) using account {domain["account"]}')

    return Config(domains=domain_configs)


def read_account_config(config_path: str) -> dict[str, Account]:
    '''Reads only the accounts of the configuration file'''
    return read_accounts(_load_yaml(config_path))
