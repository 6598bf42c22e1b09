import os
import logging
from typing import Optional
import requests
from porkddns.dns import Record, RecordContent, RecordType
from porkddns.errors import ConfigError, ContentError, GatewayError, UnknownTypeError
from porkddns.providers.dns_provider import DNSProvider

LOG = logging.getLogger('porkddns')

class PorkbunProvider(DNSProvider):
    '''
    DNS provider for Porkbun.

    Account options:
    ```yaml
    endpoint: https://api.porkbun.com/api/json/v3  # optional, this is the default
    timeout: 30                                    # optional, seconds per request
    ```

    Credentials format:
    ```yaml
    credentials:
      key:
        fromEnv: PORKBUN_APIKEY        # if set, read the API key from this environment variable
        value: "pk1_xxxxxxxxxxxxxxxxx" # fromEnv takes precedence over this
      secret:
        fromEnv: PORKBUN_SECRETAPIKEY  # if set, read the API secret from this environment variable
        value: "sk1_xxxxxxxxxxxxxxxxx" # fromEnv takes precedence over this
    ```
    '''
    name = 'porkbun'

    default_endpoint = 'https://api.porkbun.com/api/json/v3'

    default_timeout = 30

    def __init__(self, account_name: str, options: Optional[dict] = None) -> None:
        super().__init__(account_name, options)
        self.endpoint = str(self.options.get('endpoint', self.default_endpoint)).rstrip('/')
        self.timeout = self.options.get('timeout', self.default_timeout)
        self.key = ''
        self.secret = ''

    def authenticate(self, credentials: dict) -> None:
        if not isinstance(credentials, dict):
            raise ConfigError(f'The credentials of account {self.account_name} must be a mapping')
        self.key = self._read_credential(credentials, 'key', 'API key')
        self.secret = self._read_credential(credentials, 'secret', 'API secret')

    def _read_credential(self, credentials: dict, field: str, description: str) -> str:
        if field not in credentials:
            raise ConfigError(f'Account {self.account_name} has not set {field} in credential config')

        cfg = credentials[field]
        if not isinstance(cfg, dict) or (('fromEnv' not in cfg) and ('value' not in cfg)):
            raise ConfigError(f'Invalid {field} config for account {self.account_name}. '
                              f'You must specify the {description} through either fromEnv or value.')

        if 'fromEnv' in cfg:
            env_var = cfg['fromEnv']
            if not isinstance(env_var, str) or env_var not in os.environ:
                raise ConfigError(f'{field}.fromEnv = "{env_var}" for account {self.account_name} but '
                                  f'"{env_var}" is not set in the environment!')
            return os.environ[env_var]
        return str(cfg['value'])

    def _post(self, path: str, payload: Optional[dict] = None) -> dict:
        '''POST to the API, returning the response body if the call succeeded'''
        uri = f'{self.endpoint}/{path}'
        data = {
            'apikey': self.key,
            'secretapikey': self.secret,
        }
        if payload:
            data.update(payload)

        try:
            resp = requests.post(uri, json=data, timeout=self.timeout)
        except requests.RequestException as E:
            raise GatewayError(f'Request to {uri} failed: {E}') from E

        try:
            body = resp.json()
        except ValueError:
            body = None

        if not isinstance(body, dict):
            raise GatewayError(f'{uri} returned HTTP {resp.status_code} with an unexpected body')
        if not resp.ok or body.get('status') != 'SUCCESS':
            raise GatewayError(f'{uri} returned HTTP {resp.status_code}: '
                               f'{body.get("message", "no error message")}')
        return body

    def _parse_records(self, root: str, body: dict) -> list[Record]:
        if not isinstance(body.get('records'), list):
            raise GatewayError(f'Response for {root} is missing the record list')

        records = []
        for data in body['records']:
            try:
                records.append(Record.from_wire(data))
            except UnknownTypeError as E:
                LOG.debug(f'Skipping record {data.get("name")} on {root}: {E}')
            except (ContentError, KeyError, TypeError, ValueError) as E:
                raise GatewayError(f'Malformed record in response for {root}: {E}') from E
        return records

    def ping(self) -> str:
        return self._post('ping').get('yourIp', '')

    def retrieve(self, root: str, record_id: Optional[int] = None) -> list[Record]:
        path = f'dns/retrieve/{root}'
        if record_id is not None:
            path += f'/{record_id}'
        records = self._parse_records(root, self._post(path))

        if record_id is not None and len(records) != 1:
            raise GatewayError(f'Expected exactly one record with ID {record_id} on {root}, '
                               f'got {len(records)}')
        return records

    def retrieve_by_name_type(self, root: str, record_type: RecordType,
                              prefix: Optional[str]) -> list[Record]:
        path = f'dns/retrieveByNameType/{root}/{record_type.value}/{prefix or ""}'
        return self._parse_records(root, self._post(path))

    def create(self, root: str, prefix: Optional[str], content: RecordContent) -> int:
        '''Returns the ID of the created record'''
        record_type, answer = content.to_wire()
        resp = self._post(f'dns/create/{root}', {
            'name': prefix or '',
            'type': record_type,
            'content': answer,
        })
        try:
            return int(resp['id'])
        except (KeyError, TypeError, ValueError) as E:
            raise GatewayError(f'Response for created record on {root} has no valid ID') from E

    def edit(self, root: str, record_id: int, prefix: Optional[str], content: RecordContent) -> None:
        record_type, answer = content.to_wire()
        self._post(f'dns/edit/{root}/{record_id}', {
            'name': prefix or '',
            'type': record_type,
            'content': answer,
        })

    def edit_by_name_type(self, root: str, prefix: Optional[str], content: RecordContent) -> None:
        self._post(f'dns/editByNameType/{root}/{content.tag}/{prefix or ""}', {
            'content': content.render(),
        })

    def delete(self, root: str, record_id: int) -> None:
        self._post(f'dns/delete/{root}/{record_id}')

    def delete_by_name_type(self, root: str, prefix: Optional[str], record_type: RecordType) -> None:
        self._post(f'dns/deleteByNameType/{root}/{record_type.value}/{prefix or ""}')
