from abc import abstractmethod, ABC
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from porkddns.dns import Record, RecordContent, RecordType

class DNSProvider(ABC):
    '''
    Gateway to a DNS provider's record API.

    Records are addressed by the zone root (e.g. `example.com`) together with either the
    provider-assigned record ID or the subdomain prefix and record type. A prefix of `None`
    addresses the root itself.

    Every method raises `GatewayError` if the provider call fails.
    '''

    name: str = ''
    '''
    Name of this DNS provider.
    This is used by account config to select the correct provider class.
    '''

    account_name: str = ''
    '''
    Name of the account which this specific `DNSProvider` instance represents.
    This is used to select the account that should be used to reconcile a set of records.
    '''

    def __init__(self, account_name: str, options: Optional[dict] = None) -> None:
        self.account_name = account_name
        self.options = options or {}

    @abstractmethod
    def authenticate(self, credentials: dict) -> None:
        '''
        Load the credentials to use against the provider.
        The credentials are read from the `credentials` key of each account.
        '''
        raise NotImplementedError(f'DNS provider "{self.name}" must implement method authenticate')

    @abstractmethod
    def ping(self) -> str:
        '''Check that the credentials work. Returns the client IP the provider sees.'''
        raise NotImplementedError(f'DNS provider "{self.name}" must implement method ping')

    @abstractmethod
    def retrieve(self, root: str, record_id: Optional[int] = None) -> list['Record']:
        '''Retrieve all records of a zone, or a single record by ID'''
        raise NotImplementedError(f'DNS provider "{self.name}" must implement method retrieve')

    @abstractmethod
    def retrieve_by_name_type(self, root: str, record_type: 'RecordType',
                              prefix: Optional[str]) -> list['Record']:
        '''Retrieve the records with the given subdomain and type'''
        raise NotImplementedError(f'DNS provider "{self.name}" must implement method retrieve_by_name_type')

    @abstractmethod
    def create(self, root: str, prefix: Optional[str], content: 'RecordContent') -> int:
        '''Create a record and return its ID'''
        raise NotImplementedError(f'DNS provider "{self.name}" must implement method create')

    @abstractmethod
    def edit(self, root: str, record_id: int, prefix: Optional[str], content: 'RecordContent') -> None:
        '''Replace the name and content of the record with the given ID'''
        raise NotImplementedError(f'DNS provider "{self.name}" must implement method edit')

    @abstractmethod
    def edit_by_name_type(self, root: str, prefix: Optional[str], content: 'RecordContent') -> None:
        '''Set the content of every record with the given subdomain and the content's type'''
        raise NotImplementedError(f'DNS provider "{self.name}" must implement method edit_by_name_type')

    @abstractmethod
    def delete(self, root: str, record_id: int) -> None:
        '''Delete the record with the given ID'''
        raise NotImplementedError(f'DNS provider "{self.name}" must implement method delete')

    @abstractmethod
    def delete_by_name_type(self, root: str, prefix: Optional[str], record_type: 'RecordType') -> None:
        '''Delete every record with the given subdomain and type'''
        raise NotImplementedError(f'DNS provider "{self.name}" must implement method delete_by_name_type')
