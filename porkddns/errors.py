'''
Exception hierarchy for porkddns.

    PorkddnsError
    ├─ ContentError            record content could not be built
    │  ├─ UnknownTypeError
    │  └─ MalformedAddressError
    ├─ DomainError             domain name has the wrong shape
    │  ├─ InvalidNameError
    │  ├─ MissingRootError
    │  └─ HasPrefixError
    ├─ GatewayError            provider call failed
    ├─ ReconcileError
    │  └─ AmbiguousStateError
    ├─ ConfigError
    └─ IpSourceError
'''
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from porkddns.dns import RecordType


class PorkddnsError(Exception):
    '''Base class for every error raised by porkddns'''


class ContentError(PorkddnsError):
    pass


class UnknownTypeError(ContentError):
    def __init__(self, tag: str) -> None:
        super().__init__(f'Unknown record type "{tag}"')
        self.tag = tag


class MalformedAddressError(ContentError):
    def __init__(self, tag: str, content: str) -> None:
        super().__init__(f'"{content}" is not a valid address for a {tag} record')
        self.tag = tag
        self.content = content


class DomainError(PorkddnsError):
    pass


class InvalidNameError(DomainError):
    pass


class MissingRootError(DomainError):
    def __init__(self, name: str) -> None:
        super().__init__(f'Could not determine the registrable root of "{name}"')
        self.name = name


class HasPrefixError(DomainError):
    def __init__(self, name: str) -> None:
        super().__init__(f'"{name}" is a subdomain, but this operation requires a bare root domain')
        self.name = name


class GatewayError(PorkddnsError):
    '''A call to the DNS provider failed (network, authentication or provider-side error)'''


class ReconcileError(PorkddnsError):
    pass


class AmbiguousStateError(ReconcileError):
    '''
    The provider holds more than one record for a (name, type) pair.
    It is never resolved automatically; someone has to clean up the zone by hand.
    '''

    def __init__(self, domain: str, record_type: 'RecordType', count: int) -> None:
        super().__init__(f'Found {count} {record_type.value} records for {domain}, '
                         'refusing to guess which one to update')
        self.domain = domain
        self.record_type = record_type
        self.count = count


class ConfigError(PorkddnsError):
    pass


class IpSourceError(PorkddnsError):
    pass
