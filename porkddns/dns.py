import ipaddress
from enum import Enum
from typing import ClassVar, Union
from dataclasses import dataclass
from porkddns.errors import UnknownTypeError, MalformedAddressError

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


class RecordType(Enum):
    '''Record types supported by the provider. The value is the tag used on the wire.'''
    A = 'A'
    AAAA = 'AAAA'
    MX = 'MX'
    CNAME = 'CNAME'
    ALIAS = 'ALIAS'
    TXT = 'TXT'
    NS = 'NS'
    SRV = 'SRV'
    TLSA = 'TLSA'
    CAA = 'CAA'
    HTTPS = 'HTTPS'
    SVCB = 'SVCB'

    @classmethod
    def from_tag(cls, tag: str) -> 'RecordType':
        try:
            return cls(tag)
        except ValueError:
            raise UnknownTypeError(tag) from None


@dataclass(frozen=True)
class RecordContent:
    '''
    The typed value of a DNS record.
    Every subclass is one record type, so the type of a value is given by its class.
    Two contents are equal only if they are the same type and carry the same payload.
    '''
    type: ClassVar[RecordType]

    @property
    def tag(self) -> str:
        '''Type tag used on the wire'''
        return self.type.value

    def render(self) -> str:
        '''Content string used on the wire'''
        raise NotImplementedError

    def to_wire(self) -> tuple[str, str]:
        return self.tag, self.render()

    @staticmethod
    def parse(tag: str, content: str) -> 'RecordContent':
        '''
        Rebuild a record content from its wire form.
        Raises `UnknownTypeError` for unrecognized tags and `MalformedAddressError` if an
        A/AAAA record does not hold an address of the right family.
        '''
        record_type = RecordType.from_tag(tag)
        return CONTENT_TYPES[record_type](content)

    @staticmethod
    def from_address(address: IPAddress) -> 'RecordContent':
        if isinstance(address, ipaddress.IPv6Address):
            return AAAA(address)
        return A(address)

    def __str__(self) -> str:
        return f'{self.tag} {self.render()}'


def _to_address(address_type: type, record_type: RecordType, value) -> IPAddress:
    if isinstance(value, address_type):
        return value
    if not isinstance(value, str):
        raise MalformedAddressError(record_type.value, repr(value))
    try:
        return address_type(value)
    except ValueError:
        raise MalformedAddressError(record_type.value, value) from None


@dataclass(frozen=True)
class A(RecordContent):
    address: ipaddress.IPv4Address
    type: ClassVar[RecordType] = RecordType.A

    def __post_init__(self) -> None:
        object.__setattr__(self, 'address', _to_address(ipaddress.IPv4Address, self.type, self.address))

    def render(self) -> str:
        return str(self.address)


@dataclass(frozen=True)
class AAAA(RecordContent):
    address: ipaddress.IPv6Address
    type: ClassVar[RecordType] = RecordType.AAAA

    def __post_init__(self) -> None:
        object.__setattr__(self, 'address', _to_address(ipaddress.IPv6Address, self.type, self.address))

    def render(self) -> str:
        return str(self.address)


@dataclass(frozen=True)
class TextContent(RecordContent):
    '''Record content the provider treats as free-form text'''
    value: str

    def render(self) -> str:
        return self.value


@dataclass(frozen=True)
class MX(TextContent):
    type: ClassVar[RecordType] = RecordType.MX


@dataclass(frozen=True)
class CNAME(TextContent):
    type: ClassVar[RecordType] = RecordType.CNAME


@dataclass(frozen=True)
class ALIAS(TextContent):
    type: ClassVar[RecordType] = RecordType.ALIAS


@dataclass(frozen=True)
class TXT(TextContent):
    type: ClassVar[RecordType] = RecordType.TXT


@dataclass(frozen=True)
class NS(TextContent):
    type: ClassVar[RecordType] = RecordType.NS


@dataclass(frozen=True)
class SRV(TextContent):
    type: ClassVar[RecordType] = RecordType.SRV


@dataclass(frozen=True)
class TLSA(TextContent):
    type: ClassVar[RecordType] = RecordType.TLSA


@dataclass(frozen=True)
class CAA(TextContent):
    type: ClassVar[RecordType] = RecordType.CAA


@dataclass(frozen=True)
class HTTPS(TextContent):
    type: ClassVar[RecordType] = RecordType.HTTPS


@dataclass(frozen=True)
class SVCB(TextContent):
    type: ClassVar[RecordType] = RecordType.SVCB


CONTENT_TYPES: dict[RecordType, type] = {
    content_type.type: content_type
    for content_type in (A, AAAA, MX, CNAME, ALIAS, TXT, NS, SRV, TLSA, CAA, HTTPS, SVCB)
}


@dataclass(frozen=True)
class Record:
    id: int
    '''Provider-assigned ID of the record'''

    name: str
    '''Full dotted name of the record, as returned by the provider'''

    content: RecordContent
    '''Type and value of the record'''

    @classmethod
    def from_wire(cls, data: dict) -> 'Record':
        '''
        Build a record from a provider JSON object.
        The provider sends the ID as a string, so it is converted here.
        '''
        for key in ('name', 'type', 'content'):
            if not isinstance(data[key], str):
                raise TypeError(f'Record field "{key}" must be a string, got {data[key]!r}')
        return cls(
            id=int(data['id']),
            name=data['name'],
            content=RecordContent.parse(data['type'], data['content']),
        )
