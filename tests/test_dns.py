'''
Tests for the record content model
'''

import ipaddress

import pytest

from porkddns.dns import (
    A,
    AAAA,
    CONTENT_TYPES,
    MX,
    NS,
    TXT,
    Record,
    RecordContent,
    RecordType,
)
from porkddns.errors import ContentError, MalformedAddressError, UnknownTypeError

VALID_CONTENT = {
    RecordType.A: '203.0.113.5',
    RecordType.AAAA: '2001:db8::5',
    RecordType.MX: 'mail.example.com',
    RecordType.CNAME: 'target.example.com',
    RecordType.ALIAS: 'target.example.com',
    RecordType.TXT: 'v=spf1 include:_spf.example.com -all',
    RecordType.NS: 'ns1.example.net',
    RecordType.SRV: '5 25565 mc.example.com',
    RecordType.TLSA: '3 1 1 abcdef0123456789',
    RecordType.CAA: '0 issue "letsencrypt.org"',
    RecordType.HTTPS: '1 . alpn="h2,h3"',
    RecordType.SVCB: '1 svc.example.com',
}


def test_every_record_type_has_a_content_variant():
    assert set(CONTENT_TYPES) == set(RecordType)
    assert set(VALID_CONTENT) == set(RecordType)


def test_type_tags_are_unique_and_uppercase():
    tags = [record_type.value for record_type in RecordType]
    assert len(tags) == len(set(tags))
    assert all(tag == tag.upper() for tag in tags)


@pytest.mark.parametrize('record_type', list(RecordType))
def test_parse_render_round_trip(record_type):
    content = RecordContent.parse(record_type.value, VALID_CONTENT[record_type])

    assert content.type is record_type
    assert content.tag == record_type.value
    assert RecordContent.parse(*content.to_wire()) == content


@pytest.mark.parametrize('record_type', list(RecordType))
def test_each_content_maps_to_exactly_one_type(record_type):
    content = RecordContent.parse(record_type.value, VALID_CONTENT[record_type])
    matching = [t for t, cls in CONTENT_TYPES.items() if isinstance(content, cls)]
    assert matching == [record_type]


def test_unknown_type_tag():
    with pytest.raises(UnknownTypeError) as exc:
        RecordContent.parse('SPF', 'v=spf1 -all')
    assert exc.value.tag == 'SPF'
    assert isinstance(exc.value, ContentError)


def test_type_tags_are_case_sensitive():
    with pytest.raises(UnknownTypeError):
        RecordType.from_tag('a')


@pytest.mark.parametrize(
    'tag,content',
    [
        ('A', '256.1.1.1'),
        ('A', 'example.com'),
        ('A', '2001:db8::1'),
        ('AAAA', '203.0.113.5'),
        ('AAAA', 'not-an-address'),
        ('A', ''),
        ('A', ' 203.0.113.5 '),
        ('AAAA', '2001:db8::5\n'),
    ],
)
def test_malformed_address(tag, content):
    with pytest.raises(MalformedAddressError):
        RecordContent.parse(tag, content)


def test_text_content_is_kept_verbatim():
    content = RecordContent.parse('TXT', '  spaces and "quotes"  ')
    assert content.render() == '  spaces and "quotes"  '


def test_address_rendering_is_canonical():
    assert AAAA('2001:0db8:0000:0000:0000:0000:0000:0005').render() == '2001:db8::5'
    assert A(ipaddress.IPv4Address('203.0.113.5')).render() == '203.0.113.5'


def test_structural_equality():
    assert A('203.0.113.5') == A(ipaddress.IPv4Address('203.0.113.5'))
    assert A('203.0.113.5') != A('198.51.100.9')
    assert TXT('ns1.example.net') != NS('ns1.example.net')
    assert MX('mail.example.com') == MX('mail.example.com')


def test_from_address():
    assert RecordContent.from_address(ipaddress.ip_address('203.0.113.5')) == A('203.0.113.5')
    assert RecordContent.from_address(ipaddress.ip_address('2001:db8::5')) == AAAA('2001:db8::5')


def test_content_is_immutable():
    content = A('203.0.113.5')
    with pytest.raises(AttributeError):
        content.address = ipaddress.IPv4Address('198.51.100.9')


def test_record_from_wire():
    record = Record.from_wire(
        {
            'id': '106926659',
            'name': 'www.example.com',
            'type': 'A',
            'content': '203.0.113.5',
            'ttl': '600',
            'prio': '0',
            'notes': '',
        }
    )

    assert record == Record(id=106926659, name='www.example.com', content=A('203.0.113.5'))


def test_record_from_wire_with_bad_content():
    with pytest.raises(MalformedAddressError):
        Record.from_wire({'id': '1', 'name': 'example.com', 'type': 'A', 'content': 'nope'})


@pytest.mark.parametrize('field', ['name', 'type', 'content'])
def test_record_from_wire_requires_string_fields(field):
    data = {'id': '1', 'name': 'example.com', 'type': 'A', 'content': '203.0.113.5'}
    data[field] = None

    with pytest.raises(TypeError):
        Record.from_wire(data)
