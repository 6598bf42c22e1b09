import socket
import ipaddress
from enum import Enum
import requests
from porkddns.dns import IPAddress
from porkddns.errors import IpSourceError


class AddressFamily(Enum):
    V4 = 'v4'
    V6 = 'v6'


class Scope(Enum):
    PUBLIC = 'public'
    '''The address the internet sees, as reported by an echo service'''

    PRIVATE = 'private'
    '''The address of the local interface used for outbound traffic'''


_ECHO_URLS = {
    AddressFamily.V4: 'https://api.ipify.org?format=json',
    AddressFamily.V6: 'https://api6.ipify.org?format=json',
}

# Documentation addresses. Connecting a UDP socket only selects a route; nothing is sent.
_PROBE_TARGETS = {
    AddressFamily.V4: (socket.AF_INET, ('192.0.2.1', 53)),
    AddressFamily.V6: (socket.AF_INET6, ('2001:db8::1', 53)),
}

_ADDRESS_TYPES = {
    AddressFamily.V4: ipaddress.IPv4Address,
    AddressFamily.V6: ipaddress.IPv6Address,
}


def _to_address(family: AddressFamily, value: str, source: str) -> IPAddress:
    try:
        return _ADDRESS_TYPES[family](value)
    except ValueError:
        raise IpSourceError(f'{source} returned "{value}", which is not an IP{family.value} address') from None


def public_address(family: AddressFamily, timeout: float = 10) -> IPAddress:
    '''Get the public IP of the machine performing this ping'''
    url = _ECHO_URLS[family]
    try:
        resp = requests.get(url, timeout=timeout)
    except requests.RequestException as E:
        raise IpSourceError(f'Failed to ping against {url}: {E}') from E
    if resp.status_code != 200:
        raise IpSourceError(f'Failed to ping against {url} (HTTP {resp.status_code})')

    try:
        ip = resp.json()['ip']
    except (ValueError, KeyError, TypeError):
        raise IpSourceError(f'Unexpected response from {url}') from None
    return _to_address(family, ip, url)


def private_address(family: AddressFamily) -> IPAddress:
    '''Get the address of the local interface that outbound traffic would leave through'''
    socket_family, target = _PROBE_TARGETS[family]
    try:
        with socket.socket(socket_family, socket.SOCK_DGRAM) as sock:
            sock.connect(target)
            ip = sock.getsockname()[0]
    except OSError as E:
        raise IpSourceError(f'No route for IP{family.value} traffic: {E}') from E
    # Strip any IPv6 zone index
    return _to_address(family, ip.split('%')[0], 'local interface')


def current_address(family: AddressFamily, scope: Scope) -> IPAddress:
    if scope == Scope.PUBLIC:
        return public_address(family)
    return private_address(family)
