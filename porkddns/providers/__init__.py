from porkddns.providers.dns_provider import DNSProvider
from porkddns.providers.porkbun import PorkbunProvider

ALL_PROVIDERS: dict[str, type[DNSProvider]] = {
    PorkbunProvider.name: PorkbunProvider,
}

__all__ = [
    'DNSProvider',
    'PorkbunProvider',
    'ALL_PROVIDERS',
]
