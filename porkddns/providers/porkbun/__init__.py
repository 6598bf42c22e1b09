from porkddns.providers.porkbun.provider import PorkbunProvider

__all__ = [
    'PorkbunProvider',
]
