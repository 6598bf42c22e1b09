import re
from typing import Optional
from dataclasses import dataclass, field
import tldextract
from porkddns.errors import InvalidNameError, MissingRootError, HasPrefixError

# Use the public suffix list snapshot bundled with tldextract instead of fetching it
_EXTRACT = tldextract.TLDExtract(suffix_list_urls=(), cache_dir=None)

_LABEL = re.compile(r'^(\*|[a-z0-9_]([a-z0-9_-]{0,61}[a-z0-9_])?)$')


def split(name: str) -> tuple[Optional[str], str]:
    '''
    Split a domain name into its subdomain prefix and its registrable root.
    The prefix is `None` if the name is its own root.

    >>> split('www.example.co.uk')
    ('www', 'example.co.uk')
    '''
    name = name.strip().lower().rstrip('.')
    if not name:
        raise MissingRootError(name)

    extracted = _EXTRACT(name)
    if not extracted.domain or not extracted.suffix:
        raise MissingRootError(name)

    root = f'{extracted.domain}.{extracted.suffix}'
    prefix = extracted.subdomain or None
    return prefix, root


@dataclass(frozen=True)
class DomainName:
    '''
    A validated, fully-qualified domain name.
    Construction fails if the name has no registrable root.
    '''
    name: str
    prefix: Optional[str] = field(init=False, compare=False)
    root: str = field(init=False, compare=False)

    def __post_init__(self) -> None:
        name = self.name.strip().lower().rstrip('.')
        prefix, root = split(name)
        object.__setattr__(self, 'name', name)
        object.__setattr__(self, 'prefix', prefix)
        object.__setattr__(self, 'root', root)

    @property
    def is_root(self) -> bool:
        return self.prefix is None

    def __str__(self) -> str:
        return self.name


def parse_domain(text: str) -> DomainName:
    '''Validate a configured host name and turn it into a `DomainName`'''
    if not isinstance(text, str):
        raise InvalidNameError(f'Domain name must be a string, got {text!r}')

    name = text.strip().lower().rstrip('.')
    if not name:
        raise MissingRootError(text)
    if len(name) > 253:
        raise InvalidNameError(f'Domain name "{text}" is longer than 253 characters')

    labels = name.split('.')
    for i, label in enumerate(labels):
        if label == '*' and i != 0:
            raise InvalidNameError(f'Wildcard label must be leftmost in "{text}"')
        if not _LABEL.match(label):
            raise InvalidNameError(f'Domain name "{text}" has an invalid label "{label}"')

    return DomainName(name)


def require_root(domain: DomainName) -> str:
    '''Return the root of `domain`, failing if it names a subdomain'''
    if not domain.is_root:
        raise HasPrefixError(domain.name)
    return domain.root
