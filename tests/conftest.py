from typing import Optional

import pytest

from porkddns.dns import Record, RecordContent, RecordType
from porkddns.providers import DNSProvider


class FakeProvider(DNSProvider):
    '''In-memory provider that records every mutating call'''

    name = 'fake'

    def __init__(self, records: Optional[list[Record]] = None):
        super().__init__('test')
        self.records = list(records or [])
        self.calls: list[tuple] = []
        self._next_id = 1000

    def authenticate(self, credentials: dict) -> None:
        pass

    def ping(self) -> str:
        return '203.0.113.1'

    def retrieve(self, root: str, record_id: Optional[int] = None) -> list[Record]:
        self.calls.append(('retrieve', root, record_id))
        return [r for r in self.records if record_id is None or r.id == record_id]

    def retrieve_by_name_type(self, root, record_type, prefix):
        self.calls.append(('retrieve_by_name_type', root, record_type, prefix))
        name = f'{prefix}.{root}' if prefix else root
        return [r for r in self.records if r.name == name and r.content.type == record_type]

    def create(self, root, prefix, content: RecordContent) -> int:
        self.calls.append(('create', root, prefix, content))
        self._next_id += 1
        name = f'{prefix}.{root}' if prefix else root
        self.records.append(Record(id=self._next_id, name=name, content=content))
        return self._next_id

    def edit(self, root, record_id, prefix, content) -> None:
        self.calls.append(('edit', root, record_id, prefix, content))
        self.records = [
            Record(id=r.id, name=r.name, content=content) if r.id == record_id else r
            for r in self.records
        ]

    def edit_by_name_type(self, root, prefix, content) -> None:
        self.calls.append(('edit_by_name_type', root, prefix, content))

    def delete(self, root, record_id) -> None:
        self.calls.append(('delete', root, record_id))
        self.records = [r for r in self.records if r.id != record_id]

    def delete_by_name_type(self, root, prefix, record_type: RecordType) -> None:
        self.calls.append(('delete_by_name_type', root, prefix, record_type))

    def mutations(self) -> list[tuple]:
        return [call for call in self.calls if not call[0].startswith('retrieve')]


@pytest.fixture
def fake_provider():
    return FakeProvider()
