import copy
from unittest.mock import MagicMock

import pytest

from bdtools.core.errors import RequestFailed

SERVER = 'https://bd.example.com'
PROJECT_VERSION_URL = f'{SERVER}/api/projects/p1/versions/v1'


def meta(href=None, links=None):
    return {
        'href': href,
        'links': [{'rel': rel, 'href': h} for rel, h in (links or {}).items()],
    }


def copyright_json(href, active=True, text='Copyright (c) 2020 Example Corp'):
    return {
        'active': active,
        'kbCopyright': text,
        'fileSha1s': ['da39a3ee5e6b4b0d3255bfef95601890afd80709'],
        'source': 'FILE',
        '_meta': meta(href),
    }


def origin_json(href, name='maven'):
    return {'originName': name, 'originId': f'{name}:id', '_meta': meta(href)}


class FakeBlackDuck:
    """
    In-memory stand-in for the collections a BlackDuckService serves.

    `writes_before_visible` delays the effect of PUTs to simulate a server
    whose reads lag behind its writes: a write only lands once that many
    PUTs have been made to the same record.
    """

    def __init__(self):
        self.collections: dict[str, list[dict]] = {}
        self.records: dict[str, dict] = {}
        self.failing_writes: set[str] = set()
        self.writes_before_visible = 1
        self.write_counts: dict[str, int] = {}

    def add_copyrights(self, origin_href, *records):
        self.collections[f'{origin_href}/copyrights'] = [r['_meta']['href'] for r in records]
        for record in records:
            self.records[record['_meta']['href']] = record

    def get_all(self, href, params=None, parser=None, max_items=None):
        items = []
        for item in self.collections.get(href, []):
            data = copy.deepcopy(self.records[item]) if isinstance(item, str) else item
            items.append(parser(data) if parser else data)
        return items

    def put_json(self, href, body):
        if href in self.failing_writes:
            raise RequestFailed('Internal Server Error', status=500, url=href)
        self.write_counts[href] = self.write_counts.get(href, 0) + 1
        if self.write_counts[href] >= self.writes_before_visible:
            self.records[href]['active'] = body['active']


@pytest.fixture
def fake():
    return FakeBlackDuck()


@pytest.fixture
def mock_service(fake):
    service = MagicMock()
    service.base_url = SERVER
    service.get_all.side_effect = fake.get_all
    service.put_json.side_effect = fake.put_json
    return service
