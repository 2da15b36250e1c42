import logging
from unittest import mock

import requests

from ddos_dashboard.models.csv_fetcher import CSVFetcher, fetch_csv_data
from ddos_dashboard.utils.performance_monitor import PerformanceMonitor

from .conftest import FakeSession


def test_fetch_parses_response_body():
    session = FakeSession({'attack_types.csv': 'name,value\nSYN Flood,142\n'})
    fetcher = CSVFetcher('http://fixtures.test/', lambda: session)

    records = fetcher.fetch('attack_types.csv')

    assert records == [{'name': 'SYN Flood', 'value': 142}]
    assert session.requested == ['http://fixtures.test/attack_types.csv']


def test_missing_resource_returns_empty_dataset(caplog):
    logger = logging.getLogger('ddos_dashboard.test')
    fetcher = CSVFetcher('http://fixtures.test', lambda: FakeSession(), app_logger=logger)

    with caplog.at_level(logging.ERROR, logger='ddos_dashboard.test'):
        records = fetcher.fetch('does_not_exist.csv')

    assert records == []
    assert 'does_not_exist.csv' in caplog.text


def test_transport_error_returns_empty_dataset(config):
    monitor = PerformanceMonitor(config)
    session = FakeSession({'a.csv': 'x\n1'}, fail={'a.csv'})
    fetcher = CSVFetcher('http://fixtures.test', lambda: session, performance_monitor=monitor)

    assert fetcher.fetch('a.csv') == []
    assert monitor.metrics['fetch_errors'] == 1


def test_successful_fetch_counts_records(config):
    monitor = PerformanceMonitor(config)
    session = FakeSession({'a.csv': 'x\n1\n2'})
    fetcher = CSVFetcher('http://fixtures.test', lambda: session, performance_monitor=monitor)

    fetcher.fetch('a.csv')

    assert monitor.metrics['records_parsed'] == 2
    assert monitor.metrics['fetch_errors'] == 0


def test_fetch_csv_data_uses_requests_session():
    response = mock.Mock(status_code=500, text='boom')
    with mock.patch.object(requests.Session, 'get', return_value=response) as get:
        records = fetch_csv_data('attack_data.csv', 'http://fixtures.test')

    assert records == []
    get.assert_called_once_with('http://fixtures.test/attack_data.csv')


def test_byte_order_mark_is_dropped_from_first_header():
    session = FakeSession({'attack_data.csv': '\ufefftime,critical\n00:00,3\n'})
    fetcher = CSVFetcher('http://fixtures.test', lambda: session)

    records = fetcher.fetch('attack_data.csv')

    assert records.headers == ('time', 'critical')
    assert records == [{'time': '00:00', 'critical': 3}]


def test_body_is_decoded_as_utf8_without_charset():
    body = "country,value\nCôte d'Ivoire,7\n".encode('utf-8')
    response = mock.Mock(status_code=200, content=body, text=body.decode('iso-8859-1'))
    session = mock.MagicMock()
    session.__enter__.return_value.get.return_value = response
    session.__exit__.return_value = False
    fetcher = CSVFetcher('http://fixtures.test', lambda: session)

    records = fetcher.fetch('country_data.csv')

    assert records == [{'country': "Côte d'Ivoire", 'value': 7}]


def test_each_fetch_uses_a_fresh_session():
    seen_cookies = []

    def fake_get(session, url):
        seen_cookies.append(session.cookies.get_dict())
        session.cookies.set('sid', 'first-call')
        return mock.Mock(status_code=200, content=b'a\n1\n')

    with mock.patch.object(requests.Session, 'get', autospec=True, side_effect=fake_get):
        fetcher = CSVFetcher('http://fixtures.test')
        fetcher.fetch('attack_data.csv')
        fetcher.fetch('attack_types.csv')

    assert seen_cookies == [{}, {}]


def test_session_factory_called_per_fetch():
    sessions = []

    def factory():
        sessions.append(FakeSession({'a.csv': 'x\n1'}))
        return sessions[-1]

    fetcher = CSVFetcher('http://fixtures.test', factory)
    fetcher.fetch('a.csv')
    fetcher.fetch('a.csv')

    assert len(sessions) == 2
    assert [len(s.requested) for s in sessions] == [1, 1]
