import requests

from .csv_parser import parse_csv
from .dataset import Dataset


class CSVFetcher:
    """Fetches CSV fixtures over HTTP and degrades to an empty dataset on failure"""

    def __init__(self, base_url, session_factory=requests.Session, performance_monitor=None, app_logger=None):
        self.base_url = base_url.rstrip('/')
        self.session_factory = session_factory
        self.performance_monitor = performance_monitor
        self.app_logger = app_logger

    def build_url(self, filename):
        return f"{self.base_url}/{filename}"

    def fetch(self, filename):
        """Fetch one resource and parse it; never raises to the caller.

        Every call runs in its own session, so no cookies or connections
        carry over between fetches. The body is always decoded as UTF-8.
        """
        url = self.build_url(filename)

        try:
            with self.session_factory() as session:
                response = session.get(url)
                if response.status_code // 100 != 2:
                    raise requests.HTTPError(
                        f"Failed to fetch {filename}: HTTP {response.status_code}",
                        response=response
                    )
                text = response.content.decode('utf-8-sig', errors='replace')
            dataset = parse_csv(text)

        except requests.RequestException as e:
            if self.app_logger:
                self.app_logger.error(f"Error fetching {filename}: {e}")
            if self.performance_monitor:
                self.performance_monitor.increment('fetch_errors')
            return Dataset.empty()

        if self.performance_monitor:
            self.performance_monitor.increment('records_parsed', len(dataset))
        if self.app_logger:
            self.app_logger.debug(f"Fetched {filename}: {len(dataset)} records")
        return dataset


def fetch_csv_data(filename, base_url, app_logger=None):
    """One-shot fetch with the default transport"""
    return CSVFetcher(base_url, app_logger=app_logger).fetch(filename)
