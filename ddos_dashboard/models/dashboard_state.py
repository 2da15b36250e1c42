import threading
import time

from .dataset import Dataset


class DashboardState:
    """Centralized state for the datasets currently on display"""

    def __init__(self, dataset_names=()):
        self.datasets = {name: Dataset.empty() for name in dataset_names}
        self.stats = {
            'datasets_loaded': 0,
            'empty_datasets': 0,
            'total_records': 0,
            'uploads': 0,
            'last_updated': None,
            'last_upload': None
        }
        self.lock = threading.RLock()

    def replace_all(self, results):
        """Swap every loaded dataset at once"""
        with self.lock:
            datasets = dict(self.datasets)
            datasets.update(results)
            self.datasets = datasets
            self._update_stats()
            self.stats['last_updated'] = time.strftime('%Y-%m-%d %H:%M:%S')

    def replace_dataset(self, name, dataset):
        """Replace one dataset, e.g. from a user upload"""
        with self.lock:
            datasets = dict(self.datasets)
            datasets[name] = dataset
            self.datasets = datasets
            self._update_stats()
            self.stats['uploads'] += 1
            self.stats['last_upload'] = time.strftime('%Y-%m-%d %H:%M:%S')

    def get_dataset(self, name):
        with self.lock:
            return self.datasets.get(name)

    def has_dataset(self, name):
        with self.lock:
            return name in self.datasets

    def dataset_names(self):
        with self.lock:
            return list(self.datasets)

    def snapshot(self):
        """Consistent view of all datasets for one render"""
        with self.lock:
            return dict(self.datasets)

    def _update_stats(self):
        self.stats['datasets_loaded'] = sum(1 for d in self.datasets.values() if d)
        self.stats['empty_datasets'] = sum(1 for d in self.datasets.values() if not d)
        self.stats['total_records'] = sum(len(d) for d in self.datasets.values())

    def summary(self, table_name='historical_data.csv'):
        """Metric cards derived from the attack table"""
        with self.lock:
            table = self.datasets.get(table_name) or Dataset.empty()

            return {
                'total_attacks': len(table),
                'blocked': sum(1 for r in table if r.get('status') == 'Blocked'),
                'active': sum(1 for r in table if r.get('status') == 'Active'),
                'critical': sum(1 for r in table if r.get('severity') == 'Critical'),
                'stats': self.stats.copy()
            }
