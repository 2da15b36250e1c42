import time
import concurrent.futures

from .dataset import Dataset


class DatasetLoader:
    """Loads a batch of CSV datasets in parallel and applies them in one swap"""

    def __init__(self, fetcher, dataset_names, max_workers=6, performance_monitor=None, app_logger=None):
        self.fetcher = fetcher
        self.dataset_names = list(dataset_names)
        self.max_workers = max_workers
        self.performance_monitor = performance_monitor
        self.app_logger = app_logger

    def load_all(self, names=None):
        """Fetch every name concurrently, wait for all, keep request order"""
        names = list(names if names is not None else self.dataset_names)
        if not names:
            return {}

        results = {}
        workers = max(1, min(self.max_workers, len(names)))

        with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {name: executor.submit(self.fetcher.fetch, name) for name in names}

            for name, future in futures.items():
                try:
                    results[name] = future.result()
                except Exception as e:
                    if self.app_logger:
                        self.app_logger.error(f"Unexpected error loading {name}: {e}")
                    results[name] = Dataset.empty()

        return results

    def refresh(self, dashboard_state):
        """Reload all configured datasets and swap them into the state"""
        start_time = time.time()

        results = self.load_all()
        dashboard_state.replace_all(results)

        load_time = (time.time() - start_time) * 1000
        empty = [name for name, dataset in results.items() if not dataset]

        if self.performance_monitor:
            self.performance_monitor.record_load(load_time, len(results))

        if self.app_logger:
            self.app_logger.info(
                f"Loaded {len(results)} datasets in {load_time:.1f}ms "
                f"({sum(len(d) for d in results.values())} records)"
            )
            if empty:
                self.app_logger.warning(f"Empty datasets after refresh: {', '.join(empty)}")

        return {
            'datasets': {name: len(dataset) for name, dataset in results.items()},
            'empty': empty,
            'load_time_ms': round(load_time, 1)
        }
