import psutil
import threading
import time
from collections import deque


class PerformanceMonitor:
    """Process metrics plus dataset load and fetch counters"""

    def __init__(self, config, app_logger=None):
        self.config = config
        self.app_logger = app_logger
        self.process = psutil.Process()
        self.metrics = {
            'memory_usage_mb': 0,
            'cpu_percent': 0,
            'fetch_errors': 0,
            'records_parsed': 0,
            'loads_completed': 0,
            'load_errors': 0,
            'upload_errors': 0,
            'last_load_ms': 0,
            'uptime_seconds': 0
        }
        self.start_time = time.time()
        self.load_history = deque(maxlen=60)
        self.lock = threading.Lock()

    def increment(self, name, amount=1):
        """Bump a counter; safe from the fetch worker threads"""
        with self.lock:
            self.metrics[name] += amount

    def update_metrics(self):
        """Update process metrics"""
        try:
            memory_info = self.process.memory_info()
            self.metrics['memory_usage_mb'] = memory_info.rss / (1024 * 1024)
            self.metrics['cpu_percent'] = self.process.cpu_percent()
            self.metrics['uptime_seconds'] = time.time() - self.start_time

            if self.metrics['memory_usage_mb'] > self.config.MAX_MEMORY_MB:
                if self.app_logger:
                    self.app_logger.warning(f"High memory usage: {self.metrics['memory_usage_mb']:.1f}MB")

        except psutil.Error as e:
            if self.app_logger:
                self.app_logger.error(f"Performance monitoring error: {e}")

    def record_load(self, duration_ms, dataset_count):
        self.increment('loads_completed')
        self.metrics['last_load_ms'] = round(duration_ms, 1)
        self.load_history.append((time.time(), duration_ms, dataset_count))

    def get_load_trend(self):
        """Compare the latest load durations against the earlier average"""
        if len(self.load_history) < 2:
            return 'stable'

        durations = [d for _, d, _ in self.load_history]
        recent = durations[-3:]
        baseline = durations[:-3] or durations[:1]

        recent_avg = sum(recent) / len(recent)
        baseline_avg = sum(baseline) / len(baseline)

        if recent_avg > baseline_avg * 1.5:
            return 'slower'
        elif recent_avg < baseline_avg * 0.67:
            return 'faster'
        return 'stable'
