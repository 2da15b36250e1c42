import threading

from ddos_dashboard.utils.performance_monitor import PerformanceMonitor


def test_increment_from_many_threads(config):
    monitor = PerformanceMonitor(config)

    def bump():
        for _ in range(2000):
            monitor.increment('records_parsed')

    threads = [threading.Thread(target=bump) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert monitor.metrics['records_parsed'] == 16000


def test_record_load_updates_counters(config):
    monitor = PerformanceMonitor(config)

    monitor.record_load(12.34, 6)
    monitor.record_load(10.0, 6)

    assert monitor.metrics['loads_completed'] == 2
    assert monitor.metrics['last_load_ms'] == 10.0
    assert monitor.get_load_trend() == 'stable'
