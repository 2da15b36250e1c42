import os
import sys
import time
import logging
import threading
from logging.handlers import RotatingFileHandler
import requests
from flask import Flask
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from .config import get_config
from .utils.performance_monitor import PerformanceMonitor
from .models.dashboard_state import DashboardState
from .models.csv_fetcher import CSVFetcher
from .models.dataset_loader import DatasetLoader
from .routes.api import api_bp
from .routes.views import views_bp, serve_fixture
from .utils.security_headers import add_security_headers


def setup_logging(config):
    """Setup application logging with a rotating file and the console"""
    app_logger = logging.getLogger('ddos_dashboard')
    app_logger.setLevel(getattr(logging, config.LOG_LEVEL, logging.INFO))

    if app_logger.handlers:
        return app_logger

    log_formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'
    )

    if not config.TESTING:
        os.makedirs(config.LOG_DIR, exist_ok=True)
        log_handler = RotatingFileHandler(
            os.path.join(config.LOG_DIR, 'ddos_dashboard.log'),
            maxBytes=10*1024*1024,
            backupCount=5,
            encoding='utf-8'
        )
        log_handler.setFormatter(log_formatter)
        app_logger.addHandler(log_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(log_formatter)
    app_logger.addHandler(console_handler)

    return app_logger


def refresh_monitor(config, dashboard_state, dataset_loader, performance_monitor, app_logger):
    """Background reload of every dataset on the refresh interval"""
    app_logger.info(f"Starting dataset refresh (interval: {config.REFRESH_INTERVAL}s)")

    consecutive_errors = 0
    max_errors = 10

    while True:
        cycle_start = time.time()

        try:
            dataset_loader.refresh(dashboard_state)
            performance_monitor.update_metrics()
            consecutive_errors = 0

        except Exception as e:
            consecutive_errors += 1
            performance_monitor.increment('load_errors')
            app_logger.error(f"Refresh error #{consecutive_errors}: {e}")

            if consecutive_errors >= max_errors:
                app_logger.critical("Too many consecutive errors, pausing refresh")
                time.sleep(300)
                consecutive_errors = 0

        cycle_time = time.time() - cycle_start
        sleep_time = max(0, config.REFRESH_INTERVAL - cycle_time)

        if sleep_time > 0:
            time.sleep(sleep_time)


def create_app(config=None, session_factory=None):
    """Application factory pattern"""
    config = config or get_config()

    app = Flask(__name__)
    app.config.update(config.get_flask_config())

    app_logger = setup_logging(config)

    limiter = Limiter(
        get_remote_address,
        app=app,
        default_limits=[config.RATE_LIMIT],
        storage_uri="memory://",
        enabled=config.ENABLE_RATE_LIMITING,
    )

    performance_monitor = PerformanceMonitor(config, app_logger)
    dashboard_state = DashboardState(config.DATASETS)
    fetcher = CSVFetcher(
        config.CSV_BASE_URL, session_factory or requests.Session, performance_monitor, app_logger
    )
    dataset_loader = DatasetLoader(
        fetcher, config.DATASETS, config.FETCH_WORKERS, performance_monitor, app_logger
    )

    app.config['dashboard_state'] = dashboard_state
    app.config['performance_monitor'] = performance_monitor
    app.config['csv_fetcher'] = fetcher
    app.config['dataset_loader'] = dataset_loader
    app.config['app_config'] = config
    app.config['app_logger'] = app_logger

    app.register_blueprint(api_bp)
    app.register_blueprint(views_bp)
    limiter.exempt(serve_fixture)

    app.after_request(add_security_headers)

    if config.ENABLE_AUTO_REFRESH:
        monitor_thread = threading.Thread(
            target=refresh_monitor,
            args=(config, dashboard_state, dataset_loader, performance_monitor, app_logger),
            daemon=True
        )
        monitor_thread.start()

    app_logger.info("=" * 50)
    app_logger.info("DDoS Attack Analysis Dashboard ready")
    app_logger.info(str(config))
    app_logger.info(f"Data directory: {config.DATA_DIR}")
    app_logger.info("=" * 50)

    return app


def main():
    try:
        app = create_app()
    except ValueError as e:
        print(f"Invalid configuration: {e}")
        sys.exit(1)

    config = app.config['app_config']
    try:
        app.run(
            host=config.HOST,
            port=config.PORT,
            debug=False,
            threaded=True,
            use_reloader=False
        )
    except KeyboardInterrupt:
        app.config['app_logger'].info("Received interrupt signal")


if __name__ == '__main__':
    main()
