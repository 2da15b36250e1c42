import os
from pathlib import Path
from dotenv import load_dotenv

DEFAULT_DATASETS = [
    'attack_data.csv',
    'attack_types.csv',
    'protocol_data.csv',
    'country_data.csv',
    'historical_data.csv',
    'live_attack_feed.csv'
]

PACKAGE_ROOT = Path(__file__).resolve().parent.parent


def _env_flag(name, default):
    return os.getenv(name, default).lower() == 'true'


class Config:
    """Environment-aware configuration with validation"""

    def __init__(self, env=None):
        self.environment = env or os.getenv('DASHBOARD_ENV', 'production')
        self._load_environment()

        self.HOST = os.getenv('DASHBOARD_HOST', '127.0.0.1')
        self.PORT = int(os.getenv('DASHBOARD_PORT', 8080))
        self.CSV_BASE_URL = os.getenv('CSV_BASE_URL', f'http://127.0.0.1:{self.PORT}')
        self.DATA_DIR = os.getenv('DATA_DIR', str(PACKAGE_ROOT / 'data'))

        datasets = os.getenv('DASHBOARD_DATASETS', '')
        self.DATASETS = [d.strip() for d in datasets.split(',') if d.strip()] or list(DEFAULT_DATASETS)

        self.REFRESH_INTERVAL = int(os.getenv('DASHBOARD_REFRESH_INTERVAL', 60))
        self.ENABLE_AUTO_REFRESH = _env_flag('ENABLE_AUTO_REFRESH', 'true')
        self.FETCH_WORKERS = int(os.getenv('FETCH_WORKERS', 6))

        self.MAX_UPLOAD_MB = int(os.getenv('MAX_UPLOAD_MB', 5))
        self.MAX_MEMORY_MB = int(os.getenv('MAX_MEMORY_MB', 500))

        self.RATE_LIMIT = os.getenv('RATE_LIMIT', '500 per hour')
        self.ENABLE_RATE_LIMITING = _env_flag('ENABLE_RATE_LIMITING', 'true')

        self.LOG_DIR = os.getenv('LOG_DIR', 'logs')
        self.LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
        self.DEBUG = _env_flag('DEBUG', 'false')
        self.TESTING = False

        self.SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')

        self.validate()

    def _load_environment(self):
        """Load .env, then .env.<environment> on top of it"""
        if Path('.env').exists():
            load_dotenv('.env')

        env_file = f'.env.{self.environment}'
        if Path(env_file).exists():
            load_dotenv(env_file, override=True)

    def validate(self):
        """Validate configuration parameters"""
        if self.REFRESH_INTERVAL < 5:
            raise ValueError("DASHBOARD_REFRESH_INTERVAL must be at least 5 seconds")
        if self.PORT < 1 or self.PORT > 65535:
            raise ValueError("DASHBOARD_PORT must be between 1 and 65535")
        if self.FETCH_WORKERS < 1:
            raise ValueError("FETCH_WORKERS must be positive")
        if self.MAX_UPLOAD_MB < 1:
            raise ValueError("MAX_UPLOAD_MB must be at least 1")
        if not self.CSV_BASE_URL.startswith(('http://', 'https://')):
            raise ValueError("CSV_BASE_URL must be an http(s) URL")
        return True

    def get_flask_config(self):
        """Get configuration dictionary for Flask app"""
        return {
            'DEBUG': self.DEBUG,
            'TESTING': self.TESTING,
            'SECRET_KEY': self.SECRET_KEY,
            'MAX_CONTENT_LENGTH': self.MAX_UPLOAD_MB * 1024 * 1024,
        }

    def to_dict(self):
        """Return configuration as dictionary (for API endpoints)"""
        return {
            'environment': self.environment,
            'csv_base_url': self.CSV_BASE_URL,
            'data_dir': self.DATA_DIR,
            'datasets': list(self.DATASETS),
            'refresh_interval': self.REFRESH_INTERVAL,
            'auto_refresh': self.ENABLE_AUTO_REFRESH,
            'fetch_workers': self.FETCH_WORKERS,
            'max_upload_mb': self.MAX_UPLOAD_MB,
            'enable_rate_limiting': self.ENABLE_RATE_LIMITING,
            'debug': self.DEBUG
        }

    def __str__(self):
        return (
            f"DDoS Dashboard Configuration ({self.environment.upper()}): "
            f"http://{self.HOST}:{self.PORT}, data from {self.CSV_BASE_URL}, "
            f"{len(self.DATASETS)} datasets, refresh {self.REFRESH_INTERVAL}s"
        )


class DevelopmentConfig(Config):
    """Development-specific configuration"""
    def __init__(self):
        super().__init__('development')
        self.DEBUG = True
        self.LOG_LEVEL = 'DEBUG'


class ProductionConfig(Config):
    """Production-specific configuration"""
    def __init__(self):
        super().__init__('production')
        self.DEBUG = False


class TestingConfig(Config):
    """Configuration for the test suite: no background thread, no limits"""
    def __init__(self):
        super().__init__('testing')
        self.TESTING = True
        self.ENABLE_AUTO_REFRESH = False
        self.ENABLE_RATE_LIMITING = False
        self.CSV_BASE_URL = 'http://fixtures.test'


def get_config(env=None):
    env = env or os.getenv('DASHBOARD_ENV', 'production')
    if env == 'development':
        return DevelopmentConfig()
    if env == 'testing':
        return TestingConfig()
    return ProductionConfig()
