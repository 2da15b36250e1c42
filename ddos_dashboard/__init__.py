"""DDoS attack analysis dashboard: CSV fixtures parsed and served with Flask"""

__version__ = "1.0.0"
