"""ContentCrawl: recursive web-content crawling with configurable link discovery."""

__version__ = "0.1.0"
