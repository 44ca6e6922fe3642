"""Job board backend: job postings with cached, paginated listings."""

__version__ = "1.0.0"
