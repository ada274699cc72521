"""Sender trust assessment for EML files from SPF, DKIM and DMARC signals."""

__version__ = "0.1.0"
