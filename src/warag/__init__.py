"""warag - Google Docs/Sheets knowledge sync for WhatsApp business automation."""

__version__ = "0.1.0"
