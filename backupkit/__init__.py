"""Back up databases and files by dumping, archiving, compressing and encrypting them."""

__version__ = "0.1.0"