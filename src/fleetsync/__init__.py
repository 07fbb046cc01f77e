"""fleetsync — spreadsheet-backed fleet catalog publisher and resilient loader."""

__version__ = "0.4.0"
