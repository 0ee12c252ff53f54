from .loader import BackgroundLoader, LoadCompletion
from .sources import CsvDataSource, DataSource, RecordsDataSource

__all__ = [
    "BackgroundLoader",
    "CsvDataSource",
    "DataSource",
    "LoadCompletion",
    "RecordsDataSource",
]
