"""Data-store access for complaints, citizen users, RTI requests and admins."""

from .changes import ChangeEvent, ChangeFeed, Subscription
from .datastore import DataStore, DataStoreError

__all__ = ["ChangeEvent", "ChangeFeed", "DataStore", "DataStoreError", "Subscription"]
