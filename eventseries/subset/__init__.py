# eventseries/subset/__init__.py
from .processor import SubsetProcessor, EventSubsetProcessor, TimeSubsetProcessor
from .split import get_split_indices, get_split_indices_by_percentages


__all__ = [
    "SubsetProcessor",
    "EventSubsetProcessor",
    "TimeSubsetProcessor",
    "get_split_indices",
    "get_split_indices_by_percentages",
]
