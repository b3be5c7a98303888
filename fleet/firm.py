"""Firm class for the companies that own vehicles and equipment."""
from typing import Optional


class Firm:
    """A company whose vehicles/equipment are maintained."""

    def __init__(self, id: int, name: str, contact: Optional[str] = None):
        self.id = id
        self.name = name
        self.contact = contact
