"""Location class for the sites where vehicles are kept."""
from typing import Optional


class Location:
    """A site (depot, yard, airport apron) where vehicles are stationed."""

    def __init__(self, id: int, name: str, address: Optional[str] = None):
        self.id = id
        self.name = name
        self.address = address
