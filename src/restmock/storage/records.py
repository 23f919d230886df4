"""
RestMock Stored Records

A record pairs the request criteria it is keyed on with the response
payload handed back on a match.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Dict, Any

from ..common import to_mapping

CRITERIA_KEY = 'criteria'


@dataclass
class StoredRecord:
    """A (criteria, payload) pair as persisted in a response store."""

    criteria: Dict[str, Any] = field(default_factory=dict)
    payload: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def build(cls, request: Any, response: Any) -> 'StoredRecord':
        """
        Create a record from a request description and the response to return.

        Args:
            request: Request criteria (dict, dataclass or attribute object)
            response: Response payload (dict, dataclass or attribute object)

        Returns:
            StoredRecord keyed on the request

        Raises:
            TypeError: If either argument cannot be normalized to a mapping
        """
        payload = to_mapping(response)
        # A response must not smuggle in its own criteria
        payload.pop(CRITERIA_KEY, None)
        return cls(criteria=to_mapping(request), payload=payload)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StoredRecord':
        """Split a stored dict into criteria and payload."""
        payload = {k: v for k, v in data.items() if k != CRITERIA_KEY}
        criteria = data.get(CRITERIA_KEY)
        return cls(
            criteria=dict(criteria) if isinstance(criteria, Mapping) else {},
            payload=payload
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the dict layout written to the store file."""
        data = dict(self.payload)
        data[CRITERIA_KEY] = dict(self.criteria)
        return data

    def response(self) -> Dict[str, Any]:
        """Return the payload without criteria, as handed to the caller."""
        return dict(self.payload)
