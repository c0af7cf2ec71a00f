"""
Validation messages and the ordered per-entity message collector.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Tuple


class MessageKind(Enum):
    """Severity of a validation message."""
    MISSING = "missing"
    INVALID = "invalid"

    @classmethod
    def parse(cls, value) -> "MessageKind":
        """Accept either a MessageKind or its string value."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"kind must be one of {[k.value for k in cls]}, got {value!r}")


@dataclass(frozen=True)
class ValidationMessage:
    """A single problem found for an asset of an entity list."""
    entity: str
    kind: MessageKind
    path: str
    description: str = ""

    def as_dict(self) -> Dict[str, str]:
        return {
            "kind": self.kind.value,
            "path": self.path,
            "description": self.description,
        }


class MessageCollector:
    """
    Collects validation messages grouped by entity name.

    Entities appear in the order their first message arrived and messages keep
    the order they were added in. An entity gets a bucket only once it receives
    a message, so lists without problems never show up.
    """

    def __init__(self):
        self._messages: Dict[str, List[ValidationMessage]] = {}

    def add(self, entity: str, kind, path, description: str = "") -> ValidationMessage:
        """Append a message to the entity's bucket, creating the bucket on first use."""
        message = ValidationMessage(
            entity=entity,
            kind=MessageKind.parse(kind),
            path=str(path),
            description=description or "",
        )
        self._messages.setdefault(entity, []).append(message)
        return message

    @property
    def entities(self) -> List[str]:
        return list(self._messages)

    def messages_for(self, entity: str) -> List[ValidationMessage]:
        return list(self._messages.get(entity, []))

    def items(self) -> Iterator[Tuple[str, List[ValidationMessage]]]:
        for entity, messages in self._messages.items():
            yield entity, list(messages)

    def __iter__(self) -> Iterator[ValidationMessage]:
        for messages in self._messages.values():
            yield from messages

    def __len__(self) -> int:
        return self.total

    @property
    def total(self) -> int:
        return sum(len(messages) for messages in self._messages.values())

    def count_by_kind(self) -> Dict[str, int]:
        counts = {kind.value: 0 for kind in MessageKind}
        for message in self:
            counts[message.kind.value] += 1
        return counts

    def as_dict(self) -> Dict[str, List[Dict[str, str]]]:
        """Plain mapping of entity name to message dicts, in collection order."""
        return {
            entity: [message.as_dict() for message in messages]
            for entity, messages in self._messages.items()
        }
