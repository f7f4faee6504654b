import hashlib
import json
from pathlib import Path
from typing import Any, Protocol

from attrs import define, field
from attrs.validators import instance_of


@define(slots=True, frozen=True)
class PolicyDocument:
    """Opaque access policy content plus the hash used for change detection."""

    content: bytes = field(validator=instance_of(bytes))
    source: str = field(default="<inline>", validator=instance_of(str))

    @property
    def sha256(self) -> str:
        return hashlib.sha256(self.content).hexdigest()

    @property
    def short_hash(self) -> str:
        return self.sha256[:12]

    def as_json(self) -> dict[str, Any]:
        return json.loads(self.content)


class PolicyDocumentSource(Protocol):
    def load(self) -> PolicyDocument:
        ...


@define(slots=True, frozen=True)
class FilePolicyDocumentSource:
    path: Path = field(converter=Path)

    def load(self) -> PolicyDocument:
        with open(self.path, "rb") as file:
            content = file.read()
        return PolicyDocument(content=content, source=str(self.path))
