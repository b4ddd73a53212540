"""
Record types shared by the locator, the poller and the cluster client
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol


class GenericRecord(Protocol):
    """The only view of an arbitrary cluster object the locator needs"""

    def metadata_name(self) -> Optional[str]:
        ...

    def metadata_namespace(self) -> Optional[str]:
        ...


class UnstructuredRecord:
    """Adapter over a raw API object decoded from JSON"""

    def __init__(self, obj: Dict[str, Any]):
        self._obj = obj

    def _metadata(self) -> Dict[str, Any]:
        metadata = self._obj.get("metadata")
        return metadata if isinstance(metadata, dict) else {}

    def metadata_name(self) -> Optional[str]:
        name = self._metadata().get("name")
        return name if isinstance(name, str) else None

    def metadata_namespace(self) -> Optional[str]:
        namespace = self._metadata().get("namespace")
        return namespace if isinstance(namespace, str) else None

    def __repr__(self):
        return f"UnstructuredRecord({self.metadata_namespace()}/{self.metadata_name()})"


@dataclass(frozen=True)
class PodRecord:
    name: str
    namespace: str
