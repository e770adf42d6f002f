"""
Loading operations out of an OpenAPI document.

Only the parts the trigger needs are read: servers, the path and method
of an operation, its declared parameters and its request content type.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..core.exceptions import ApiSpecError


logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")


@dataclass
class ParameterSpec:
    """
    One declared operation parameter.

    Attributes:
        name: Parameter name
        location: 'path', 'query', 'header' or 'cookie'
        required: Whether the API requires it
    """
    name: str
    location: str = "query"
    required: bool = False


@dataclass
class OperationSpec:
    """
    The request shape of one API operation.

    Attributes:
        operation_id: Operation identifier
        path: Path template, e.g. '/items/{id}'
        method: Lower-case HTTP method
        parameters: Declared path-level and operation-level parameters
        request_content_type: First declared request body media type
    """
    operation_id: str
    path: str
    method: str
    parameters: List[ParameterSpec] = field(default_factory=list)
    request_content_type: Optional[str] = None

    @property
    def parameter_names(self) -> List[str]:
        return [param.name for param in self.parameters]


class ApiSpec:
    """
    Parsed OpenAPI document.

    Accepts both JSON and YAML documents (YAML is a superset of JSON).
    """

    def __init__(self, document: Dict[str, Any], source: Optional[str] = None):
        if not isinstance(document, dict) or not isinstance(document.get("paths"), dict):
            raise ApiSpecError(f"API document has no 'paths' section: {source or '<inline>'}")
        self.document = document
        self.source = source

    @classmethod
    def from_file(cls, path: Path) -> "ApiSpec":
        """
        Load an API document from disk.

        Args:
            path: Path to a .json, .yaml or .yml file

        Raises:
            ApiSpecError: If the file is missing or cannot be parsed
        """
        path = Path(path)
        if not path.exists():
            raise ApiSpecError(f"API document not found: {path}")

        logger.info(f"Loading API document from: {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                document = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ApiSpecError(f"Cannot parse API document {path}: {e}") from e

        return cls(document, source=str(path))

    def servers(self) -> List[str]:
        """Server URLs declared by the document, in order."""
        return [
            server["url"]
            for server in self.document.get("servers") or []
            if isinstance(server, dict) and server.get("url")
        ]

    def resolve_server(self, index: int = 0, other_server: Optional[str] = None) -> Optional[str]:
        """
        Pick the base URL for calls.

        ``other_server`` is appended to the declared servers; the result is
        ``servers[index]`` when it exists, otherwise ``other_server``.
        """
        servers = self.servers()
        if other_server:
            servers.append(other_server)
        if 0 <= index < len(servers):
            return servers[index]
        return other_server

    def find_operation(self, operation_id: str) -> OperationSpec:
        """
        Look up an operation by its operationId.

        Raises:
            ApiSpecError: If the operation is not in the document
        """
        for path, path_item in self.document["paths"].items():
            if not isinstance(path_item, dict):
                continue
            for method in HTTP_METHODS:
                operation = path_item.get(method)
                if isinstance(operation, dict) and operation.get("operationId") == operation_id:
                    return self._build_operation(operation_id, path, method, path_item, operation)

        raise ApiSpecError(f"Operation not found in API document: {operation_id}")

    def _build_operation(
        self,
        operation_id: str,
        path: str,
        method: str,
        path_item: Dict[str, Any],
        operation: Dict[str, Any],
    ) -> OperationSpec:
        # Operation-level parameters override path-level ones with the same name and location
        declared: Dict[tuple, ParameterSpec] = {}
        for raw in list(path_item.get("parameters") or []) + list(operation.get("parameters") or []):
            raw = self._deref(raw)
            if not isinstance(raw, dict) or "name" not in raw:
                continue
            param = ParameterSpec(
                name=raw["name"],
                location=raw.get("in", "query"),
                required=bool(raw.get("required", False)),
            )
            declared[(param.name, param.location)] = param

        request_body = self._deref(operation.get("requestBody") or {})
        content = request_body.get("content") or {}
        content_type = next(iter(content), None)

        return OperationSpec(
            operation_id=operation_id,
            path=path,
            method=method,
            parameters=list(declared.values()),
            request_content_type=content_type,
        )

    def _deref(self, node: Any) -> Any:
        """Resolve a local '#/...' $ref; other nodes are returned as is."""
        seen = set()
        while isinstance(node, dict) and isinstance(node.get("$ref"), str):
            ref = node["$ref"]
            if not ref.startswith("#/") or ref in seen:
                return node
            seen.add(ref)
            target: Any = self.document
            for part in ref[2:].split("/"):
                part = part.replace("~1", "/").replace("~0", "~")
                if not isinstance(target, dict) or part not in target:
                    raise ApiSpecError(f"Unresolvable reference: {ref}")
                target = target[part]
            node = target
        return node
