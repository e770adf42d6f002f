"""
One poll cycle of the trigger: call the API operation, extract the
records and hand them to the incremental emission engine.
"""

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote

from ..config.config_loader import ApiSettings, TriggerSettings
from ..core.connector import Connector, ConnectorRequest
from ..core.exceptions import TriggerConfigError, TriggerTransportError
from ..core.models import Envelope, IncomingMessage, Snapshot, SyncResult
from ..core.sink import EmitFn
from ..openapi.loader import ApiSpec, OperationSpec
from ..sync.engine import IncrementalEmitter
from ..sync.metadata import project_metadata
from ..sync.paths import extract_records


logger = logging.getLogger(__name__)

_PATH_PARAM = re.compile(r"{([^{}]+)}")


def drop_null_fields(body: Any) -> Any:
    """
    Remove None-valued fields from a message body.

    Objects lose their top-level None fields; lists are cleaned element
    by element. The input is not modified.
    """
    if isinstance(body, list):
        return [drop_null_fields(item) for item in body]
    if isinstance(body, dict):
        return {key: value for key, value in body.items() if value is not None}
    return body


@dataclass
class ProcessResult:
    """
    Result of one processed cycle.

    Attributes:
        data: Extracted response data
        sync: Engine result, None when emission was skipped
        request: The request sent to the API
    """
    data: Any
    sync: Optional[SyncResult]
    request: ConnectorRequest

    @property
    def emitted(self) -> bool:
        return self.sync is not None


class TriggerProcessor:
    """
    Executes poll cycles for one API operation.

    Workflow per cycle:
    1. Resolve request parameters from the message body and the snapshot
    2. Call the operation through the connector
    3. Extract the records at the splitting key
    4. Wrap them with projected metadata
    5. Emit new records and the advanced snapshot
    """

    def __init__(
        self,
        api_spec: ApiSpec,
        connector: Connector,
        settings: TriggerSettings,
        api_settings: Optional[ApiSettings] = None,
        emitter: Optional[IncrementalEmitter] = None,
    ):
        """
        Initialize the processor.

        Args:
            api_spec: Parsed OpenAPI document
            connector: Connector executing the HTTP call
            settings: Trigger node settings
            api_settings: Server selection and static headers
            emitter: Emission engine (created when not given)

        Raises:
            TriggerConfigError: If the operation or a server cannot be resolved
        """
        if not settings.operation_id:
            raise TriggerConfigError("No operation_id configured for trigger")

        self.api_spec = api_spec
        self.connector = connector
        self.settings = settings
        self.api_settings = api_settings or ApiSettings()
        self.emitter = emitter or IncrementalEmitter()

        self.operation: OperationSpec = api_spec.find_operation(settings.operation_id)
        self.base_url = api_spec.resolve_server(
            self.api_settings.server, self.api_settings.other_server
        )
        if not self.base_url:
            raise TriggerConfigError(
                f"No server URL for {settings.operation_id}: the API document declares "
                f"none and no other_server is configured"
            )

    def resolve_parameters(self, body: Any, snapshot: Snapshot) -> Dict[str, Any]:
        """
        Collect declared parameters from the message body.

        Only an object body carries parameters; a list or scalar body
        contributes none. When a sync parameter is configured and a
        watermark exists, the watermark is passed in that parameter so the
        API can filter too.
        """
        parameters = {}
        if isinstance(body, Mapping):
            for name in self.operation.parameter_names:
                if name in body:
                    parameters[name] = body[name]
        if self.settings.sync_param and snapshot.last_updated:
            parameters[self.settings.sync_param] = snapshot.last_updated
        return parameters

    def build_request(self, message: IncomingMessage, snapshot: Snapshot) -> ConnectorRequest:
        """
        Build the HTTP request for one cycle.

        Raises:
            TriggerConfigError: If a required or path parameter has no value
        """
        body = drop_null_fields(message.data)
        parameters = self.resolve_parameters(body, snapshot)

        missing = [
            param.name for param in self.operation.parameters
            if param.required and parameters.get(param.name) is None
        ]
        if missing:
            raise TriggerConfigError(
                f"Missing required parameter(s) {missing} for {self.operation.operation_id}"
            )

        locations = {param.name: param.location for param in self.operation.parameters}
        query: Dict[str, Any] = {}
        headers: Dict[str, str] = {}
        for name, value in parameters.items():
            location = locations.get(name, "query")
            if location == "header":
                headers[name] = str(value)
            elif location == "query":
                query[name] = value

        def substitute(match: "re.Match") -> str:
            name = match.group(1)
            if parameters.get(name) is None:
                raise TriggerConfigError(
                    f"Missing path parameter '{name}' for {self.operation.operation_id}"
                )
            return quote(str(parameters[name]), safe="")

        path = _PATH_PARAM.sub(substitute, self.operation.path)
        method = self.operation.method.upper()

        return ConnectorRequest(
            uri=self.base_url.rstrip("/") + path,
            method=method,
            headers=headers or None,
            body=None if method == "GET" else body,
            params=query or None,
            content_type=self.operation.request_content_type,
            metadata={"operation_id": self.operation.operation_id},
        )

    def call(self, request: ConnectorRequest) -> Any:
        """
        Execute the request and return the parsed payload.

        Raises:
            TriggerTransportError: If the call did not succeed
        """
        response = self.connector.fetch(request)
        if not response.ok:
            raise TriggerTransportError(
                response.error_message or f"HTTP {response.status_code}",
                status_code=response.status_code,
                uri=request.uri,
            )
        return response.payload

    async def process(
        self,
        message: IncomingMessage,
        snapshot: Snapshot,
        emit: EmitFn,
    ) -> ProcessResult:
        """
        Run one poll cycle.

        Args:
            message: Inbound message (body parameters and metadata)
            snapshot: Watermark, updated in place by the engine
            emit: Async sink callback

        Returns:
            ProcessResult; with skip_snapshot the extracted data is returned
            and nothing is emitted

        Raises:
            TriggerTransportError: If the API call fails
            Exception: Whatever the emit callback raises
        """
        logger.info(f"Incoming message data={message.data} metadata={message.metadata}")
        logger.info(f"Snapshot {snapshot.to_dict()}")
        logger.debug(f"Message headers {message.headers}")

        request = self.build_request(message, snapshot)
        logger.info(
            f"Call params operation={self.operation.operation_id} method={request.method} "
            f"uri={request.uri} params={request.params} spec=[omitted]"
        )

        # requests blocks; run it off the event loop
        response = await asyncio.to_thread(self.call, request)

        envelope = Envelope(
            metadata=project_metadata(message.metadata),
            data=extract_records(self.settings.array_splitting_key, response),
        )

        if self.settings.skip_snapshot:
            logger.info("skip_snapshot set, returning data without emitting")
            return ProcessResult(data=envelope.data, sync=None, request=request)

        sync = await self.emitter.synchronize(
            envelope,
            snapshot,
            self.settings.snapshot_key,
            self.settings.standard_snapshot_key,
            emit,
        )
        return ProcessResult(data=envelope.data, sync=sync, request=request)
