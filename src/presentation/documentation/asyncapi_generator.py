"""AsyncAPI 3.0 document generation for WebSocket controllers.

Every registered controller contributes, per namespace:

    subscribed event  channel ``{ns}_{event}`` + operation ``receive_{event}``
    acknowledged      reply channel ``{ns}_{event}_ack`` (needs an ack schema)
    published event   channel ``{ns}_{event}`` + operation ``send_{event}``

Message payloads are the pydantic JSON Schemas of the declared models;
nested models are hoisted to ``components.schemas``. Events without a schema
get ``{"type": "object"}``.

Usage:
    generator = get_asyncapi_generator()
    generator.register_controller(chat_controller)
    document = generator.generate_spec(
        title="Cinema WebSocket API",
        version="1.0.0",
        server_url="ws://localhost:5001",
    )
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any

import yaml
from pydantic import BaseModel

from src.core.container import get_logger
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.presentation.openapi.json_schema import render_models
from src.presentation.websocket.controller import (
    WebSocketController,
    WebSocketControllerMetadata,
)
from src.presentation.websocket.metadata import EventEmitterMetadata, EventListenerMetadata

ASYNCAPI_VERSION = "3.0.0"
DEFAULT_SERVER_URL = "ws://localhost:5001"
_SERVER_URL = re.compile(r"^(wss?)://([^/]+)(/.*)?$")
_INVALID_ID_CHARS = re.compile(r"[^A-Za-z0-9_]")
_EMPTY_PAYLOAD: dict[str, Any] = {"type": "object"}


def sanitize_id(value: str) -> str:
    """Channel/message/operation id (``/chat_chat:join`` -> ``_chat_chat_join``)."""
    return _INVALID_ID_CHARS.sub("_", value)


def parse_server_url(url: str) -> dict[str, str]:
    """Split a WebSocket URL into AsyncAPI ``protocol``/``host``/``pathname``.

    Examples:
        >>> parse_server_url("wss://api.example.com/ws")
        {'protocol': 'wss', 'host': 'api.example.com', 'pathname': '/ws'}
        >>> parse_server_url("localhost:5001")
        {'protocol': 'ws', 'host': 'localhost:5001'}
    """
    match = _SERVER_URL.match(url)
    if match:
        parsed = {"protocol": match.group(1), "host": match.group(2)}
        if match.group(3):
            parsed["pathname"] = match.group(3)
        return parsed
    host = re.sub(r"^[a-z]+://", "", url) or "localhost:5001"
    return {"protocol": "ws", "host": host}


@dataclass
class _Document:
    """Mutable state of one ``generate_spec`` call."""

    channels: dict[str, Any] = field(default_factory=dict)
    operations: dict[str, Any] = field(default_factory=dict)
    messages: dict[str, Any] = field(default_factory=dict)
    schemas: dict[str, Any] = field(default_factory=dict)
    payloads: dict[type[BaseModel], dict[str, Any]] = field(default_factory=dict)


class AsyncAPIGenerator:
    """Aggregate WebSocket controllers into an AsyncAPI document.

    Controllers are keyed by namespace path; registering another controller
    for the same path replaces the previous one. Documents are rebuilt from
    the registered controllers on every call.
    """

    def __init__(self, logger: LoggerProtocol | None = None) -> None:
        self._controllers: dict[str, WebSocketControllerMetadata] = {}
        self._logger = logger or get_logger()

    def register_controller(self, controller: WebSocketController) -> None:
        metadata = controller.get_metadata()
        if metadata.namespace is None:
            self._logger.warning(
                "Controller has no namespace, not documented",
                controller=metadata.controller,
            )
            return
        self._controllers[metadata.namespace.path] = metadata

    def get_controllers(self) -> dict[str, WebSocketControllerMetadata]:
        return dict(self._controllers)

    def clear(self) -> None:
        self._controllers.clear()

    # -------------------------------------------------------------------------
    # Generation
    # -------------------------------------------------------------------------

    def generate_spec(
        self,
        title: str,
        version: str,
        description: str | None = None,
        server_url: str | None = None,
    ) -> dict[str, Any]:
        """Build the AsyncAPI document of every registered controller."""
        payloads, definitions = render_models(self._payload_models(), self._logger)
        document = _Document(schemas=definitions, payloads=payloads)
        for path, metadata in self._controllers.items():
            self._process_controller(document, path, metadata)

        info: dict[str, Any] = {"title": title, "version": version}
        if description:
            info["description"] = description

        return {
            "asyncapi": ASYNCAPI_VERSION,
            "info": info,
            "servers": {
                "production": {
                    **parse_server_url(server_url or DEFAULT_SERVER_URL),
                    "description": "WebSocket server",
                }
            },
            "channels": document.channels,
            "operations": document.operations,
            "components": {
                "messages": document.messages,
                "schemas": document.schemas,
            },
        }

    def to_json(
        self,
        title: str,
        version: str,
        description: str | None = None,
        server_url: str | None = None,
    ) -> str:
        return json.dumps(
            self.generate_spec(title, version, description, server_url), indent=2
        )

    def to_yaml(
        self,
        title: str,
        version: str,
        description: str | None = None,
        server_url: str | None = None,
    ) -> str:
        """YAML rendering of ``generate_spec`` (key order preserved)."""
        return yaml.safe_dump(
            self.generate_spec(title, version, description, server_url),
            sort_keys=False,
            allow_unicode=True,
        )

    def _payload_models(self) -> list[type[BaseModel]]:
        models: list[type[BaseModel]] = []
        for metadata in self._controllers.values():
            for validation in metadata.validation.values():
                models.extend(m for m in (validation.data, validation.ack) if m is not None)
            models.extend(emit.validation for emit in metadata.emits if emit.validation)
        return models

    def _process_controller(
        self, document: _Document, path: str, metadata: WebSocketControllerMetadata
    ) -> None:
        namespace_description = metadata.namespace.description if metadata.namespace else None
        for event in metadata.events:
            validation = metadata.validation.get(event.method_name)
            self._receive_operation(
                document,
                path,
                event,
                data=validation.data if validation else None,
                ack=validation.ack if validation else None,
                namespace_description=namespace_description,
            )
        for emit in metadata.emits:
            self._send_operation(document, path, emit, namespace_description)

    def _receive_operation(
        self,
        document: _Document,
        path: str,
        event: EventListenerMetadata,
        *,
        data: type[BaseModel] | None,
        ack: type[BaseModel] | None,
        namespace_description: str | None,
    ) -> None:
        name = event.event_name
        channel_id = self._add_message(
            document,
            path,
            name,
            event.description,
            self._payload(document, data),
            namespace_description,
        )

        operation: dict[str, Any] = {
            "action": "receive",
            "channel": {"$ref": f"#/channels/{channel_id}"},
            "title": f"Receive {name}",
            "summary": event.description or f"Receive {name} from client",
        }

        if event.acknowledgment and ack is not None:
            ack_message_id = sanitize_id(f"{name}_ack_message")
            ack_channel_id = sanitize_id(f"{path}_{name}_ack")
            document.messages[ack_message_id] = {
                "name": f"{name}Ack",
                "title": f"{name} Acknowledgment",
                "description": f"Acknowledgment response for {name}",
                "payload": self._payload(document, ack),
            }
            document.channels[ack_channel_id] = {
                "address": f"{path}/{name}/ack",
                "description": f"Acknowledgment channel for {name}",
                "messages": {
                    ack_message_id: {"$ref": f"#/components/messages/{ack_message_id}"}
                },
            }
            operation["reply"] = {"channel": {"$ref": f"#/channels/{ack_channel_id}"}}

        document.operations[sanitize_id(f"receive_{name}")] = operation

    def _send_operation(
        self,
        document: _Document,
        path: str,
        emit: EventEmitterMetadata,
        namespace_description: str | None,
    ) -> None:
        name = emit.event_name
        channel_id = self._add_message(
            document,
            path,
            name,
            emit.description,
            self._payload(document, emit.validation),
            namespace_description,
        )
        document.operations[sanitize_id(f"send_{name}")] = {
            "action": "send",
            "channel": {"$ref": f"#/channels/{channel_id}"},
            "title": f"Send {name}",
            "summary": emit.description or f"Send {name} to client",
        }

    def _add_message(
        self,
        document: _Document,
        path: str,
        name: str,
        description: str | None,
        payload: dict[str, Any],
        namespace_description: str | None,
    ) -> str:
        channel_id = sanitize_id(f"{path}_{name}")
        message_id = sanitize_id(f"{name}_message")

        message: dict[str, Any] = {"name": name, "title": description or name}
        if description:
            message["description"] = description
        message["payload"] = payload
        document.messages[message_id] = message

        channel = document.channels.setdefault(
            channel_id,
            {
                "address": f"{path}/{name}",
                **(
                    {"description": description or namespace_description}
                    if description or namespace_description
                    else {}
                ),
                "messages": {},
            },
        )
        channel["messages"][message_id] = {"$ref": f"#/components/messages/{message_id}"}
        return channel_id

    def _payload(self, document: _Document, model: type[BaseModel] | None) -> dict[str, Any]:
        if model is None or model not in document.payloads:
            return dict(_EMPTY_PAYLOAD)
        return dict(document.payloads[model])
