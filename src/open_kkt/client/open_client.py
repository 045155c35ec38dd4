"""
Open API client
Command-level facade over the request engine
"""

from typing import Any, Dict, Mapping, Optional, Union

from open_kkt.cache.token_store import KeyValueStore, TokenStore
from open_kkt.client.http_client import Transport
from open_kkt.client.request_engine import Credentials, RequestEngine
from open_kkt.config.open_api_config import OpenApiConfig
from open_kkt.exceptions import ValidationError
from open_kkt.models.requests import (
    CommandFilter,
    CommandListParams,
    CommandParams,
    CommandStatusParams,
    CommandType,
    ShiftCommand,
    StateSystemParams,
)
from open_kkt.utils.logger import LogSink


class OpenClient:
    """
    SDK entry point for the remote cash register

    Every method assembles a parameter set (app_id, a fresh nonce and the
    current token) and hands it to RequestEngine.request; token refresh,
    signing and status handling all happen there.

    Example:
        >>> client = OpenClient(
        ...     account="https://check.business.ru/open-api/v1/",
        ...     app_id="42",
        ...     secret="secret",
        ... )
        >>> client.open_shift("Ivanova")
        >>> command_id = client.print_check(check)["command_id"]
        >>> client.data_command_by_id(command_id)
    """

    def __init__(
        self,
        account: str,
        app_id: str,
        secret: str,
        transport: Optional[Transport] = None,
        cache: Optional[KeyValueStore] = None,
        log: Optional[LogSink] = None,
        engine: Optional[RequestEngine] = None,
    ) -> None:
        """
        Create a new client

        Args:
            account: Open API account URL
            app_id: app_id of the integration
            secret: Secret key of the integration
            transport: HTTP capability (requests-based if omitted)
            cache: Backing store for the token (file cache if omitted)
            log: Log sink (SDK Logger if omitted)
            engine: Pre-built engine; other collaborators are then ignored
        """
        self._engine = engine or RequestEngine(
            Credentials(account, app_id, secret),
            transport=transport,
            token_store=TokenStore(cache) if cache is not None else None,
            log=log,
        )

    @classmethod
    def from_config(cls, config: OpenApiConfig) -> "OpenClient":
        """Create a client from resolved configuration"""
        engine = RequestEngine.from_config(config)
        return cls(config.account, config.app_id, config.secret, engine=engine)

    @property
    def engine(self) -> RequestEngine:
        return self._engine

    def request(
        self, method: str, resource: str, params: Optional[Mapping[str, Any]] = None
    ) -> Dict[str, Any]:
        """Send an arbitrary signed request"""
        return self._engine.request(method, resource, params)

    def get_state_system(self) -> Dict[str, Any]:
        """Query the state of the cash register system"""
        params = StateSystemParams(**self._auth())
        return self._engine.request("GET", "StateSystem", params)

    def open_shift(self, author: str = "name") -> Dict[str, Any]:
        """Open a shift on the register"""
        return self._command(CommandType.OPEN_SHIFT, ShiftCommand(author=author))

    def close_shift(self, author: str = "name") -> Dict[str, Any]:
        """Close the current shift on the register"""
        return self._command(CommandType.CLOSE_SHIFT, ShiftCommand(author=author))

    def print_check(self, command: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Print a sale receipt

        Args:
            command: Receipt payload (goods, payments, customer contacts...)

        Returns:
            Response carrying the command_id of the queued command
        """
        return self._command(CommandType.PRINT_CHECK, self._receipt(command))

    def print_purchase_return(self, command: Mapping[str, Any]) -> Dict[str, Any]:
        """Print a sale return receipt"""
        return self._command(CommandType.PRINT_PURCHASE_RETURN, self._receipt(command))

    def data_command_by_id(self, command_id: Union[str, int]) -> Dict[str, Any]:
        """Look up the status of a previously submitted command"""
        command_id = str(command_id).strip()
        if not command_id or "/" in command_id:
            raise ValidationError("A valid command_id is required", field="command_id")
        params = CommandStatusParams(**self._auth())
        return self._engine.request("GET", f"Command/{command_id}", params)

    def data_commands(self, command_filter: Optional[CommandFilter] = None) -> Dict[str, Any]:
        """List submitted commands, optionally filtered by dates, page or c_num"""
        filters = command_filter.to_params() if command_filter is not None else {}
        params = CommandListParams(**self._auth(), **filters)
        return self._engine.request("GET", "Command", params)

    def close(self) -> None:
        self._engine.close()

    def __enter__(self) -> "OpenClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _auth(self) -> Dict[str, str]:
        return {
            "app_id": self._engine.app_id,
            "nonce": self._engine.new_nonce(),
            "token": self._engine.token,
        }

    def _command(
        self, command_type: CommandType, command: Union[ShiftCommand, Dict[str, Any]]
    ) -> Dict[str, Any]:
        params = CommandParams(**self._auth(), command=command, type=command_type)
        return self._engine.request("POST", "Command", params)

    @staticmethod
    def _receipt(command: Mapping[str, Any]) -> Dict[str, Any]:
        if not isinstance(command, Mapping) or not command:
            raise ValidationError("Receipt command must be a non-empty mapping", field="command")
        return dict(command)
