"""Application bootstrap and entry point for Spotify Bridge."""

import logging
from dataclasses import dataclass
from typing import Optional

from .auth.auth_manager import AuthLifecycleManager
from .auth.credential_store import CredentialStore, get_credential_store
from .auth.oauth_callback_server import CallbackServer
from .client import CallExecutor, RestTransport, SpotifyClient
from .core.config import BridgeConfig, get_config
from .utils.errors import SpotifyBridgeError, format_error

logger = logging.getLogger(__name__)


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the root logger once for the process."""
    logging.basicConfig(
        level=level or get_config().log_level,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )


@dataclass
class SpotifyBridge:
    """Everything a running application needs, wired together."""

    config: BridgeConfig
    manager: AuthLifecycleManager
    callback_server: CallbackServer
    client: SpotifyClient

    def start(self) -> None:
        """Start the callback server and make sure we are logged in."""
        success, error_msg = self.callback_server.start()
        if not success:
            raise SpotifyBridgeError(f"Login callback server unavailable: {error_msg}")
        self.manager.initial_login()

    def stop(self) -> None:
        self.callback_server.stop()


def create_bridge(
    config: Optional[BridgeConfig] = None,
    credential_store: Optional[CredentialStore] = None,
) -> SpotifyBridge:
    """Build the application from configuration."""
    config = config or get_config()
    store = credential_store or get_credential_store()
    credential = store.load()

    manager = AuthLifecycleManager(
        credential,
        credential_store=store,
        required_scopes=config.required_scopes,
        login_timeout=config.login_timeout,
    )
    executor = CallExecutor(
        RestTransport(config.api_base_url),
        credential,
        auth=manager,
        max_attempts=config.max_attempts,
    )
    return SpotifyBridge(
        config=config,
        manager=manager,
        callback_server=CallbackServer(manager, config.redirect_uri),
        client=SpotifyClient(executor),
    )


def main() -> None:
    """Entry point: log in and report the current user."""
    setup_logging()
    bridge = create_bridge()
    logger.debug(f"Configuration: {bridge.config.get_environment_summary()}")
    try:
        bridge.start()
        user = bridge.client.get_current_user()
        logger.info(f"Logged in as {user.get('display_name') or user.get('id')}")
    except SpotifyBridgeError as e:
        logger.error(format_error("Spotify Bridge startup", e))
        raise SystemExit(1)
    finally:
        bridge.stop()


if __name__ == "__main__":
    main()
