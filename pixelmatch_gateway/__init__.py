from .app import GatewayConfig, create_app

__all__ = ["GatewayConfig", "create_app"]
