from connect_platform.config import Settings, require_secret_key
from connect_platform.providers.base import ProcessorGateway


def build_gateway(config: Settings) -> ProcessorGateway:
    """Build the configured processor gateway, failing fast on missing credentials."""
    if config.processor == "mock":
        from connect_platform.providers.mock_provider import MockProcessorGateway

        return MockProcessorGateway(
            failure_rate=config.mock_failure_rate,
            latency_ms=config.mock_latency_ms,
        )

    from connect_platform.providers.stripe_provider import StripeGateway

    return StripeGateway(
        secret_key=require_secret_key(config),
        api_version=config.stripe_api_version,
    )


__all__ = ["ProcessorGateway", "build_gateway"]
