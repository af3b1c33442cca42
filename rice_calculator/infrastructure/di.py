"""Dependency Injection container."""

from typing import Optional

from rice_calculator.adapters.egress.favro_egress import FavroEgressAdapter
from rice_calculator.adapters.ingress.favro_ingress import FavroIngressAdapter
from rice_calculator.application.score_handler import RiceScoreHandler
from rice_calculator.config import CalculatorConfig, build_calculator_config
from rice_calculator.domain.interfaces import IScorePublisher, IWebhookIngress


class DIContainer:
    """Simple dependency injection container."""

    def __init__(
        self,
        config: Optional[CalculatorConfig] = None,
        publisher: Optional[IScorePublisher] = None,
    ):
        """Initialize container.

        Args:
            config: Prebuilt configuration. Built from settings on first use
                when omitted.
            publisher: Score publisher override. Defaults to the Favro adapter.
        """
        self._config = config
        self._publisher = publisher
        self._webhook_ingress: Optional[IWebhookIngress] = None
        self._score_handler: Optional[RiceScoreHandler] = None

    def get_config(self) -> CalculatorConfig:
        """Get the validated configuration.

        Raises:
            ConfigurationError: If settings are missing or placeholders.
        """
        if self._config is None:
            self._config = build_calculator_config()
        return self._config

    def get_publisher(self) -> IScorePublisher:
        if self._publisher is None:
            self._publisher = FavroEgressAdapter(self.get_config())
        return self._publisher

    def get_webhook_ingress(self) -> IWebhookIngress:
        if self._webhook_ingress is None:
            self._webhook_ingress = FavroIngressAdapter(self.get_config())
        return self._webhook_ingress

    def get_score_handler(self) -> RiceScoreHandler:
        if self._score_handler is None:
            self._score_handler = RiceScoreHandler(
                config=self.get_config(),
                publisher=self.get_publisher(),
            )
        return self._score_handler


# Global container instance
_container: Optional[DIContainer] = None


def get_container() -> DIContainer:
    """Get global DI container instance.

    Returns:
        DIContainer instance.
    """
    global _container
    if _container is None:
        _container = DIContainer()
    return _container


def set_container(container: Optional[DIContainer]) -> None:
    """Replace the global container. ``None`` resets it."""
    global _container
    _container = container
