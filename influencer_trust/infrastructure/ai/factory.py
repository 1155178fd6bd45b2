"""Factory for creating and managing completion providers."""

from typing import Dict, Type

from ...domain.ports.completion_provider import CompletionProvider
from .perplexity_adapter import PerplexityAdapter, PerplexityConfig


class CompletionProviderFactory:
    """Creates the completion provider and owns its lifecycle."""

    _providers: Dict[str, Type[CompletionProvider]] = {"perplexity": PerplexityAdapter}

    def __init__(self):
        """Initialize the factory."""
        self._instances: Dict[str, CompletionProvider] = {}

    async def create_provider(
        self,
        name: str,
        **kwargs
    ) -> CompletionProvider:
        """Create and initialize a provider instance.

        Args:
            name: Provider name
            **kwargs: Provider-specific configuration

        Returns:
            Initialized provider instance, reused on later calls

        Raises:
            ValueError: If provider not found
        """
        if name not in self._providers:
            raise ValueError(f"Provider '{name}' not found")

        if name not in self._instances:
            if "config" not in kwargs:
                kwargs["config"] = PerplexityConfig.from_env()
            provider = self._providers[name](**kwargs)
            await provider.initialize()
            self._instances[name] = provider

        return self._instances[name]

    async def shutdown(self) -> None:
        """Shutdown all provider instances."""
        for provider in self._instances.values():
            await provider.shutdown()
        self._instances.clear()
