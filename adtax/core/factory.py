"""Component Factory for strategy instantiation.

The Factory Pattern allows the application to instantiate
different strategy implementations at runtime based on
configuration or environment variables.
"""

import logging

from adtax.core.config import Settings, get_settings
from adtax.db.session import get_session_maker
from adtax.interfaces.naming import BaseNameComposer, BaseNameParser, BaseUsageAggregator
from adtax.interfaces.store import BaseKeyValueStore
from adtax.strategies.naming_engine import NameComposer, NameParser, UsageAggregator
from adtax.strategies.stores import InMemoryKeyValueStore, SQLKeyValueStore

logger = logging.getLogger(__name__)


class ComponentFactory:
    """Factory for creating component instances based on configuration.

    Example:
        ```python
        settings = get_settings()
        factory = ComponentFactory(settings)

        store = factory.get_store()
        composer = factory.get_composer()
        parser = factory.get_parser()
        aggregator = factory.get_aggregator()
        ```
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the factory with optional settings.

        Args:
            settings: Application settings. If None, uses global settings.
        """
        self._settings = settings or get_settings()
        self._store_cache: BaseKeyValueStore | None = None
        self._composer_cache: BaseNameComposer | None = None
        self._parser_cache: BaseNameParser | None = None
        self._aggregator_cache: BaseUsageAggregator | None = None

    def get_store(self, store_type: str | None = None) -> BaseKeyValueStore:
        """Get a key-value store instance based on the specified type.

        Args:
            store_type: The store type to instantiate. If None, uses settings.

        Returns:
            A BaseKeyValueStore implementation instance.

        Raises:
            ValueError: If the store type is unknown.
        """
        if self._store_cache is None or store_type is not None:
            store_type = store_type or self._settings.store_type

            logger.info(f"Instantiating key-value store: {store_type}")

            match store_type:
                case "sql":
                    self._store_cache = SQLKeyValueStore(
                        session_maker=get_session_maker(self._settings),
                        settings=self._settings,
                    )
                case "memory":
                    self._store_cache = InMemoryKeyValueStore()
                case _:
                    raise ValueError(
                        f"Unknown store type: {store_type}. "
                        f"Valid options: 'sql', 'memory'"
                    )

        return self._store_cache

    def get_composer(self) -> BaseNameComposer:
        """Get the file name composer."""
        if self._composer_cache is None:
            self._composer_cache = NameComposer()
        return self._composer_cache

    def get_parser(self) -> BaseNameParser:
        """Get the file name parser."""
        if self._parser_cache is None:
            self._parser_cache = NameParser()
        return self._parser_cache

    def get_aggregator(self) -> BaseUsageAggregator:
        """Get the usage aggregator."""
        if self._aggregator_cache is None:
            self._aggregator_cache = UsageAggregator()
        return self._aggregator_cache

    def clear_cache(self) -> None:
        """Clear all cached component instances.

        This forces new instances to be created on next access.
        Useful for testing or when settings change.
        """
        self._store_cache = None
        self._composer_cache = None
        self._parser_cache = None
        self._aggregator_cache = None
        logger.debug("Component factory cache cleared")
