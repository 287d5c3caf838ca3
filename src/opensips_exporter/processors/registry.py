"""Registry of statistics processors.

Every catalog registers its processor constructor under each statistic
short name it knows and under its subsystem sentinel key
(``"<subsystem>:"``). A scrape only uses the sentinel keys: one processor
per subsystem present in the snapshot. The short-name keys let a single
statistic be traced back to the subsystem that exports it.

The registry is filled once during startup and sealed before the first
scrape, after which it is only read.
"""

import logging
from typing import Callable, Dict, Iterable, Iterator, List, Optional

from opensips_exporter.exceptions import RegistrationError
from opensips_exporter.processors.catalog import Catalog
from opensips_exporter.processors.processor import Processor
from opensips_exporter.statistics import Snapshot, Statistic

logger = logging.getLogger(__name__)

ProcessorConstructor = Callable[[Snapshot], Processor]


def sentinel_key(subsystem: str) -> str:
    """Registry key resolving to the processor of a whole subsystem."""
    return f"{subsystem}:"


class ProcessorRegistry:
    """Mapping of dispatch keys to processor constructors.

    Example:
        >>> registry = ProcessorRegistry()
        >>> registry.register_catalog(build_core_catalog())
        >>> registry.seal()
        >>> processors = registry.resolve(snapshot)
    """

    def __init__(self) -> None:
        self._constructors: Dict[str, ProcessorConstructor] = {}
        self._sentinels: List[str] = []
        self._sealed = False

    def register(self, key: str, constructor: ProcessorConstructor) -> None:
        """Register ``constructor`` under ``key``.

        Registering an equal constructor again is a no-op.

        Raises:
            RegistrationError: If the registry is sealed or ``key`` is
                already bound to a different constructor.
        """
        if self._sealed:
            raise RegistrationError(key, "registry is sealed")

        existing = self._constructors.get(key)
        if existing is not None:
            if existing == constructor:
                return
            raise RegistrationError(
                key, f"already registered to {_describe_constructor(existing)}"
            )

        self._constructors[key] = constructor
        if key.endswith(":"):
            self._sentinels.append(key)

    def register_catalog(self, catalog: Catalog) -> None:
        """Register a catalog's processor under its short names and sentinel."""
        for short_name in catalog:
            self.register(short_name, catalog.processor)
        self.register(sentinel_key(catalog.subsystem), catalog.processor)
        logger.debug(
            f"Registered subsystem '{catalog.subsystem}' with {len(catalog)} statistics"
        )

    def seal(self) -> None:
        """Reject further registrations."""
        self._sealed = True

    @property
    def is_sealed(self) -> bool:
        return self._sealed

    @property
    def subsystems(self) -> List[str]:
        """Registered subsystems in registration order."""
        return [key[:-1] for key in self._sentinels]

    def lookup(self, key: str) -> Optional[ProcessorConstructor]:
        return self._constructors.get(key)

    def recognizes(self, statistic: Statistic) -> bool:
        """Whether a registered catalog exports ``statistic``."""
        constructor = self._constructors.get(sentinel_key(statistic.subsystem))
        return constructor is not None and self._constructors.get(statistic.name) == constructor

    def resolve(self, snapshot: Snapshot) -> List[Processor]:
        """Build one processor per registered subsystem present in ``snapshot``.

        Subsystems without a registered processor are skipped.
        """
        processors = []
        seen = set()
        for statistic in snapshot.values():
            if statistic.subsystem in seen:
                continue
            seen.add(statistic.subsystem)
            constructor = self._constructors.get(sentinel_key(statistic.subsystem))
            if constructor is not None:
                processors.append(constructor(snapshot))
        return processors

    def processors(self) -> List[Processor]:
        """Build one processor per registered subsystem over an empty snapshot.

        Used to describe the complete metric set without data.
        """
        return [self._constructors[key]({}) for key in self._sentinels]

    def __contains__(self, key: object) -> bool:
        return key in self._constructors

    def __iter__(self) -> Iterator[str]:
        return iter(self._constructors)

    def __len__(self) -> int:
        return len(self._constructors)


def build_registry(catalogs: Iterable[Catalog]) -> ProcessorRegistry:
    """Register each catalog once and seal the resulting registry.

    Raises:
        RegistrationError: If two catalogs claim the same key.
    """
    registry = ProcessorRegistry()
    for catalog in catalogs:
        registry.register_catalog(catalog)
    registry.seal()
    logger.info(f"Processor registry ready: {', '.join(registry.subsystems) or 'no subsystems'}")
    return registry


def _describe_constructor(constructor: ProcessorConstructor) -> str:
    owner = getattr(constructor, "__self__", None)
    if isinstance(owner, Catalog):
        return f"subsystem '{owner.subsystem}'"
    return repr(constructor)
