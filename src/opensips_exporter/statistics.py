"""Raw OpenSIPS statistics as delivered by the management interface.

OpenSIPS names every statistic ``<subsystem>:<name>``, e.g.
``core:rcv_requests`` or ``shmem:used_size``. A snapshot maps those full
names to :class:`Statistic` records and is rebuilt for every scrape.
"""

from dataclasses import dataclass
from typing import Dict, Mapping, Union

from opensips_exporter.exceptions import StatisticError

SEPARATOR = ":"


@dataclass(frozen=True)
class Statistic:
    """A single named statistic value reported by OpenSIPS."""

    subsystem: str
    name: str
    value: float

    @property
    def full_name(self) -> str:
        return f"{self.subsystem}{SEPARATOR}{self.name}"

    @classmethod
    def parse(cls, full_name: str, value: Union[int, float, str]) -> "Statistic":
        """Build a statistic from its full name and raw value.

        The name is split on the first separator only; OpenSIPS module
        statistics may themselves contain colons.

        Args:
            full_name: Statistic name such as ``core:rcv_requests``.
            value: Numeric value, or its string form.

        Returns:
            Parsed statistic.

        Raises:
            StatisticError: If the name has no subsystem part or the value
                is not numeric.
        """
        subsystem, sep, name = full_name.partition(SEPARATOR)
        if not sep or not subsystem or not name:
            raise StatisticError(full_name)
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise StatisticError(
                full_name, f"Non-numeric value for {full_name!r}: {value!r}"
            )
        return cls(subsystem=subsystem, name=name, value=number)


Snapshot = Mapping[str, Statistic]


def snapshot_from_values(values: Mapping[str, Union[int, float, str]]) -> Dict[str, Statistic]:
    """Build a snapshot from a plain ``{full_name: value}`` mapping.

    Example:
        >>> snapshot = snapshot_from_values({"core:rcv_requests": 10})
        >>> snapshot["core:rcv_requests"].name
        'rcv_requests'
    """
    snapshot = {}
    for full_name, value in values.items():
        statistic = Statistic.parse(full_name, value)
        snapshot[statistic.full_name] = statistic
    return snapshot
