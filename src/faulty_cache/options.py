"""
Proxy configuration.

Options are an immutable value object validated once at construction,
following the required-field rules of the fault tolerant proxy.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, fields
from types import SimpleNamespace
from typing import Any

from .exceptions import ConfigurationError
from .protocols import FailureNotifier

ERROR_NOTIFIER_MISSING = "notifier is required"
ERROR_UNKNOWN_OPTIONS = "Unknown options: {names}"


@dataclass(frozen=True)
class ProxyOptions:
    """Options for ``FaultTolerantProxy``.

    Attributes:
        notifier: Channel that receives ``cache_failure`` events
    """

    notifier: FailureNotifier | None = None

    def __post_init__(self) -> None:
        """Validate required options.

        Raises:
            ConfigurationError: If notifier is missing
        """
        if self.notifier is None:
            raise ConfigurationError(ERROR_NOTIFIER_MISSING)

    @classmethod
    def build(
        cls,
        configure: Callable[[SimpleNamespace], None] | None = None,
        **values: Any,
    ) -> "ProxyOptions":
        """Build options from keyword values and an optional configure callback.

        The callback receives a mutable draft pre-filled with ``values``
        and may set any option on it before the options are frozen.

        Args:
            configure: Callback to adjust the draft options
            **values: Option values

        Returns:
            Validated, immutable options

        Raises:
            ConfigurationError: If an option is unknown or a required one is missing

        Example:
            ```python
            options = ProxyOptions.build(lambda o: setattr(o, "notifier", notifier))
            ```
        """
        names = {f.name for f in fields(cls)}
        _reject_unknown(values.keys(), names)

        draft = SimpleNamespace(**{f.name: values.get(f.name, f.default) for f in fields(cls)})
        if configure is not None:
            configure(draft)
            _reject_unknown(vars(draft).keys(), names)

        return cls(**{name: getattr(draft, name) for name in names})


def _reject_unknown(given: Iterable[str], names: set[str]) -> None:
    """Raise if any option name is not a ProxyOptions field."""
    unknown = sorted(set(given) - names)
    if unknown:
        raise ConfigurationError(ERROR_UNKNOWN_OPTIONS.format(names=", ".join(unknown)))
