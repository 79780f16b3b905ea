"""Listeners de eventos de falha: logging, callbacks e OpenTelemetry."""

import logging
from collections import defaultdict
from collections.abc import Callable, Mapping
from typing import Any

from opentelemetry import metrics as otel_metrics

logger = logging.getLogger(__name__)

EventCallback = Callable[[Mapping[str, Any]], None]


def _describe(payload: Mapping[str, Any]) -> tuple[str, str, str, str]:
    action = payload.get("action")
    action_name = getattr(action, "value", action)
    error = payload.get("error")
    return str(payload.get("key")), str(action_name), type(error).__name__, str(error)


class LogListener:
    """Listener que registra eventos via logging.

    Attributes:
        level: Nível de log usado para os eventos
    """

    def __init__(self, level: int = logging.ERROR, log: logging.Logger | None = None) -> None:
        """Inicializa o listener.

        Args:
            level: Nível de log (default: ERROR)
            log: Logger a usar (default: logger deste módulo)
        """
        self.level = level
        self._logger = log if log is not None else logger

    def handle(self, event: str, payload: Mapping[str, Any]) -> None:
        """Registra o evento."""
        key, action, error_type, message = _describe(payload)
        self._logger.log(
            self.level,
            "%s: key=%s action=%s error=%s (%s)",
            event,
            key,
            action,
            message,
            error_type,
        )


class CallbackListener:
    """Listener que despacha eventos para callbacks registrados.

    Example:
        ```python
        listener = CallbackListener()
        listener.on("cache_failure", lambda payload: sentry.capture(payload["error"]))
        ```
    """

    def __init__(self) -> None:
        self._callbacks: dict[str, list[EventCallback]] = defaultdict(list)

    def on(self, event: str, callback: EventCallback) -> None:
        """Registra callback para um evento.

        Args:
            event: Nome do evento
            callback: Função chamada com o payload
        """
        self._callbacks[event].append(callback)

    def handle(self, event: str, payload: Mapping[str, Any]) -> None:
        """Chama os callbacks do evento, na ordem de registro."""
        for callback in self._callbacks.get(event, ()):
            callback(payload)


class OpenTelemetryListener:
    """Listener que conta falhas usando OpenTelemetry.

    Métricas exportadas:
    - cache.failures (counter): Número de falhas contidas, com atributos
      ``event``, ``action`` e ``error_type``

    Example:
        ```python
        from opentelemetry.sdk.metrics import MeterProvider
        from opentelemetry import metrics

        metrics.set_meter_provider(MeterProvider())

        notifier = Notifier([OpenTelemetryListener()])
        ```
    """

    def __init__(self, meter_name: str = "faulty_cache") -> None:
        """Inicializa métricas OpenTelemetry.

        Args:
            meter_name: Nome do meter para agrupar métricas
        """
        meter = otel_metrics.get_meter(meter_name)
        self._failures_counter = meter.create_counter(
            "cache.failures",
            description="Número de falhas de cache contidas",
            unit="1",
        )

    def handle(self, event: str, payload: Mapping[str, Any]) -> None:
        """Registra falha."""
        _, action, error_type, _ = _describe(payload)
        self._failures_counter.add(1, {"event": event, "action": action, "error_type": error_type})
