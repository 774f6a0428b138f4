"""Application bootstrap and runtime wiring for the intent dispatcher."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from loguru import logger

from intentbot.core.dispatcher import Dispatcher
from intentbot.nlu.dialogflow import DialogflowClient
from intentbot.telemetry.inmemory import InMemoryTelemetry
from intentbot.telemetry.prometheus import PrometheusConfig, PrometheusTelemetry

if TYPE_CHECKING:
    from collections.abc import Iterable

    from intentbot.config.schema import Config
    from intentbot.core.ports import DispatchObserver, Intent, NLUPort, ReplyPort
    from intentbot.telemetry.base import TelemetryPort


def configure_logging(level: str = "INFO") -> None:
    """Replace loguru's default sink with one stderr sink at ``level``."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
        ),
    )


def build_telemetry(config: "Config") -> "TelemetryPort":
    """Prometheus telemetry when enabled in config, in-memory otherwise."""
    if not config.telemetry.prometheus_enabled:
        return InMemoryTelemetry()
    telemetry = PrometheusTelemetry(
        PrometheusConfig(
            enabled=True,
            host=config.telemetry.host,
            port=config.telemetry.port,
        )
    )
    telemetry.start()
    return telemetry


def build_nlu(config: "Config") -> "NLUPort | None":
    """Dialogflow client for a valid token, None otherwise."""
    nlu_cfg = config.nlu
    if not nlu_cfg.token_valid:
        return None
    return DialogflowClient(
        nlu_cfg.client_token,
        base_url=nlu_cfg.base_url,
        api_version=nlu_cfg.api_version,
        lang=nlu_cfg.lang,
        timeout_seconds=nlu_cfg.timeout_seconds,
    )


def build_dispatcher(
    config: "Config",
    *,
    reply: "ReplyPort",
    telemetry: "TelemetryPort | None" = None,
    nlu: "NLUPort | None" = None,
    intents: "Iterable[Intent]" = (),
    observer: "DispatchObserver | None" = None,
) -> Dispatcher:
    """Build a dispatcher from config.

    An explicit ``nlu`` wins over the configured Dialogflow client. Without
    either, the dispatcher is disabled and every registration is refused.
    """
    nlu = nlu if nlu is not None else build_nlu(config)
    if nlu is None:
        logger.warning("NLU client token is missing or invalid, intelligence dispatch is disabled")

    dispatcher_cfg = config.dispatcher
    dispatcher = Dispatcher(
        nlu,
        reply=reply,
        telemetry=telemetry,
        workers=dispatcher_cfg.workers,
        queue_maxsize=dispatcher_cfg.queue_maxsize,
        query_timeout=dispatcher_cfg.query_timeout_seconds,
        on_query_failure=dispatcher_cfg.on_query_failure,
        query_failure_message=dispatcher_cfg.query_failure_message,
        diagnostics_enabled=config.logging.diagnostics_enabled,
        observer=observer,
    )
    for intent in intents:
        dispatcher.register_intent(intent)
    if dispatcher.enabled:
        logger.info(
            "Intent dispatcher ready: {} intents, {} workers",
            len(dispatcher.registry),
            dispatcher.worker_count,
        )
    return dispatcher
