"""Cross-platform route probing with fallback.

The executor tries the detected platform first, then every other launch
platform in a fixed order, and finally a plain Pancake lookup. A platform
answer is accepted as soon as it does not need fallback.
"""

from __future__ import annotations

from functools import partial

import structlog

from launchroute.config import DEFAULT_CONFIG, RouteQueryConfig
from launchroute.errors import SKIP_TO_UNKNOWN_KINDS, classify_error
from launchroute.models.route import RouteFetchResult, TokenPlatform, default_pancake_route
from launchroute.platforms.registry import PlatformRegistry
from launchroute.retry import retry_async
from launchroute.tracer import RouteTracer

logger = structlog.get_logger()

# Probed after the initial platform, duplicates skipped
PLATFORM_FALLBACK_ORDER: tuple[TokenPlatform, ...] = (
    TokenPlatform.FOUR,
    TokenPlatform.XMODE,
    TokenPlatform.FLAP,
    TokenPlatform.LUNA,
    TokenPlatform.UNKNOWN,
)


def build_probe_order(initial: TokenPlatform) -> list[TokenPlatform]:
    """Platforms to probe, in order, for a token first guessed as `initial`."""
    if initial == TokenPlatform.UNKNOWN:
        return [TokenPlatform.UNKNOWN]
    order = [initial]
    for platform in PLATFORM_FALLBACK_ORDER:
        if platform not in order:
            order.append(platform)
    return order


def _route_summary(route: RouteFetchResult) -> dict[str, object]:
    return {
        "platform": route.platform.value,
        "preferredChannel": route.preferred_channel.value,
        "readyForPancake": route.ready_for_pancake,
    }


class QueryExecutor:
    """Runs platform queries in probe order until one gives a final answer.

    Rules:
    - Each platform query is retried for transient (network-shaped) errors.
    - A route that does not need fallback is returned immediately.
    - Sandbox or missing-state errors jump straight to the `unknown` query.
    - When every platform is exhausted: the last successful route, else the
      last error, else a default Pancake route.
    """

    def __init__(
        self,
        registry: PlatformRegistry,
        config: RouteQueryConfig = DEFAULT_CONFIG,
        tracer: RouteTracer | None = None,
    ):
        self.registry = registry
        self.config = config
        self.tracer = tracer or RouteTracer(enabled=config.tracing_enabled)

    async def query_platform(self, token_address: str, platform: TokenPlatform) -> RouteFetchResult:
        """Query a single platform with retry on transient errors."""
        query = self.registry.get(platform)
        return await retry_async(
            partial(query.query_route, token_address),
            operation=f"query_route:{platform.value}",
            max_attempts=self.config.retry_max_attempts,
            base_delay=self.config.retry_base_delay,
            max_delay=self.config.retry_max_delay,
        )

    async def execute_with_fallback(
        self, token_address: str, initial_platform: TokenPlatform
    ) -> RouteFetchResult:
        """Resolve a route, probing other platforms as needed.

        Raises:
            RouteError: The last platform error when no platform produced a route
        """
        trace_id = self.tracer.start_trace(token_address, initial_platform.value)
        try:
            route = await self._execute(token_address, initial_platform, trace_id)
        except Exception as e:
            self.tracer.end_trace(trace_id, error=e)
            raise
        self.tracer.end_trace(trace_id, result=_route_summary(route))
        return route

    async def _execute(
        self, token_address: str, initial_platform: TokenPlatform, trace_id: str
    ) -> RouteFetchResult:
        order = build_probe_order(initial_platform)
        logger.debug(
            "route_probe_started",
            token=token_address,
            initial_platform=initial_platform.value,
            order=[p.value for p in order],
        )
        self.tracer.add_step(trace_id, "build_probe_order", {"order": [p.value for p in order]})

        last_valid_route: RouteFetchResult | None = None
        last_error: Exception | None = None

        for platform in order:
            self.tracer.add_step(trace_id, f"try_platform:{platform.value}")
            try:
                route = await self.query_platform(token_address, platform)
            except Exception as e:
                last_error = e
                kind = classify_error(e)
                logger.warning(
                    "platform_probe_failed",
                    token=token_address,
                    platform=platform.value,
                    kind=kind.value,
                    error=str(e),
                )
                self.tracer.add_error(trace_id, f"platform_error:{platform.value}", e)

                if kind in SKIP_TO_UNKNOWN_KINDS and platform != TokenPlatform.UNKNOWN:
                    self.tracer.add_step(trace_id, "skip_to_unknown", {"kind": kind.value})
                    try:
                        unknown_route = await self.query_platform(
                            token_address, TokenPlatform.UNKNOWN
                        )
                    except Exception as unknown_error:
                        last_error = unknown_error
                        logger.warning(
                            "unknown_platform_probe_failed",
                            token=token_address,
                            error=str(unknown_error),
                        )
                        self.tracer.add_error(trace_id, "platform_error:unknown", unknown_error)
                        break
                    logger.info(
                        "route_resolved",
                        token=token_address,
                        platform=unknown_route.platform.value,
                        channel=unknown_route.preferred_channel.value,
                        skipped_from=platform.value,
                    )
                    return unknown_route
                continue

            last_valid_route = route
            self.tracer.add_step(
                trace_id, f"platform_success:{platform.value}", _route_summary(route)
            )
            if not route.needs_fallback:
                logger.info(
                    "route_resolved",
                    token=token_address,
                    platform=route.platform.value,
                    channel=route.preferred_channel.value,
                    ready_for_pancake=route.ready_for_pancake,
                )
                return route
            logger.debug("route_needs_fallback", token=token_address, platform=platform.value)

        if last_valid_route is not None:
            logger.info(
                "route_resolved_best_effort",
                token=token_address,
                platform=last_valid_route.platform.value,
            )
            self.tracer.add_step(trace_id, "use_last_valid_route")
            return last_valid_route

        if last_error is not None:
            logger.warning("route_probe_exhausted", token=token_address, error=str(last_error))
            raise last_error

        logger.warning("route_default_used", token=token_address)
        self.tracer.add_step(trace_id, "use_default_route")
        return default_pancake_route()


__all__ = ["QueryExecutor", "build_probe_order", "PLATFORM_FALLBACK_ORDER"]
