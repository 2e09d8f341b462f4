"""
Sample collector for Lambda Memory Bench.
Drives concurrent request batches against one function endpoint until enough
cold-start and warm-start samples have been collected.
"""

import asyncio
import json
import logging
from typing import Any, List, Optional, Union

import aiohttp

from .config_module import FamilyConfig, TierConfig
from .exceptions import BatchTransportError, MalformedResponseError
from .models import AggregatedResult, Sample, TrialSet
from .schemas import FunctionResponse, parse_function_response
from .utils import format_timestamp

logger = logging.getLogger(__name__)

TRANSPORT_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError)


class SampleCollector:
    """Collects classified samples for a single memory tier.

    The loop has two exits: both targets reached, or the number of attempted
    requests exceeding ``max_total_requests``. Cold/warm classification is
    taken from the endpoint's own ``coldStart`` flag.
    """

    def __init__(self, config: TierConfig):
        """
        Initialize the collector.

        Args:
            config: Collection settings for the tier
        """
        self.config = config
        self.trial_set = TrialSet(target_cold=config.target_cold, target_warm=config.target_warm)
        self.requests_attempted = 0
        self.errors = 0
        self._request_counter = 0

    def _create_session(self) -> aiohttp.ClientSession:
        timeout = aiohttp.ClientTimeout(total=self.config.request_timeout_s)
        return aiohttp.ClientSession(timeout=timeout)

    async def collect(self) -> AggregatedResult:
        """
        Run the adaptive batching loop and aggregate what was collected.

        Returns:
            AggregatedResult for the tier, possibly partial
        """
        config = self.config
        trial_set = self.trial_set
        batch_number = 1

        logger.info(
            f"Testing {config.endpoint_url} ({config.memory_mb}MB): target "
            f"{config.target_cold} cold starts, {config.target_warm} warm starts"
        )

        async with self._create_session() as session:
            while trial_set.needs_cold or trial_set.needs_warm:
                logger.info(
                    f"Request batch {batch_number} "
                    f"(Cold: {len(trial_set.cold_samples)}/{config.target_cold}, "
                    f"Warm: {len(trial_set.warm_samples)}/{config.target_warm})"
                )
                batch_number += 1

                try:
                    bodies = await self._run_batch(session)
                except BatchTransportError as e:
                    logger.warning(f"Batch error: {e}")
                    if self._ceiling_reached():
                        break
                    await asyncio.sleep(config.error_backoff_ms / 1000)
                    continue

                self._process_batch(bodies)

                if trial_set.is_complete:
                    logger.info("Collection complete, have enough cold and warm starts")
                    break

                # New cold starts need idle containers to be reclaimed first.
                if trial_set.needs_cold:
                    logger.debug(f"Waiting {config.batch_delay_ms}ms for potential container scaling")
                    await asyncio.sleep(config.batch_delay_ms / 1000)

                if self._ceiling_reached():
                    break

        result = AggregatedResult.from_trial_set(
            config.memory_mb,
            trial_set,
            requests_attempted=self.requests_attempted,
            errors=self.errors,
        )
        self._log_summary(result)
        return result

    def _ceiling_reached(self) -> bool:
        if self.requests_attempted > self.config.max_total_requests:
            logger.warning(
                f"Reached maximum request limit ({self.requests_attempted} attempted), stopping"
            )
            return True
        return False

    async def _run_batch(self, session: aiohttp.ClientSession) -> List[bytes]:
        """Fire one batch of concurrent requests and return the successful bodies."""
        count = self.config.max_concurrent
        results = await asyncio.gather(
            *(self._fetch(session) for _ in range(count)), return_exceptions=True
        )
        self.requests_attempted += count

        bodies = []
        failures = []
        for result in results:
            if isinstance(result, TRANSPORT_ERRORS):
                failures.append(result)
            elif isinstance(result, BaseException):
                raise result
            else:
                bodies.append(result)

        for failure in failures:
            logger.debug(f"Request failed: {failure!r}")
        self.errors += len(failures)

        if not bodies:
            raise BatchTransportError(f"All {count} requests failed: {failures[0]!r}")

        return bodies

    async def _fetch(self, session: aiohttp.ClientSession) -> bytes:
        """Issue a single GET request and return the undecoded body."""
        async with session.get(self.config.endpoint_url) as response:
            return await response.read()

    def _process_batch(self, bodies: List[Union[str, bytes]]):
        """Classify every body of a batch; order of arrival does not matter."""
        for body in bodies:
            envelope = self._parse(body)
            if envelope is None:
                continue

            sample = self._build_sample(envelope)
            kind = "Cold" if sample.is_cold_start else "Warm"

            if self.trial_set.add(sample):
                logger.debug(f"{kind} Start: {sample.duration_ms}ms")
            else:
                logger.debug(f"{kind} Start (discarded - have enough): {sample.duration_ms}ms")

    def _parse(self, body: Union[str, bytes]) -> Optional[FunctionResponse]:
        # Invalid UTF-8 surfaces here as UnicodeDecodeError, a ValueError.
        try:
            payload: Any = json.loads(body)
            return parse_function_response(payload)
        except (ValueError, MalformedResponseError) as e:
            self.errors += 1
            logger.warning(f"Error response from {self.config.endpoint_url}: {e}")
            return None

    def _build_sample(self, envelope: FunctionResponse) -> Sample:
        self._request_counter += 1
        environment = envelope.execution_environment

        return Sample(
            duration_ms=envelope.performance.total_execution_time,
            is_cold_start=environment.cold_start,
            memory_mb=environment.memory_limit,
            request_id=environment.request_id,
            timestamp=format_timestamp(),
            request_number=self._request_counter,
        )

    def _log_summary(self, result: AggregatedResult):
        collected = len(self.trial_set.cold_samples) + len(self.trial_set.warm_samples)
        logger.info(
            f"Collection summary for {self.config.memory_mb}MB: "
            f"{self.requests_attempted} requests attempted, {collected} samples kept, "
            f"{self.errors} errors, "
            f"cold {len(self.trial_set.cold_samples)}/{self.config.target_cold}, "
            f"warm {len(self.trial_set.warm_samples)}/{self.config.target_warm}"
        )

        if result.cold_stats:
            stats = result.cold_stats
            logger.info(
                f"  Cold Start - Avg: {stats.average:.2f}ms, Min: {stats.min}ms, Max: {stats.max}ms"
            )
        if result.warm_stats:
            stats = result.warm_stats
            logger.info(
                f"  Warm Start - Avg: {stats.average:.2f}ms, Min: {stats.min}ms, Max: {stats.max}ms"
            )


async def collect_tiers(family: FamilyConfig, base_url: str) -> List[AggregatedResult]:
    """
    Collect every memory tier of a workload family, one tier at a time.

    Args:
        family: Workload family configuration
        base_url: API base URL

    Returns:
        List of AggregatedResult in configured tier order
    """
    results = []
    for memory_mb in family.memory_sizes:
        collector = SampleCollector(family.tier_config(base_url, memory_mb))
        results.append(await collector.collect())
    return results
