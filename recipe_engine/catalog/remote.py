"""Remote recipe catalog fetched over HTTP with retry logic (async).

This module provides the RemoteCatalog class for loading candidate recipes
from an external JSON endpoint with proper error handling and exponential
backoff retries. The fetched list is frozen into an InMemoryCatalog, so
the pipeline itself never performs I/O.
"""

import asyncio
from typing import Optional

import aiohttp

from recipe_engine.catalog.catalog import CandidateCatalog, InMemoryCatalog, load_catalog, parse_recipe_records
from recipe_engine.utils.config import Config, config as default_config
from recipe_engine.utils.errors import GenerationError, RecipeErrorType, RecipeServiceError
from recipe_engine.utils.logger import logger


class RemoteCatalog:
    """Fetch and validate a remote recipe catalog.

    Manages fetch attempts with exponential backoff retry logic to handle
    transient failures gracefully. Malformed payloads are not retried.
    """

    def __init__(
        self,
        url: str,
        max_retries: int = 3,
        retry_delays: Optional[list[int]] = None,
        timeout_seconds: int = 10,
    ) -> None:
        """Initialize RemoteCatalog with configuration.

        Args:
            url: HTTP(S) URL returning a JSON array of recipes.
            max_retries: Maximum number of fetch attempts (default: 3).
            retry_delays: List of delays in seconds for each retry. If None, defaults to [1, 2, 4].
            timeout_seconds: Total timeout per request in seconds (default: 10).

        Raises:
            ValueError: If url is None or empty string.
        """
        if not url:
            raise ValueError("CATALOG_URL is required")

        self.url = url
        self.max_retries = max_retries
        self.retry_delays = retry_delays or [1, 2, 4]
        self.timeout_seconds = timeout_seconds

    async def _fetch_json(self):
        async with aiohttp.ClientSession() as session:
            async with session.get(self.url, timeout=aiohttp.ClientTimeout(total=self.timeout_seconds)) as response:
                response.raise_for_status()
                return await response.json(content_type=None)

    async def fetch(self) -> InMemoryCatalog:
        """Fetch the catalog with retries (async).

        Returns:
            InMemoryCatalog: Validated recipes ready for the pipeline.

        Raises:
            RecipeServiceError: TIMEOUT or NETWORK after all attempts fail.
            GenerationError: If the payload is not a valid recipe list.
        """
        logger.info(f"Fetching recipe catalog from {self.url}...")

        last_exception: Optional[Exception] = None
        for attempt in range(self.max_retries):
            try:
                logger.debug(f"Catalog fetch attempt {attempt + 1}/{self.max_retries}...")
                payload = await self._fetch_json()
                recipes = parse_recipe_records(payload, self.url)
                logger.info(f"Remote catalog loaded: {len(recipes)} recipes")
                return InMemoryCatalog(recipes)

            except GenerationError:
                # Bad data will not improve with retries
                raise
            except aiohttp.ClientResponseError as e:
                last_exception = e
                if e.status < 500 and e.status != 429:
                    logger.error(f"Catalog request rejected ({e.status}): {e.message}")
                    raise RecipeServiceError(
                        RecipeErrorType.NETWORK,
                        f"Catalog request failed ({e.status})",
                        details=e.message,
                    ) from e
                logger.debug(f"Catalog fetch attempt {attempt + 1} failed: {e}")
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_exception = e
                logger.debug(f"Catalog fetch attempt {attempt + 1} failed: {e!r}")

            if attempt < self.max_retries - 1:
                delay = self.retry_delays[attempt] if attempt < len(self.retry_delays) else self.retry_delays[-1]
                logger.warning(
                    f"Catalog fetch failed, retrying in {delay}s... (attempt {attempt + 1}/{self.max_retries})"
                )
                await asyncio.sleep(delay)

        # All retries exhausted
        error_type = (
            RecipeErrorType.TIMEOUT if isinstance(last_exception, asyncio.TimeoutError) else RecipeErrorType.NETWORK
        )
        error_msg = f"Failed to fetch recipe catalog after {self.max_retries} attempts"
        logger.error(f"{error_msg}: {last_exception!r}")
        raise RecipeServiceError(error_type, error_msg, details=repr(last_exception))


async def load_catalog_async(cfg: Optional[Config] = None) -> CandidateCatalog:
    """Build the configured catalog, fetching it first when CATALOG_SOURCE=remote."""
    cfg = cfg or default_config
    if cfg.CATALOG_SOURCE != "remote":
        return load_catalog(cfg)
    remote = RemoteCatalog(
        url=cfg.CATALOG_URL,
        max_retries=cfg.MAX_RETRIES,
        retry_delays=cfg.retry_delays(),
        timeout_seconds=cfg.CATALOG_TIMEOUT_SECONDS,
    )
    return await remote.fetch()
