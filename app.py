#!/usr/bin/env python3
"""
Main entry point for the nanolink URL shortener.

Concurrency: one process serves many connections via async I/O (FastAPI +
asyncpg connection pool). For more throughput run several instances behind
a load balancer; each has its own pool, visit recorder and retention
sweeper, so set REDIS_URL to share rate-limit counters between them.

Usage:
    python app.py

Environment variables:
    DATABASE_URL - PostgreSQL connection URL, or memory:// for an in-memory store
    DB_CREATE_SCHEMA - Create the short_links table on startup (default true)
    REDIS_URL - Redis URL for shared rate limiting (optional)
    BASE_URL - Base URL for short links
    PORT - Port to listen on
    CLEANUP_INTERVAL_SECONDS - Retention sweep interval
    MAX_URL_AGE_DAYS - Retention age
    LOG_LEVEL - Logging level
"""

import logging
import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import Config, load_config
from nanolink import RetentionSweeper, ShortCodeGenerator, ShortLinkService, VisitRecorder
from nanolink.common.logging_config import setup_logging
from nanolink.database import MemoryShortLinkStore, PostgresShortLinkStore, ShortLinkStoreBase
from web_app import create_app
from web_app.middleware import FixedWindowRateLimiter, RedisRateLimiter


def build_store(config: Config, logger: logging.Logger) -> ShortLinkStoreBase:
    """Pick the store implementation for ``config.database_url``."""
    if config.uses_memory_store:
        logger.info("Using in-memory link store (data is lost on restart)")
        return MemoryShortLinkStore(logger=logger)

    return PostgresShortLinkStore(
        dsn=config.database_url,
        pool_min_size=config.db_pool_min_size,
        pool_max_size=config.db_pool_max_size,
        connection_lifetime_seconds=config.db_connection_lifetime_seconds,
        query_timeout_seconds=config.query_timeout_seconds,
        create_schema=config.db_create_schema,
        logger=logger,
    )


def build_rate_limiter(config: Config, logger: logging.Logger):
    if config.redis_url:
        logger.info("Rate limit counters shared through Redis")
        return RedisRateLimiter(
            limit=config.rate_limit,
            window_seconds=config.rate_limit_window_seconds,
            redis_url=config.redis_url,
            logger=logger,
        )
    return FixedWindowRateLimiter(
        limit=config.rate_limit,
        window_seconds=config.rate_limit_window_seconds,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info("Starting nanolink...")

    store = build_store(config, logger)
    await store.initialize()

    generator = ShortCodeGenerator(default_length=config.short_code_length)
    service = ShortLinkService(
        store=store,
        short_code_generator=generator,
        logger=logger,
    )

    visit_recorder = VisitRecorder(
        service,
        logger=logger,
        workers=config.visit_workers,
        max_pending=config.visit_queue_size,
    )
    visit_recorder.start()

    sweeper = RetentionSweeper(
        store,
        interval_seconds=config.cleanup_interval_seconds,
        max_age=config.max_url_age,
        timeout_seconds=config.sweep_timeout_seconds,
        logger=logger,
    )
    sweeper.start()

    app.state.service = service
    app.state.visit_recorder = visit_recorder
    app.state.sweeper = sweeper

    logger.info("Service started successfully")

    yield

    logger.info("Shutting down nanolink...")

    # Order matters: the sweeper and recorder still use the store
    await sweeper.stop()
    await visit_recorder.stop()
    await service.close()
    await app.state.rate_limiter.close()

    logger.info("Service stopped")


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("nanolink URL shortener")
    logger.info(f"Configuration: {config.model_dump(exclude={'database_url', 'redis_url'})}")

    app = create_app(
        service_instance=None,  # Set in lifespan
        visit_recorder=None,
        config=config,
        rate_limiter=build_rate_limiter(config, logger),
    )
    app.state.logger = logger
    app.router.lifespan_context = lifespan

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        access_log=False,
    )

    server = uvicorn.Server(uvicorn_config)

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
