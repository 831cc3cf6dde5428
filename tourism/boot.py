"""
Environment Bootloader.

Single place for environment validation. Used by:
1. Application Startup (main.py) -> mode="critical"
2. CI Pipelines -> mode="dry-run"
3. Smoke Tests (Manual/Cron) -> mode="full" (CLI)
"""

import asyncio
import sys
import time
from dataclasses import dataclass
from enum import Enum

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from tourism.config import DEV_SECRET_KEY, settings
from tourism.database import engine
from tourism.logger import get_logger

logger = get_logger(__name__)


class BootMode(str, Enum):
    CRITICAL = "critical"  # Config + DB (fast fail for startup)
    FULL = "full"  # Config + DB + Redis (smoke tests)
    DRY_RUN = "dry-run"  # Static config check only (CI lint)


@dataclass
class ServiceStatus:
    service: str
    status: str  # 'ok', 'warning', 'error', 'skipped'
    message: str
    duration_ms: float = 0.0


class Bootloader:
    """Handles environment validation and service connectivity checks."""

    @staticmethod
    async def validate(mode: BootMode = BootMode.CRITICAL) -> bool:
        """Run validation checks. Returns True if passed, False if failed.

        If mode is CRITICAL, this calls sys.exit(1) on failure.
        """
        logger.info("Bootloader starting validation", mode=mode.value)

        if not Bootloader._check_static_config():
            if mode == BootMode.CRITICAL:
                logger.critical("Static configuration check failed. Refusing to start.")
                sys.exit(1)
            return False

        if mode == BootMode.DRY_RUN:
            return True

        results = [await Bootloader._check_database()]
        if mode == BootMode.FULL:
            results.append(await Bootloader._check_redis())

        passed = True
        for res in results:
            if res.status == "error":
                passed = False
                logger.error(
                    "Service check failed",
                    service=res.service,
                    error=res.message,
                    duration_ms=res.duration_ms,
                )
            else:
                logger.info(
                    "Service check finished",
                    service=res.service,
                    status=res.status,
                    duration_ms=res.duration_ms,
                )

        if not passed and mode == BootMode.CRITICAL:
            logger.critical("Critical service checks failed. Refusing to start.")
            sys.exit(1)

        return passed

    @staticmethod
    def _check_static_config() -> bool:
        """Reject configurations that must never reach production."""
        if settings.is_production and settings.secret_key == DEV_SECRET_KEY:
            logger.error("SECRET_KEY is the development default in production")
            return False
        if settings.is_production and settings.debug:
            logger.error("DEBUG must be disabled in production")
            return False
        return True

    @staticmethod
    async def _check_database() -> ServiceStatus:
        """Verify database connectivity (SELECT 1)."""
        start = time.perf_counter()
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            duration_ms = (time.perf_counter() - start) * 1000
            return ServiceStatus("database", "ok", "Connection successful", duration_ms)
        except (SQLAlchemyError, OSError) as e:
            duration_ms = (time.perf_counter() - start) * 1000
            return ServiceStatus("database", "error", str(e), duration_ms)

    @staticmethod
    async def _check_redis() -> ServiceStatus:
        if not settings.redis_url:
            return ServiceStatus("redis", "skipped", "Not configured")

        import redis.asyncio as aioredis

        start = time.perf_counter()
        try:
            client = aioredis.from_url(settings.redis_url, decode_responses=True)
            await client.ping()
            await client.aclose()
            duration_ms = (time.perf_counter() - start) * 1000
            return ServiceStatus("redis", "ok", "Ping successful", duration_ms)
        except (aioredis.RedisError, OSError) as e:
            duration_ms = (time.perf_counter() - start) * 1000
            return ServiceStatus("redis", "error", str(e), duration_ms)


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser()
    parser.add_argument("--mode", type=str, default="full", choices=[m.value for m in BootMode])
    args = parser.parse_args()

    print(f"Bootloader: Running validation cycle (mode={args.mode})")

    try:
        success = asyncio.run(Bootloader.validate(BootMode(args.mode)))
    except KeyboardInterrupt:
        print("\nAborted.")
        sys.exit(130)

    if success:
        print("Validation check passed.")
        sys.exit(0)
    else:
        print("Validation check failed.")
        sys.exit(1)
