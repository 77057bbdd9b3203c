"""
Logging and Environment Configuration Examples.

Demonstrates structured request logging and loading configuration
from FLUENT_HTTP_* environment variables.
"""

import asyncio
import os

from fluent_http import AsyncHTTPClient, HTTPClientConfig, LoggingConfig, load_from_env


async def colored_console_logging():
    """Request lifecycle logged to the console."""
    print("\n" + "=" * 60)
    print("EXAMPLE 1: Colored console logging")
    print("=" * 60 + "\n")

    config = HTTPClientConfig.create(
        base_url="https://httpbin.org",
        logging=LoggingConfig.create(level="DEBUG", format="colored"),
    )

    async with AsyncHTTPClient(config=config) as http:
        # api_key is masked in the logged URL
        await http.with_uri("/get").with_query_parameters({"api_key": "secret", "page": 1}).send_string()
        await http.with_uri("/status/500").send_string()


async def json_file_logging():
    """JSON lines with a fixed service field."""
    print("\n" + "=" * 60)
    print("EXAMPLE 2: JSON file logging")
    print("=" * 60 + "\n")

    logging_config = LoggingConfig.create(
        level="INFO",
        format="json",
        enable_console=False,
        enable_file=True,
        file_path="logs/fluent_http.log",
        extra_fields={"service": "examples"},
    )
    config = HTTPClientConfig.create(base_url="https://httpbin.org", logging=logging_config)

    async with AsyncHTTPClient(config=config) as http:
        await http.with_uri("/uuid").send_object()

    print("Written to logs/fluent_http.log")


async def from_environment():
    """Configuration from FLUENT_HTTP_* variables."""
    print("\n" + "=" * 60)
    print("EXAMPLE 3: Environment config")
    print("=" * 60 + "\n")

    os.environ.setdefault("FLUENT_HTTP_BASE_URL", "https://httpbin.org")
    os.environ.setdefault("FLUENT_HTTP_TIMEOUT_READ", "15")
    os.environ.setdefault("FLUENT_HTTP_LOG_ENABLED", "true")
    os.environ.setdefault("FLUENT_HTTP_LOG_FORMAT", "text")

    config = load_from_env()
    print(f"base_url={config.base_url} read_timeout={config.timeout.read}")

    async with AsyncHTTPClient(config=config) as http:
        result = await http.with_uri("/headers").send_object()
        print(f"Status: {result.status_code}")


async def main():
    await colored_console_logging()
    await json_file_logging()
    await from_environment()


if __name__ == "__main__":
    asyncio.run(main())
