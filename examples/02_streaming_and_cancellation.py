"""
Streaming and Cancellation Examples

Demonstrates send_stream (download), send_live_stream (line by line)
and CancellationToken.
"""

import asyncio
from pathlib import Path

from fluent_http import AsyncHTTPClient, CancellationToken, HTTPClientConfig


async def download_file(http: AsyncHTTPClient, destination: Path):
    """Download a body chunk by chunk."""
    print("\n=== Download ===")

    result = await http.with_uri("/bytes/102400").send_stream()
    if not result.is_success():
        print(f"Failed: {result.error_message}")
        return

    written = 0
    async with result:
        with open(destination, "wb") as f:
            async for chunk in result.value:
                f.write(chunk)
                written += len(chunk)

    print(f"Saved {written} bytes to {destination}")


async def live_lines(http: AsyncHTTPClient):
    """Read a line-delimited stream until the token fires."""
    print("\n=== Live stream ===")

    token = CancellationToken()
    token.cancel_after(3)

    result = await http.with_uri("/stream/20").send_live_stream(cancellation_token=token)
    if not result.is_success():
        print(f"Failed: {result.error_message}")
        return

    async with result.value as lines:
        async for line in lines:
            print(f"  {line[:60]}")

    print(f"Lines: {result.value.lines_read}, state: {result.value.state.value}")


async def cancel_slow_request(http: AsyncHTTPClient):
    """A canceled request returns a failed Result instead of raising."""
    print("\n=== Cancel ===")

    token = CancellationToken()
    token.cancel_after(0.5)

    result = await http.with_uri("/delay/5").send_string(cancellation_token=token)
    print(f"Canceled: {result.is_canceled}, message: {result.error_message}")


async def main():
    config = HTTPClientConfig.create(base_url="https://httpbin.org", timeout=30)

    async with AsyncHTTPClient(config=config) as http:
        await download_file(http, Path("download.bin"))
        await live_lines(http)
        await cancel_slow_request(http)


if __name__ == "__main__":
    asyncio.run(main())
