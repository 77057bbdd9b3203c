"""
Basic fluent-http Usage Examples

Demonstrates GET / POST / DELETE with Result-wrapped responses.
"""

import asyncio
from dataclasses import dataclass
from typing import List

from fluent_http import AsyncHTTPClient, HTTPClientConfig


@dataclass
class Post:
    id: int
    title: str
    body: str
    userId: int


async def basic_get_request(http: AsyncHTTPClient):
    """Simple GET request into a typed object."""
    print("\n=== Basic GET Request ===")

    result = await http.with_uri("/posts/1").send_object(Post)

    print(f"Status: {result.status_code}")
    print(f"Post: {result.value}")


async def get_with_query(http: AsyncHTTPClient):
    """GET with query parameters from a dict."""
    print("\n=== GET with query ===")

    result = await (
        http.with_uri("/posts")
        .with_query_parameters({"userId": 1})
        .send_object(List[Post])
    )

    if result.is_success():
        print(f"Found {len(result.value)} posts")
    else:
        print(f"Failed: {result.error_message}")


async def post_with_json(http: AsyncHTTPClient):
    """POST request with JSON body."""
    print("\n=== POST with JSON ===")

    result = await (
        http.with_method("POST")
        .with_uri("/posts")
        .with_header("X-Request-Source", "examples")
        .with_json_body({"title": "My Post", "body": "This is the content", "userId": 1})
        .send_string()
    )
    print(f"Status: {result.status_code}")
    print(f"Created: {result.value}")


async def delete_request(http: AsyncHTTPClient):
    """DELETE request."""
    print("\n=== DELETE Request ===")

    result = await http.with_method("DELETE").with_uri("/posts/1").send_bytes()
    print(f"Status: {result.status_code}, success: {result.is_success()}")


async def not_found(http: AsyncHTTPClient):
    """HTTP errors come back as failed Result, nothing is raised."""
    print("\n=== 404 ===")

    result = await http.with_uri("/posts/999999").send_object(Post)
    print(f"Success: {result.is_success()}")
    print(f"Error: {result.error_message}")


async def main():
    config = HTTPClientConfig.create(base_url="https://jsonplaceholder.typicode.com", timeout=10)

    async with AsyncHTTPClient(config=config) as http:
        await basic_get_request(http)
        await get_with_query(http)
        await post_with_json(http)
        await delete_request(http)
        await not_found(http)


if __name__ == "__main__":
    asyncio.run(main())
