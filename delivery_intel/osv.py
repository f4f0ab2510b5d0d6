"""OSV.dev API integration."""

from typing import Any

import httpx
from rich.console import Console

from delivery_intel.http_client import _get_async_http_client

OSV_QUERY_API = "https://api.osv.dev/v1/query"
console = Console(stderr=True)


async def query_osv(
    ecosystem: str, package_name: str, version: str
) -> list[dict[str, Any]]:
    """
    Queries OSV.dev for known vulnerabilities of one package version.

    Args:
        ecosystem: OSV ecosystem name (e.g., 'npm', 'PyPI', 'Go')
        package_name: Package name
        version: Exact package version

    Returns:
        List of raw OSV vulnerability records; empty if none match or the
        request fails.
    """
    payload = {
        "version": version,
        "package": {"name": package_name, "ecosystem": ecosystem},
    }

    try:
        client = await _get_async_http_client()
        response = await client.post(OSV_QUERY_API, json=payload, timeout=10)
        if not response.is_success:
            console.print(
                f"[dim]Note: OSV.dev returned {response.status_code} for {package_name}@{version}[/dim]"
            )
            return []
        data = response.json()
    except (httpx.HTTPError, ValueError):
        console.print(f"[dim]Note: OSV.dev query failed for {package_name}@{version}[/dim]")
        return []

    if not isinstance(data, dict):
        return []
    return data.get("vulns") or []
