"""Checks that a deployment answers its health endpoint with the expected status."""

import httpx

name = "Deployment Check"
description = "Verifies that a deployment is successful by checking health endpoints"
parameters = [
    {
        "name": "healthUrl",
        "type": "string",
        "description": "Health check URL to verify",
        "required": True,
    },
    {
        "name": "expectedStatus",
        "type": "number",
        "description": "Expected HTTP status code",
        "default": 200,
    },
    {
        "name": "timeout",
        "type": "number",
        "description": "Request timeout in milliseconds",
        "default": 5000,
    },
]


async def verify(issue_key, parameters):
    health_url = parameters.get("healthUrl")
    expected_status = int(parameters.get("expectedStatus") or 200)
    timeout_ms = float(parameters.get("timeout") or 5000)

    if not health_url:
        return "Health URL parameter is required"

    try:
        async with httpx.AsyncClient(timeout=timeout_ms / 1000) as client:
            response = await client.get(health_url)
    except httpx.TimeoutException:
        return f"Deployment check failed: Request timeout after {timeout_ms:g}ms"
    except httpx.ConnectError:
        return "Deployment check failed: Connection refused - service may not be running"
    except httpx.HTTPError as e:
        return f"Deployment check failed: {e}"

    if response.status_code == expected_status:
        return "ok"
    return f"Deployment check failed: Expected status {expected_status}, got {response.status_code}"
