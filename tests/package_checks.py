from __future__ import annotations

import logging
import sys

import failaware

logger: logging.Logger = logging.getLogger(__name__)

# Use httpbin.org for real HTTP testing
HTTPBIN_URL = "https://httpbin.org"


def check_get() -> None:
    logger.info("Checking get...")
    with failaware.new_default_client() as client:
        response = client.get(f"{HTTPBIN_URL}/get")
    assert response.status_code == 200


def check_post() -> None:
    logger.info("Checking post...")
    with failaware.new_default_client() as client:
        response = client.post(f"{HTTPBIN_URL}/post", "application/json", b'{"key": "value"}')
    assert response.status_code == 200
    assert response.json()["json"] == {"key": "value"}


def check_client_error() -> None:
    logger.info("Checking client error...")
    with failaware.new_default_client() as client:
        response = client.get(f"{HTTPBIN_URL}/status/404")
    assert response.status_code == 404


def main() -> None:
    r"""Run all package checks to validate installation and
    functionality."""
    try:
        check_get()
        check_post()
        check_client_error()

        logger.info("✅ All package checks passed successfully!")
    except Exception:
        logger.exception("❌ Package check failed")
        sys.exit(1)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
