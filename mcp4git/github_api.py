"""
GitHub API helper functions and utilities for MCP4Git.

This module provides a centralized interface for interacting with the GitHub API,
including session management and common utility functions.
"""

import logging
import requests
from typing import Optional, Dict, Any, List
from .config import config

logger = logging.getLogger(__name__)

RATE_LIMIT_WARNING_THRESHOLD = 100


class GitHubAPI:
    """GitHub API wrapper with session management and utility functions."""

    def __init__(self):
        """Initialize GitHub API client with session."""
        self.session = requests.Session()
        self.session.headers.update(config.get_github_headers())
        logger.info("GitHub API client initialized")

    def url(self, path: str) -> str:
        """Build a full API URL from a path such as '/repos/owner/repo'."""
        return f"{config.github_api_base_url}{path}"

    def make_request(
        self,
        method: str,
        url: str,
        data: Optional[Dict[Any, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> requests.Response:
        """
        Make a generic HTTP request to GitHub API.

        Failures are never retried; the caller decides what to report.

        Args:
            method: HTTP method (GET, POST, PATCH, DELETE, etc.)
            url: Full URL for the request
            data: JSON data for POST/PATCH/PUT requests
            params: Query parameters

        Returns:
            Response object

        Raises:
            requests.exceptions.RequestException: For HTTP and transport errors
        """
        try:
            response = self.session.request(
                method=method, url=url, json=data, params=params, timeout=config.api_timeout
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"GitHub API request failed: {method} {url} - {str(e)}")
            raise

        if "x-ratelimit-remaining" in response.headers:
            remaining = response.headers["x-ratelimit-remaining"]
            logger.debug(f"GitHub API rate limit remaining: {remaining}")

            if remaining.isdigit() and int(remaining) < RATE_LIMIT_WARNING_THRESHOLD:
                logger.warning(
                    f"GitHub API rate limit running low: {remaining} requests remaining"
                )

        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            # 404s are routine during pre-flight checks
            log = logger.info if response.status_code == 404 else logger.error
            log(f"GitHub API request failed: {method} {url} - {str(e)}")
            raise
        return response

    def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET an API path and return the decoded JSON body."""
        return self.make_request("GET", self.url(path), params=params).json()

    def get_paginated_results(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        max_pages: int = 10,
        per_page: int = 100,
    ) -> List[Any]:
        """
        Get results from a paginated GitHub API endpoint.

        Args:
            url: Base URL for the API endpoint
            params: Query parameters
            max_pages: Maximum number of pages to fetch
            per_page: Page size requested from GitHub (1-100)

        Returns:
            List of all items from all pages

        Raises:
            requests.exceptions.RequestException: If any page fails
        """
        all_items: List[Any] = []
        page = 1

        params = dict(params or {})
        params["per_page"] = per_page

        while page <= max_pages:
            params["page"] = page

            response = self.make_request("GET", url, params=params)
            items = response.json()

            # Handle different response formats
            if isinstance(items, dict) and "items" in items:
                # Search API format
                page_items = items["items"]
                total_count = items.get("total_count", 0)
            else:
                page_items = items
                total_count = None

            if not page_items:
                break

            all_items.extend(page_items)

            if len(page_items) < per_page:
                break

            if total_count is not None and len(all_items) >= total_count:
                break

            page += 1

        logger.debug(f"Retrieved {len(all_items)} items from {url}")
        return all_items

    def close(self):
        """Close the session."""
        self.session.close()
        logger.info("GitHub API session closed")


# Global GitHub API instance
github_api = GitHubAPI()
