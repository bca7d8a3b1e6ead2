"""
GitHub Repository Client

Reads a repository's README through the GitHub REST API.
"""

import base64
import binascii
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from linkstitcher.errors import ExtractionError
from linkstitcher.services.source_classifier import repository_coordinates

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"


@dataclass
class RepositoryInfo:
    owner: str
    name: str
    readme: Optional[str] = None


class GithubClient:
    """
    README lookups against the GitHub REST API.

    The personal access token is optional; without it requests are
    anonymous and subject to the lower rate limit.
    """

    def __init__(self, client: httpx.AsyncClient, token: Optional[str] = None, api_url: str = GITHUB_API_URL):
        self.client = client
        self.token = token
        self.api_url = api_url.rstrip('/')

    def _headers(self) -> dict:
        headers = {
            'Accept': 'application/vnd.github+json',
            'X-GitHub-Api-Version': '2022-11-28',
        }
        if self.token:
            headers['Authorization'] = f"Bearer {self.token}"
        return headers

    async def fetch_repo_info(self, url: str) -> RepositoryInfo:
        """
        Fetch the README of the repository a URL points at.

        A repository without a README (404) yields readme=None.

        Raises:
            ExtractionError: if the URL lacks owner/name or the README cannot be decoded
            httpx.HTTPError: on network failure or any other non-2xx status
        """
        owner, name = repository_coordinates(url)
        info = RepositoryInfo(owner=owner, name=name)

        response = await self.client.get(
            f"{self.api_url}/repos/{owner}/{name}/readme",
            headers=self._headers(),
        )
        if response.status_code == 404:
            logger.info(f"No README for {owner}/{name}")
            return info
        response.raise_for_status()

        encoded = response.json().get('content')
        if encoded:
            try:
                info.readme = base64.b64decode(encoded).decode('utf-8', errors='replace')
            except (binascii.Error, ValueError) as e:
                raise ExtractionError(f"Undecodable README for {owner}/{name}: {e}", url=url) from e

        return info
