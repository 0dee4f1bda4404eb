"""Zenodo publishing client."""
import logging
import os
from typing import Any, Dict, List, Optional

import requests

from .base import BaseProvider
from ..core.models import Author
from ..exceptions import ConfigurationError, PublishError

logger = logging.getLogger(__name__)

DEFAULT_DESCRIPTION = (
    "This scientific article was automatically generated and refined using an advanced AI system."
)


class ZenodoClient(BaseProvider):
    """Publishes PDFs to Zenodo.

    Publishing is three sequential requests: create a deposition, upload the
    file into its bucket, then publish it. There is no retry.
    """

    def __init__(self, config, token: Optional[str] = None, session: requests.Session = None):
        """Initialize Zenodo client.

        Args:
            config: Configuration object with zenodo_api_url and zenodo_token
            token: Access token overriding ``config.zenodo_token``
            session: Optional requests session
        """
        super().__init__(config)
        self.api_url = config.zenodo_api_url.rstrip("/")
        self.token = token or config.zenodo_token
        self.session = session or requests.Session()

    def _request(
        self,
        method: str,
        url: str,
        json_body: Optional[Dict[str, Any]] = None,
        data: Optional[bytes] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        if not self.token:
            raise ConfigurationError("ZENODO_TOKEN not configured")

        request_headers = {"Authorization": f"Bearer {self.token}"}
        if headers:
            request_headers.update(headers)

        try:
            response = self.session.request(
                method, url, json=json_body, data=data, headers=request_headers
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Zenodo request failed: {e}")
            raise PublishError(f"Zenodo request failed: {e}")

        if not 200 <= response.status_code < 300:
            raise PublishError(
                f"API failed with status {response.status_code}: {response.text}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError:
            return response.text

    def create_deposition(
        self,
        title: str,
        creators: List[Author],
        description: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Create a draft deposition.

        Returns:
            Deposition JSON
        """
        metadata = {
            "metadata": {
                "title": title,
                "upload_type": "publication",
                "publication_type": "article",
                "description": description or DEFAULT_DESCRIPTION,
                "creators": [author.to_creator() for author in creators],
            }
        }
        logger.info(f"Creating Zenodo deposition: '{title}'")
        return self._request("POST", self.api_url, json_body=metadata)

    def upload_file(self, bucket_url: str, pdf_path: str) -> Any:
        """Upload a PDF into a deposition bucket."""
        file_name = os.path.basename(pdf_path)
        with open(pdf_path, "rb") as f:
            content = f.read()

        logger.info(f"Uploading {file_name} ({len(content)} bytes)")
        return self._request(
            "PUT",
            f"{bucket_url}/{file_name}",
            data=content,
            headers={
                "Content-Type": "application/pdf",
                "Content-Length": str(len(content)),
            },
        )

    def publish_deposition(self, deposition_id) -> Any:
        """Publish a draft deposition."""
        return self._request("POST", f"{self.api_url}/{deposition_id}/actions/publish")

    def publish(
        self,
        pdf_path: str,
        title: str,
        creators: Optional[List[Author]] = None,
        description: Optional[str] = None,
    ) -> str:
        """Create, upload and publish a paper.

        Args:
            pdf_path: PDF to publish
            title: Record title
            creators: Authors; at least one is required by Zenodo
            description: Record description

        Returns:
            URL of the published record

        Raises:
            ConfigurationError: If no token is configured
            PublishError: If any request fails
            FileNotFoundError: If the PDF does not exist
        """
        if not os.path.exists(pdf_path):
            raise FileNotFoundError(f"File not found: {pdf_path}")
        if not creators:
            raise PublishError("At least one author is required to publish")

        deposition = self.create_deposition(title, creators, description)
        try:
            bucket_url = deposition["links"]["bucket"]
            deposition_id = deposition["id"]
        except (KeyError, TypeError):
            raise PublishError(f"Unexpected deposition response: {deposition}")

        self.upload_file(bucket_url, pdf_path)
        self.publish_deposition(deposition_id)

        url = deposition["links"].get("latest_draft_html", "")
        logger.info(f"✓ Published to Zenodo: {url}")
        return url
