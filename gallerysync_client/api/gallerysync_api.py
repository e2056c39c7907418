"""
GallerySync Client - API Communication Module

Handles all communication with the GallerySync server via REST API.
Every failure to obtain a usable JSON response is raised as
GallerySyncServerError so callers have one transmission-failure type.

Author: GallerySync Project
"""

import logging
import requests
from typing import Optional, Dict, Any, List

from gallerysync_client.exceptions import GallerySyncServerError, GallerySyncDataError
from gallerysync_client.models import ImageRecord, ReconciliationResult, SyncSummary

# Configure logging
logger = logging.getLogger(__name__)


class GallerySyncAPI:
    """
    API client for communicating with GallerySync server.

    Responsibilities:
    - Make API requests over a pooled session
    - Translate transport and HTTP errors into GallerySyncServerError
    - Validate response bodies into typed models
    """

    def __init__(self, server_url: str, server_port: int, verify_ssl: bool = True,
                 timeout: float = 30):
        """
        Initialize API client.

        Args:
            server_url: Base URL of server (e.g., "http://localhost")
            server_port: Server port number (e.g., 4000)
            verify_ssl: Whether to verify SSL certificates
            timeout: Per-request timeout in seconds
        """
        self.base_url = f"{server_url}:{server_port}"
        self.verify_ssl = verify_ssl
        self.timeout = timeout
        # Use session for connection pooling to avoid TCP handshake overhead on each request
        self.session = requests.Session()
        logger.debug(f"Initialized API client for {self.base_url} (SSL verification: {self.verify_ssl})")

    def close(self):
        """
        Close the session and release resources.

        Should be called when done using the API client.
        """
        if hasattr(self, 'session') and self.session:
            self.session.close()
            logger.debug("API client session closed")

    def __del__(self):
        """Cleanup on deletion."""
        self.close()

    def _make_request(self, method: str, endpoint: str, **kwargs) -> Any:
        """
        Make an API request and return the decoded JSON body.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint (e.g., "/sync")
            **kwargs: Additional arguments for request

        Returns:
            Decoded JSON response

        Raises:
            GallerySyncServerError: On connection error, timeout, non-2xx status
                                    or a body that is not JSON
        """
        url = f"{self.base_url}{endpoint}"
        logger.debug(f"API request: {method} {endpoint}")

        # Add verify_ssl and timeout if not specified
        if "verify" not in kwargs:
            kwargs["verify"] = self.verify_ssl
        if "timeout" not in kwargs:
            kwargs["timeout"] = self.timeout

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.exceptions.ConnectionError as e:
            logger.error(f"Cannot connect to server at {self.base_url}: {e}")
            raise GallerySyncServerError(f"Cannot connect to server at {self.base_url}")
        except requests.exceptions.Timeout:
            logger.error("Request timed out")
            raise GallerySyncServerError("Request timed out")
        except requests.exceptions.RequestException as e:
            logger.error(f"Request error: {str(e)}")
            raise GallerySyncServerError(f"Request error: {str(e)}")

        # Handle server errors
        if response.status_code >= 500:
            logger.error(f"Server error {response.status_code}: {response.text}")
            raise GallerySyncServerError(response.text or f"Server error: {response.status_code}",
                                         status_code=response.status_code)

        # Handle client errors (4xx)
        if response.status_code >= 400:
            error_message = response.text
            try:
                error_data = response.json()
                if isinstance(error_data, dict):
                    error_message = error_data.get("detail", error_message)
            except ValueError:
                pass
            logger.error(f"Request failed with status {response.status_code}: {error_message}")
            raise GallerySyncServerError(f"Request failed with status {response.status_code}: {error_message}",
                                         status_code=response.status_code)

        try:
            return response.json()
        except ValueError:
            logger.error(f"Malformed response body from {method} {endpoint}")
            raise GallerySyncServerError(f"Malformed response body from {endpoint}",
                                         status_code=response.status_code)

    # ==================== Status Endpoints ====================

    def health(self) -> Dict[str, Any]:
        """
        Check that the server is reachable.

        Returns:
            Server status information
        """
        return self._make_request("GET", "/health")

    # ==================== Image Catalog Endpoints ====================

    def list_images(self) -> List[ImageRecord]:
        """
        Get every image in the server catalog, newest first.

        Malformed entries are dropped and logged.

        Raises:
            GallerySyncDataError: If the response is not a list
        """
        data = self._make_request("GET", "/images")
        if not isinstance(data, list):
            raise GallerySyncDataError("Image list response is not a JSON array")

        images = []
        for entry in data:
            try:
                images.append(ImageRecord.model_validate(entry))
            except ValueError as e:
                logger.warning(f"Dropping malformed image from list response: {e}")
        return images

    def get_image(self, image_id: int) -> ImageRecord:
        """
        Get one image's metadata.

        Raises:
            GallerySyncServerError: If the image does not exist (404) or the request fails
            GallerySyncDataError: If the response is not a valid image record
        """
        data = self._make_request("GET", f"/images/{image_id}")
        try:
            return ImageRecord.model_validate(data)
        except ValueError as e:
            raise GallerySyncDataError(f"Invalid image record in response: {e}") from e

    # ==================== Sync Endpoint ====================

    def sync(self, summaries: List[SyncSummary],
             timeout: Optional[float] = None) -> ReconciliationResult:
        """
        Send local sync summaries and receive the reconciliation result.

        Args:
            summaries: One summary per local record
            timeout: Override for the request timeout

        Returns:
            ReconciliationResult: addedOrUpdated, removed and conflicts

        Raises:
            GallerySyncServerError: If the request fails
            GallerySyncDataError: If the response is not a reconciliation result
        """
        payload = {"localImages": [summary.to_dict() for summary in summaries]}
        logger.info(f"Sending {len(summaries)} sync summaries to server")

        data = self._make_request(
            "POST", "/sync",
            json=payload,
            timeout=timeout if timeout is not None else self.timeout
        )
        return ReconciliationResult.from_response(data)
