"""Async S3-compatible client that executes signed requests for s3acl.

Requests are dispatched with httpx and signed with botocore's SigV4
implementation. The ACL operations live in the bucket and object handlers
attached to every client::

    async with S3Client("http://localhost:9000", "key", "secret") as client:
        xml = await client.buckets.get_bucket_acl_string("photos")
        info = await client.objects.get_object_acl("photos", "cat.jpg")

Credentials are optional; without them requests are sent unsigned
(anonymous access).
"""

import logging
import time
import urllib.parse

import httpx
from botocore.auth import S3SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials

from s3acl import metrics
from s3acl.config import ClientConfig
from s3acl.errors import http_resp_to_error_response
from s3acl.handlers.bucket import BucketACLHandler
from s3acl.handlers.object import ObjectACLHandler
from s3acl.models import ObjectInfo, canonical_header_key
from s3acl.validation import validate_bucket_name, validate_object_name

logger = logging.getLogger(__name__)

SERVICE_NAME = "s3"


class S3Client:
    """Executes signed requests against one S3-compatible endpoint.

    Attributes:
        endpoint: Base URL of the service, without a trailing slash.
        region: Region used in the SigV4 credential scope.
        buckets: Bucket-level ACL operations.
        objects: Object-level ACL operations.
    """

    def __init__(
        self,
        endpoint: str,
        access_key: str = "",
        secret_key: str = "",
        region: str = "us-east-1",
        session_token: str = "",
        timeout: float = 30.0,
        verify_tls: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.endpoint = endpoint.rstrip("/")
        self.region = region
        self._credentials = None
        if access_key and secret_key:
            self._credentials = Credentials(access_key, secret_key, session_token or None)
        self._http = httpx.AsyncClient(timeout=timeout, verify=verify_tls, transport=transport)

        self.buckets = BucketACLHandler(self)
        self.objects = ObjectACLHandler(self)

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "S3Client":
        """Create a client from the ``client`` configuration section."""
        return cls(
            endpoint=config.endpoint,
            access_key=config.access_key,
            secret_key=config.secret_key,
            region=config.region,
            session_token=config.session_token,
            timeout=config.timeout,
            verify_tls=config.verify_tls,
            transport=transport,
        )

    async def __aenter__(self) -> "S3Client":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying connection pool."""
        await self._http.aclose()

    def _url(
        self,
        bucket_name: str,
        object_name: str = "",
        query: dict[str, str] | None = None,
    ) -> str:
        """Build a path-style URL for a bucket or object."""
        path = f"/{bucket_name}" if bucket_name else "/"
        if object_name:
            path += "/" + urllib.parse.quote(object_name, safe="/~")
        url = self.endpoint + path
        if query:
            url += "?" + urllib.parse.urlencode(sorted(query.items()), quote_via=urllib.parse.quote)
        return url

    def _sign(self, method: str, url: str, headers: dict[str, str], body: bytes) -> dict[str, str]:
        """Return ``headers`` plus SigV4 authentication headers.

        Requests are left unsigned when no credentials are configured.
        """
        if self._credentials is None:
            return headers
        request = AWSRequest(method=method, url=url, data=body, headers=headers)
        S3SigV4Auth(self._credentials, SERVICE_NAME, self.region).add_auth(request)
        return dict(request.headers.items())

    async def execute_method(
        self,
        method: str,
        bucket_name: str = "",
        object_name: str = "",
        query: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
        content: bytes | None = None,
        operation: str = "",
    ) -> httpx.Response:
        """Sign and send one request, returning the fully read response.

        The status code is not checked; callers decide what counts as
        success. Transport failures raise ``httpx.HTTPError`` unchanged.

        Args:
            method: HTTP method.
            bucket_name: Target bucket.
            object_name: Target object, or "" for bucket-level requests.
            query: Query parameters (``{"acl": ""}`` for ACL subresources).
            headers: Extra request headers.
            content: Request body.
            operation: S3 operation name, used for logging and metrics.

        Returns:
            The response with its body loaded.
        """
        url = self._url(bucket_name, object_name, query)
        body = content or b""
        req_headers = dict(headers or {})
        if content is not None:
            req_headers["Content-Length"] = str(len(body))
        req_headers = self._sign(method, url, req_headers, body)

        start = time.monotonic()
        response = await self._http.request(
            method, url, headers=req_headers, content=content
        )
        duration = time.monotonic() - start
        duration_ms = round(duration * 1000, 2)

        metrics.observe_request(operation or method, method, response.status_code, duration)
        logger.debug(
            "%s %s %d %.2fms",
            method,
            url,
            response.status_code,
            duration_ms,
            extra={
                "operation": operation,
                "method": method,
                "bucket": bucket_name,
                "object": object_name,
                "status": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        return response

    async def stat_object(self, bucket_name: str, object_name: str) -> ObjectInfo:
        """Fetch an object's metadata with a HEAD request.

        Args:
            bucket_name: The bucket name.
            object_name: The object key.

        Returns:
            An ObjectInfo built from the response headers.

        Raises:
            S3Error: If the object cannot be found or read.
        """
        validate_bucket_name(bucket_name)
        validate_object_name(object_name)

        response = await self.execute_method(
            "HEAD", bucket_name, object_name, operation="HeadObject"
        )
        if response.status_code != 200:
            raise http_resp_to_error_response(response, bucket_name, object_name)

        metadata: dict[str, list[str]] = {}
        for key, value in response.headers.multi_items():
            metadata.setdefault(canonical_header_key(key), []).append(value)

        return ObjectInfo(
            bucket_name=bucket_name,
            object_name=object_name,
            size=int(response.headers.get("content-length", "0")),
            etag=response.headers.get("etag", "").replace('"', ""),
            content_type=response.headers.get("content-type", "application/octet-stream"),
            last_modified=response.headers.get("last-modified"),
            version_id=response.headers.get("x-amz-version-id"),
            metadata=metadata,
        )
