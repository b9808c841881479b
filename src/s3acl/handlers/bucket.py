"""Bucket-level ACL operations for s3acl.

Implements:
    - GetBucketAcl (GET /{bucket}?acl), decoded or as raw XML
    - PutBucketAcl (PUT /{bucket}?acl), from a policy or raw XML
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from s3acl.errors import http_resp_to_error_response
from s3acl.handlers.acl import AccessControlPolicy, policy_from_xml, policy_to_xml
from s3acl.validation import validate_bucket_name

if TYPE_CHECKING:
    from s3acl.client import S3Client

logger = logging.getLogger(__name__)

ACL_QUERY = {"acl": ""}


class BucketACLHandler:
    """Reads and writes bucket ACLs through a client's request executor."""

    def __init__(self, client: S3Client) -> None:
        self.client = client

    async def get_bucket_acl_string(self, bucket_name: str) -> str:
        """Return a bucket's AccessControlPolicy XML exactly as the server sent it.

        Implements: GET /{bucket}?acl

        Raises:
            S3Error: On any non-200 response.
        """
        validate_bucket_name(bucket_name)
        response = await self.client.execute_method(
            "GET", bucket_name, query=ACL_QUERY, operation="GetBucketAcl"
        )
        if response.status_code != 200:
            raise http_resp_to_error_response(response, bucket_name)
        return response.text

    async def get_bucket_acl(self, bucket_name: str) -> AccessControlPolicy:
        """Fetch and decode a bucket's AccessControlPolicy.

        Implements: GET /{bucket}?acl
        """
        body = await self.get_bucket_acl_string(bucket_name)
        return policy_from_xml(body)

    async def put_bucket_acl(self, bucket_name: str, policy: AccessControlPolicy) -> None:
        """Encode a policy and set it as the bucket's ACL.

        Implements: PUT /{bucket}?acl
        """
        await self.put_bucket_acl_string(bucket_name, policy_to_xml(policy))

    async def put_bucket_acl_string(self, bucket_name: str, acl: str) -> None:
        """Set a bucket's ACL from an AccessControlPolicy XML string.

        Implements: PUT /{bucket}?acl

        Args:
            bucket_name: The bucket name.
            acl: The XML document, sent as the UTF-8 request body.

        Raises:
            S3Error: On any non-200 response.
        """
        validate_bucket_name(bucket_name)
        response = await self.client.execute_method(
            "PUT",
            bucket_name,
            query=ACL_QUERY,
            content=acl.encode("utf-8"),
            operation="PutBucketAcl",
        )
        if response.status_code != 200:
            raise http_resp_to_error_response(response, bucket_name)
        logger.info("Updated ACL of bucket %s", bucket_name)
