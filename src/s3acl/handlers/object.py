"""Object-level ACL operations for s3acl.

Implements:
    - GetObjectAcl (GET /{bucket}/{key}?acl), merged into the object's
      metadata or as raw XML
    - PutObjectAcl (PUT /{bucket}/{key}?acl), from a policy or raw XML
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from s3acl.errors import http_resp_to_error_response
from s3acl.handlers.acl import (
    CANNED_ACL_HEADER,
    AccessControlPolicy,
    get_amz_grant_acl,
    get_canned_acl,
    policy_from_xml,
    policy_to_xml,
)
from s3acl.validation import validate_bucket_name, validate_object_name

if TYPE_CHECKING:
    from s3acl.client import S3Client
    from s3acl.models import ObjectInfo

logger = logging.getLogger(__name__)

ACL_QUERY = {"acl": ""}


class ObjectACLHandler:
    """Reads and writes object ACLs through a client's request executor."""

    def __init__(self, client: S3Client) -> None:
        self.client = client

    async def get_object_acl_string(self, bucket_name: str, object_name: str) -> str:
        """Return an object's AccessControlPolicy XML exactly as the server sent it.

        Implements: GET /{bucket}/{key}?acl

        Raises:
            S3Error: On any non-200 response.
        """
        validate_bucket_name(bucket_name)
        validate_object_name(object_name)
        response = await self.client.execute_method(
            "GET", bucket_name, object_name, query=ACL_QUERY, operation="GetObjectAcl"
        )
        if response.status_code != 200:
            raise http_resp_to_error_response(response, bucket_name, object_name)
        return response.text

    async def get_object_acl(self, bucket_name: str, object_name: str) -> ObjectInfo:
        """Fetch an object's metadata with its ACL merged in.

        The owner and grants are copied onto the ObjectInfo returned by
        ``stat_object``. When the grants match a canned ACL, its name is
        added under ``X-Amz-Acl``; otherwise each ``X-Amz-Grant-*`` header
        derived from the grants replaces any same-named metadata entry.

        Implements: GET /{bucket}/{key}?acl

        Args:
            bucket_name: The bucket name.
            object_name: The object key.

        Returns:
            The object's metadata including owner, grants and ACL headers.

        Raises:
            S3Error: If the ACL request or the metadata request fails.
            xml.etree.ElementTree.ParseError: If the ACL body is not XML.
        """
        body = await self.get_object_acl_string(bucket_name, object_name)
        policy = policy_from_xml(body)

        info = await self.client.stat_object(bucket_name, object_name)
        info.owner.id = policy.owner.id
        info.owner.display_name = policy.owner.display_name
        info.grants.extend(policy.grants)

        canned = get_canned_acl(policy)
        if canned:
            info.add_metadata(CANNED_ACL_HEADER, canned)
            return info

        for header, values in get_amz_grant_acl(policy).items():
            info.metadata[header] = values
        return info

    async def put_object_acl(
        self, bucket_name: str, object_name: str, policy: AccessControlPolicy
    ) -> None:
        """Encode a policy and set it as the object's ACL.

        Implements: PUT /{bucket}/{key}?acl
        """
        await self.put_object_acl_string(bucket_name, object_name, policy_to_xml(policy))

    async def put_object_acl_string(self, bucket_name: str, object_name: str, acl: str) -> None:
        """Set an object's ACL from an AccessControlPolicy XML string.

        Implements: PUT /{bucket}/{key}?acl

        Raises:
            S3Error: On any non-200 response.
        """
        validate_bucket_name(bucket_name)
        validate_object_name(object_name)
        response = await self.client.execute_method(
            "PUT",
            bucket_name,
            object_name,
            query=ACL_QUERY,
            content=acl.encode("utf-8"),
            operation="PutObjectAcl",
        )
        if response.status_code != 200:
            raise http_resp_to_error_response(response, bucket_name, object_name)
        logger.info("Updated ACL of object %s/%s", bucket_name, object_name)
