"""S3-compatible error definitions for s3acl."""

import logging
from xml.etree import ElementTree

import httpx

from s3acl.xml_utils import find_text

logger = logging.getLogger(__name__)


class S3Error(Exception):
    """An S3-compatible error carrying the bucket/object it relates to.

    Attributes:
        code: The S3 error code string (e.g. "NoSuchBucket", "AccessDenied").
        message: Human-readable error description.
        bucket_name: The bucket the failed request targeted.
        object_name: The object the failed request targeted, if any.
        http_status: The HTTP status code of the response (0 for errors
            raised before any request was sent).
        request_id: The ``x-amz-request-id`` of the failed response.
        host_id: The ``x-amz-id-2`` of the failed response.
        resource: The resource the server reported, if any.
    """

    code = "S3Error"
    default_message = ""

    def __init__(
        self,
        message: str = "",
        *,
        code: str | None = None,
        bucket_name: str = "",
        object_name: str = "",
        http_status: int = 0,
        request_id: str = "",
        host_id: str = "",
        resource: str = "",
    ) -> None:
        """Initialize the S3 error.

        Args:
            message: Error description (defaults to the class message).
            code: S3 error code (defaults to the class code).
            bucket_name: Bucket context.
            object_name: Object context.
            http_status: HTTP status code.
            request_id: Server request identifier.
            host_id: Server host identifier.
            resource: Server-reported resource.
        """
        self.message = message or self.default_message
        super().__init__(self.message)
        if code is not None:
            self.code = code
        self.bucket_name = bucket_name
        self.object_name = object_name
        self.http_status = http_status
        self.request_id = request_id
        self.host_id = host_id
        self.resource = resource

    def __str__(self) -> str:
        target = self.bucket_name
        if self.object_name:
            target = f"{self.bucket_name}/{self.object_name}"
        return f"{self.code}: {self.message} (resource: {target or self.resource})"


# -- Common pre-defined errors ------------------------------------------------


class NoSuchBucket(S3Error):
    """The specified bucket does not exist."""

    code = "NoSuchBucket"
    default_message = "The specified bucket does not exist."


class NoSuchKey(S3Error):
    """The specified key does not exist."""

    code = "NoSuchKey"
    default_message = "The specified key does not exist."


class AccessDenied(S3Error):
    """Access denied error."""

    code = "AccessDenied"
    default_message = "Access Denied."


class MalformedACLError(S3Error):
    """The XML was well-formed but is not a valid AccessControlPolicy."""

    code = "MalformedACLError"
    default_message = (
        "The XML you provided was not well-formed or did not validate against our published schema."
    )


class InvalidBucketName(S3Error):
    """The specified bucket name is not valid."""

    code = "InvalidBucketName"
    default_message = "The specified bucket is not valid."


class InvalidObjectName(S3Error):
    """The specified object name is not valid."""

    code = "InvalidObjectName"
    default_message = "The specified object name is not valid."


_ERROR_CLASSES: dict[str, type[S3Error]] = {
    cls.code: cls
    for cls in (NoSuchBucket, NoSuchKey, AccessDenied, MalformedACLError)
}


def _synthesize(status: int, reason: str, object_name: str) -> tuple[str, str]:
    """Pick an error code and message for a response without an XML body."""
    if status == 404:
        if object_name:
            return NoSuchKey.code, NoSuchKey.default_message
        return NoSuchBucket.code, NoSuchBucket.default_message
    if status == 403:
        return AccessDenied.code, AccessDenied.default_message
    if status == 409:
        return "Conflict", "Bucket not empty."
    if status == 412:
        return "PreconditionFailed", "Pre condition failed."
    return reason or f"HTTP{status}", reason or f"Unexpected HTTP status {status}"


def http_resp_to_error_response(
    response: httpx.Response,
    bucket_name: str,
    object_name: str = "",
) -> S3Error:
    """Convert a non-success response into an ``S3Error``.

    The S3 ``<Error>`` document is used when the body carries one. Bodies
    that are empty (HEAD requests) or not parseable fall back to an error
    synthesized from the status code.

    Args:
        response: The fully read HTTP response.
        bucket_name: The bucket the request targeted.
        object_name: The object the request targeted, if any.

    Returns:
        The error to raise; its class follows the S3 error code.
    """
    status = response.status_code
    request_id = response.headers.get("x-amz-request-id", "")
    host_id = response.headers.get("x-amz-id-2", "")

    code = message = resource = ""
    body = response.content
    if body:
        try:
            root = ElementTree.fromstring(body)
        except ElementTree.ParseError:
            logger.debug("Non-XML error body for %s %s", status, response.url)
        else:
            code = find_text(root, "Code")
            message = find_text(root, "Message")
            resource = find_text(root, "Resource")
            request_id = find_text(root, "RequestId") or request_id
            host_id = find_text(root, "HostId") or host_id

    if not code:
        code, message = _synthesize(status, response.reason_phrase, object_name)

    error_cls = _ERROR_CLASSES.get(code, S3Error)
    return error_cls(
        message,
        code=code,
        bucket_name=bucket_name,
        object_name=object_name,
        http_status=status,
        request_id=request_id,
        host_id=host_id,
        resource=resource,
    )
