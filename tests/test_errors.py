"""Tests for S3 error translation."""

import httpx
import pytest

from s3acl.errors import (
    AccessDenied,
    InvalidBucketName,
    MalformedACLError,
    NoSuchBucket,
    NoSuchKey,
    S3Error,
    http_resp_to_error_response,
)


def _response(status: int, content: bytes = b"", headers: dict | None = None) -> httpx.Response:
    return httpx.Response(
        status,
        content=content,
        headers=headers,
        request=httpx.Request("GET", "http://s3.test/b/k?acl="),
    )


class TestErrorBody:
    """Responses carrying an S3 <Error> document."""

    def test_parses_error_fields(self):
        """Code, message and identifiers come from the body."""
        body = (
            b'<?xml version="1.0" encoding="UTF-8"?>'
            b"<Error><Code>AccessDenied</Code><Message>Access Denied</Message>"
            b"<Resource>/b/k</Resource><RequestId>RID</RequestId><HostId>HID</HostId></Error>"
        )
        err = http_resp_to_error_response(_response(403, body), "b", "k")
        assert isinstance(err, AccessDenied)
        assert err.code == "AccessDenied"
        assert err.message == "Access Denied"
        assert err.resource == "/b/k"
        assert err.request_id == "RID"
        assert err.host_id == "HID"
        assert err.http_status == 403
        assert err.bucket_name == "b"
        assert err.object_name == "k"

    def test_unknown_code_uses_base_class(self):
        """Codes without a dedicated class produce a plain S3Error."""
        body = b"<Error><Code>SlowDown</Code><Message>Reduce your request rate.</Message></Error>"
        err = http_resp_to_error_response(_response(503, body), "b")
        assert type(err) is S3Error
        assert err.code == "SlowDown"
        assert err.message == "Reduce your request rate."

    def test_malformed_acl_code(self):
        """MalformedACLError responses map to their class."""
        body = b"<Error><Code>MalformedACLError</Code><Message>bad</Message></Error>"
        err = http_resp_to_error_response(_response(400, body), "b", "k")
        assert isinstance(err, MalformedACLError)

    def test_header_ids_used_when_body_lacks_them(self):
        """Request and host IDs fall back to response headers."""
        body = b"<Error><Code>NoSuchKey</Code><Message>m</Message></Error>"
        headers = {"x-amz-request-id": "HDR-RID", "x-amz-id-2": "HDR-HID"}
        err = http_resp_to_error_response(_response(404, body, headers), "b", "k")
        assert err.request_id == "HDR-RID"
        assert err.host_id == "HDR-HID"


class TestSynthesizedErrors:
    """Responses without a usable body."""

    @pytest.mark.parametrize(
        "status,object_name,error_cls,code",
        [
            (404, "", NoSuchBucket, "NoSuchBucket"),
            (404, "k", NoSuchKey, "NoSuchKey"),
            (403, "k", AccessDenied, "AccessDenied"),
            (409, "", S3Error, "Conflict"),
            (412, "k", S3Error, "PreconditionFailed"),
        ],
    )
    def test_status_mapping(self, status, object_name, error_cls, code):
        """Known statuses map to S3 error codes."""
        err = http_resp_to_error_response(_response(status), "b", object_name)
        assert isinstance(err, error_cls)
        assert err.code == code
        assert err.http_status == status
        assert err.bucket_name == "b"
        assert err.object_name == object_name

    def test_other_status_uses_reason(self):
        """Other statuses use the reason phrase."""
        err = http_resp_to_error_response(_response(500), "b")
        assert err.code == "Internal Server Error"
        assert err.http_status == 500

    def test_non_xml_body(self):
        """A non-XML body falls back to the status mapping."""
        err = http_resp_to_error_response(_response(404, b"not found"), "b", "k")
        assert isinstance(err, NoSuchKey)


class TestS3Error:
    """Tests for the exception classes themselves."""

    def test_default_message(self):
        """Subclasses provide a default message."""
        assert NoSuchBucket().message == "The specified bucket does not exist."

    def test_str_names_resource(self):
        """str() includes the code and the bucket/object."""
        err = NoSuchKey(bucket_name="b", object_name="k")
        assert str(err) == "NoSuchKey: The specified key does not exist. (resource: b/k)"

    def test_code_override(self):
        """An explicit code overrides the class code."""
        assert S3Error("m", code="SlowDown").code == "SlowDown"

    def test_is_exception(self):
        """Errors can be raised and caught as S3Error."""
        with pytest.raises(S3Error):
            raise InvalidBucketName(bucket_name="B")
