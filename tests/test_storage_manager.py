"""
Tests for pre-signed upload URL generation.
"""
import re
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from blog_platform.managers.storage_manager import StorageManager
from blog_platform.utils.errors import DependencyError


def test_object_key_format():
    assert re.match(r"^[A-Za-z0-9]{21}-\d{13}\.jpeg$", StorageManager.new_object_key())


def test_generate_upload_url_signs_jpeg_put():
    client = MagicMock()
    client.generate_presigned_url.return_value = "https://signed.example.com/upload"
    manager = StorageManager(client=client, bucket="uploads", expires_in=1000)

    assert manager.generate_upload_url() == "https://signed.example.com/upload"

    args, kwargs = client.generate_presigned_url.call_args
    assert args == ("put_object",)
    assert kwargs["ExpiresIn"] == 1000
    assert kwargs["Params"]["Bucket"] == "uploads"
    assert kwargs["Params"]["ContentType"] == "image/jpeg"
    assert kwargs["Params"]["Key"].endswith(".jpeg")


def test_generate_upload_url_failure_is_dependency_error():
    client = MagicMock()
    client.generate_presigned_url.side_effect = ClientError(
        {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject"
    )
    manager = StorageManager(client=client, bucket="uploads", expires_in=1000)

    with pytest.raises(DependencyError):
        manager.generate_upload_url()
