from __future__ import annotations

import pytest

from hrm_system.core.exceptions import ExternalServiceError, ValidationError
from hrm_system.integrations.attachments import LocalAttachmentStorage


def test_save_writes_file_and_returns_url(tmp_path):
    storage = LocalAttachmentStorage(tmp_path / "uploads", base_url="/files/")

    stored = storage.save(b"hello", "../../etc/My Report.pdf", "application/pdf")

    assert stored.name == "etc_My_Report.pdf"
    assert stored.size == 5
    assert stored.content_type == "application/pdf"
    assert stored.url.startswith("/files/") and stored.url.endswith("_etc_My_Report.pdf")

    stored_name = stored.url.rsplit("/", 1)[1]
    assert storage.open_path(stored_name).read_bytes() == b"hello"


def test_same_filename_does_not_overwrite(tmp_path):
    storage = LocalAttachmentStorage(tmp_path)
    a = storage.save(b"one", "a.txt", "text/plain")
    b = storage.save(b"two", "a.txt", "text/plain")
    assert a.url != b.url


@pytest.mark.parametrize("data,filename", [(b"", "a.txt"), (b"x", ""), (b"x", "../..")])
def test_rejects_empty_or_unsafe_input(tmp_path, data, filename):
    with pytest.raises(ValidationError):
        LocalAttachmentStorage(tmp_path).save(data, filename, "text/plain")


def test_os_error_becomes_external_service_error(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("file in the way")

    with pytest.raises(ExternalServiceError):
        LocalAttachmentStorage(blocker).save(b"x", "a.txt", "text/plain")


def test_open_path_rejects_missing_files(tmp_path):
    with pytest.raises(FileNotFoundError):
        LocalAttachmentStorage(tmp_path).open_path("missing.txt")
