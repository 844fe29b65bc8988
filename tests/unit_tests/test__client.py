import pytest
from fastapi.testclient import TestClient

from uploads_api.client import FilesClient, FilesClientError

TEST_FILE_CONTENT = b"col_a,col_b\n1,2\n"


@pytest.fixture
def files_client(client: TestClient) -> FilesClient:
    return FilesClient("http://testserver", session=client)


def test__upload_and_download(files_client: FilesClient, tmp_path):
    path = tmp_path / "table.csv"
    path.write_bytes(TEST_FILE_CONTENT)

    file_id = files_client.upload(path)

    record = files_client.get_file(file_id)
    assert record["fileName"] == "table.csv"
    assert record["fileType"] == "text/csv"
    assert record["status"] == "uploaded"
    assert record["fileSize"] == len(TEST_FILE_CONTENT)
    assert files_client.download(file_id) == TEST_FILE_CONTENT


def test__upload_without_confirmation_stays_uploading(files_client: FilesClient, tmp_path):
    path = tmp_path / "blob"
    path.write_bytes(b"\x00\x01")

    file_id = files_client.upload(path, confirm=False)

    record = files_client.get_file(file_id)
    assert record["fileType"] == "application/octet-stream"
    assert record["status"] == "uploading"


def test__list_and_delete(files_client: FilesClient):
    first = files_client.request_upload("a.txt", "text/plain")["fileId"]
    second = files_client.request_upload("a.txt", "text/plain")["fileId"]

    assert {record["fileId"] for record in files_client.list_files()} == {first, second}

    assert files_client.delete_file(first) == "File deleted successfully"
    assert [record["fileId"] for record in files_client.list_files()] == [second]


def test__errors_raise_files_client_error(files_client: FilesClient):
    with pytest.raises(FilesClientError) as exc_info:
        files_client.get_file("missing")
    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "File not found"

    with pytest.raises(FilesClientError) as exc_info:
        files_client.request_upload("", "text/plain")
    assert exc_info.value.status_code == 400
