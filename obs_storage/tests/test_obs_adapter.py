from __future__ import annotations

import io

from obs_storage.storage import ObsAdapter, obs_adapter
from obs_storage.storage.options import WriteConfig
from obs_storage.storage.visibility import PUBLIC_GRANT_URI

from obs_storage.tests.consts import TEST_BUCKET, TEST_ENDPOINT


def test_write_then_read(adapter):
    result = adapter.write("file.txt", b"write", WriteConfig())
    assert result["path"] == "file.txt"
    assert result["size"] == 5
    assert adapter.read("file.txt")["contents"] == b"write"


def test_write_accepts_text(adapter):
    adapter.write("text.txt", "héllo", WriteConfig())
    assert adapter.read("text.txt")["contents"] == "héllo".encode("utf-8")


def test_write_stream_then_read(adapter):
    adapter.write_stream("file.txt", io.BytesIO(b"write"), WriteConfig())
    assert adapter.read("file.txt")["contents"] == b"write"


def test_update_and_update_stream(adapter):
    adapter.write("file.txt", b"write", WriteConfig())
    adapter.update("file.txt", b"update", WriteConfig())
    assert adapter.read("file.txt")["contents"] == b"update"

    adapter.update_stream("file.txt", io.BytesIO(b"streamed"), WriteConfig())
    assert adapter.read("file.txt")["contents"] == b"streamed"


def test_read_stream(adapter):
    result = adapter.read_stream("fixture/read.txt")
    assert result["path"] == "fixture/read.txt"
    assert result["stream"].read() == b"read-test"


def test_read_missing_file(adapter):
    assert adapter.read("missing.txt") is False
    assert adapter.read_stream("missing.txt") is False


def test_write_maps_mimetype_and_visibility(adapter, s3_client):
    result = adapter.write("page.html", b"<p>hi</p>", {"mimetype": "text/html", "visibility": "public"})
    assert result["mimetype"] == "text/html"
    assert result["visibility"] == "public"

    head = s3_client.head_object(Bucket=TEST_BUCKET, Key="page.html")
    assert head["ContentType"] == "text/html"
    assert adapter.get_visibility("page.html")["visibility"] == "public"


def test_write_passes_storage_class(adapter, s3_client):
    adapter.write("cold.bin", b"data", {"StorageClass": "STANDARD_IA"})
    head = s3_client.head_object(Bucket=TEST_BUCKET, Key="cold.bin")
    assert head["StorageClass"] == "STANDARD_IA"


def test_adapter_options_are_write_defaults(s3_client):
    adapter = ObsAdapter(s3_client, TEST_ENDPOINT, TEST_BUCKET, options={"visibility": "public"})
    adapter.write("default.txt", b"x")
    assert adapter.get_visibility("default.txt")["visibility"] == "public"

    adapter.write("override.txt", b"x", {"visibility": "private"})
    assert adapter.get_visibility("override.txt")["visibility"] == "private"


def test_copy(adapter):
    adapter.write("file.txt", b"write", WriteConfig())
    assert adapter.copy("file.txt", "copy.txt") is True
    assert adapter.read("copy.txt")["contents"] == b"write"
    assert adapter.has("file.txt")


def test_copy_keeps_metadata(adapter):
    adapter.write("file.txt", b"write", {"mimetype": "text/plain"})
    adapter.copy("file.txt", "copy.txt")
    assert adapter.get_mimetype("copy.txt")["mimetype"] == "text/plain"


def test_rename(adapter):
    adapter.write("from.txt", b"write", WriteConfig())
    assert adapter.has("from.txt")
    assert not adapter.has("to.txt")

    assert adapter.rename("from.txt", "to.txt") is True

    assert not adapter.has("from.txt")
    assert adapter.read("to.txt")["contents"] == b"write"


def test_rename_missing_source(adapter):
    assert adapter.rename("missing.txt", "to.txt") is False
    assert not adapter.has("to.txt")


def test_delete(adapter):
    adapter.write("file.txt", b"test", WriteConfig())
    assert adapter.has("file.txt")
    assert adapter.delete("file.txt") is True
    assert not adapter.has("file.txt")


def test_create_dir(adapter):
    result = adapter.create_dir("path/", WriteConfig())
    assert result == {"type": "dir", "path": "path"}
    assert adapter.get_metadata("path/") == {"type": "dir", "path": "path"}


def test_delete_dir(adapter):
    adapter.create_dir("path", WriteConfig())
    adapter.write("path/file.txt", b"test", WriteConfig())
    adapter.write("path/sub/nested.txt", b"test", WriteConfig())

    assert adapter.delete_dir("path") is True

    assert not adapter.has("path/")
    assert not adapter.has("path/file.txt")
    assert not adapter.has("path/sub/nested.txt")
    assert adapter.has("fixture/read.txt")


def test_get_metadata(adapter):
    metadata = adapter.get_metadata("fixture/read.txt")
    assert metadata["type"] == "file"
    assert metadata["path"] == "fixture/read.txt"
    assert metadata["mimetype"] == "text/plain"
    assert metadata["size"] == 9
    assert isinstance(metadata["timestamp"], int)


def test_metadata_accessors(adapter):
    assert adapter.get_size("fixture/read.txt")["size"] == 9
    assert adapter.get_mimetype("fixture/read.txt")["mimetype"] == "text/plain"
    assert adapter.get_timestamp("fixture/read.txt")["timestamp"] > 0


def test_has(adapter):
    assert adapter.has("fixture/read.txt") is True
    assert adapter.has("fixture/missing.txt") is False


def test_list_contents(adapter):
    adapter.write("path/file.txt", b"test", WriteConfig())
    adapter.write("path/sub/nested.txt", b"nested", WriteConfig())

    contents = adapter.list_contents("path")

    assert [entry["path"] for entry in contents] == ["path/file.txt", "path/sub"]
    assert contents[0]["type"] == "file"
    assert contents[0]["size"] == 4
    assert contents[1] == {"type": "dir", "path": "path/sub"}


def test_list_contents_recursive(adapter):
    adapter.write("path/file.txt", b"test", WriteConfig())
    adapter.write("path/sub/nested.txt", b"nested", WriteConfig())

    contents = adapter.list_contents("path/", True)

    files = [entry["path"] for entry in contents if entry["type"] == "file"]
    dirs = [entry["path"] for entry in contents if entry["type"] == "dir"]
    assert files == ["path/file.txt", "path/sub/nested.txt"]
    assert dirs == ["path/sub"]


def test_list_dir_objects_sends_marker_for_next_page(adapter, monkeypatch):
    monkeypatch.setattr(obs_adapter, "MAX_KEYS", 2)
    for name in ("a.txt", "b.txt", "c.txt", "d.txt"):
        adapter.write(f"path/{name}", b"x", WriteConfig())

    requests = []
    adapter.get_client().meta.events.register(
        "before-parameter-build.s3.ListObjects",
        lambda params, **kwargs: requests.append(dict(params)),
    )

    listing = adapter.list_dir_objects("path/")

    assert [obj["Key"] for obj in listing["objects"]] == ["path/a.txt", "path/b.txt", "path/c.txt", "path/d.txt"]
    assert len(requests) == 2
    assert requests[0]["MaxKeys"] == 2
    assert "Marker" not in requests[0]
    assert requests[1]["Marker"] == "path/b.txt"


def test_list_contents_empty_directory(adapter):
    assert adapter.list_contents("path1") == []


def test_list_contents_root(adapter):
    contents = adapter.list_contents()
    assert {"type": "dir", "path": "fixture"} in contents


def test_set_visibility(adapter):
    adapter.write("file.txt", b"write", {"visibility": "private"})
    assert adapter.get_visibility("file.txt") == {"path": "file.txt", "visibility": "private"}

    assert adapter.set_visibility("file.txt", "public") == {"path": "file.txt", "visibility": "public"}
    assert adapter.get_visibility("file.txt")["visibility"] == "public"

    adapter.set_visibility("file.txt", "private")
    assert adapter.get_visibility("file.txt")["visibility"] == "private"


def test_public_grant_is_all_users_read(adapter, s3_client):
    adapter.set_visibility("fixture/read.txt", "public")
    grants = s3_client.get_object_acl(Bucket=TEST_BUCKET, Key="fixture/read.txt")["Grants"]
    assert any(
        grant["Grantee"].get("URI") == PUBLIC_GRANT_URI and grant["Permission"] == "READ"
        for grant in grants
    )


def test_visibility_of_missing_file(adapter):
    assert adapter.get_visibility("missing.txt") is False
    assert adapter.set_visibility("missing.txt", "public") is False


def test_path_prefix(s3_client):
    adapter = ObsAdapter(s3_client, TEST_ENDPOINT, TEST_BUCKET, prefix="/tenant/")
    adapter.write("docs/file.txt", b"prefixed", WriteConfig())

    body = s3_client.get_object(Bucket=TEST_BUCKET, Key="tenant/docs/file.txt")["Body"].read()
    assert body == b"prefixed"
    assert adapter.get_metadata("docs/file.txt")["path"] == "docs/file.txt"
    assert [entry["path"] for entry in adapter.list_contents("docs")] == ["docs/file.txt"]
    assert adapter.list_contents() == [{"type": "dir", "path": "docs"}]


def test_bucket_accessors(adapter, s3_client):
    assert adapter.get_bucket() == TEST_BUCKET
    assert adapter.get_client() is s3_client

    s3_client.create_bucket(Bucket="other")
    adapter.set_bucket("other")
    assert adapter.get_bucket() == "other"
    assert adapter.has("fixture/read.txt") is False


def test_sign_url(adapter):
    url = adapter.sign_url("fixture/read.txt", 10)
    assert isinstance(url, str)
    assert "fixture/read.txt" in url


def test_sign_url_unsupported_method(adapter):
    assert adapter.sign_url("fixture/read.txt", 10, method="PATCH") is False
