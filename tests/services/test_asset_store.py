"""Tests for the on-disk asset store."""

from blogsync.services.asset_store import AssetStore, guess_extension, resolve_local_asset


def test_upload_writes_file_and_row(db_session, tmp_path):
    store = AssetStore(db_session, tmp_path / "media")

    asset = store.upload(b"abc", name="My Cover!", extension=".png", alternative_text="alt")

    assert asset.id is not None
    assert asset.file_name.startswith("My_Cover_")
    assert asset.file_name.endswith(".png")
    assert asset.mime_type == "image/png"
    assert asset.size == 3
    assert asset.url == f"/uploads/{asset.file_name}"
    assert (tmp_path / "media" / asset.file_name).read_bytes() == b"abc"


def test_guess_extension():
    assert guess_extension("image/png") == ".png"
    assert guess_extension("image/png; charset=binary") == ".png"
    assert guess_extension(None) == ".jpg"
    assert guess_extension("application/x-unknown-thing") == ".jpg"


def test_resolve_local_asset(tmp_path):
    assert resolve_local_asset(tmp_path, "/uploads/a.jpg") == (tmp_path / "a.jpg").resolve()
    assert resolve_local_asset(tmp_path, "/static/a.jpg") is None
    assert resolve_local_asset(tmp_path, "/uploads/../../etc/passwd") is None
