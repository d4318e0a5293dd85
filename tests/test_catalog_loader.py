"""Tests for reading catalog tables from files and URLs."""

import httpx
import pytest

from nutri_catalog import config
from nutri_catalog.exceptions import CatalogSourceError
from nutri_catalog.services import CatalogStore, load_catalog, load_catalog_dir, read_table_text

from conftest import MASTER_CSV, PORTION_CSV


def _client(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


# ── Sources ──────────────────────────────────────────────────────────


class TestReadTableText:

    def test_url(self):
        def handler(request):
            assert request.url.path == "/catalog/master.csv"
            return httpx.Response(200, text=MASTER_CSV)

        with _client(handler) as client:
            text = read_table_text("https://example.org/catalog/master.csv", client=client)
        assert text == MASTER_CSV

    def test_url_http_error_status(self):
        with _client(lambda request: httpx.Response(404)) as client:
            with pytest.raises(CatalogSourceError, match="HTTP 404"):
                read_table_text("https://example.org/missing.csv", client=client)

    def test_url_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with _client(handler) as client:
            with pytest.raises(CatalogSourceError):
                read_table_text("http://example.org/master.csv", client=client)

    def test_file_with_bom(self, tmp_path):
        path = tmp_path / "master.csv"
        path.write_text("\ufeff" + MASTER_CSV, encoding="utf-8")
        text = read_table_text(path)
        assert text.startswith("uid,")

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogSourceError):
            read_table_text(tmp_path / "nope.csv")


# ── Loading ──────────────────────────────────────────────────────────


class TestLoadCatalog:

    def test_only_given_tables_are_loaded(self):
        store = CatalogStore()
        results = load_catalog(store, master=MASTER_CSV)
        assert list(results) == ["master"]
        assert results["master"].record_count == 6
        assert not store.status().synonyms_loaded

    def test_rejected_table_leaves_index_unchanged(self, loaded_store):
        results = load_catalog(loaded_store, master="uid,nome\nX1,Foo\n")
        assert not results["master"].success
        assert loaded_store.get_by_id("T001") is not None
        assert loaded_store.status().master_count == 6

    def test_rejected_portions_keep_previous_rows(self, loaded_store):
        load_catalog(loaded_store, portions="uid,label\nT002,Prato\n")
        assert len(loaded_store.get_portions("T002")) == 2

    def test_directory(self, tmp_path):
        (tmp_path / config.MASTER_FILE).write_text(MASTER_CSV, encoding="utf-8")
        (tmp_path / config.PORTION_FILE).write_text(PORTION_CSV, encoding="utf-8")

        store = CatalogStore()
        results = load_catalog_dir(store, tmp_path)

        assert set(results) == {"master", "portions"}
        assert store.is_loaded
        assert store.status().portion_count == 2
        assert not store.status().nutrients_loaded
