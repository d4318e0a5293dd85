"""Tests for the nutri-catalog command line."""

import sys

import pytest

from nutri_catalog import cli_catalog, config

from conftest import MASTER_CSV, SYNONYM_CSV


@pytest.fixture
def catalog_dir(tmp_path):
    (tmp_path / config.MASTER_FILE).write_text(MASTER_CSV, encoding="utf-8")
    (tmp_path / config.SYNONYM_FILE).write_text(SYNONYM_CSV, encoding="utf-8")
    return tmp_path


def _run(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["nutri-catalog", *args])
    return cli_catalog.main()


def test_search(monkeypatch, catalog_dir):
    assert _run(monkeypatch, "arroz", "--data-dir", str(catalog_dir)) == 0


def test_category(monkeypatch, catalog_dir):
    assert _run(monkeypatch, "--category", "frutas", "--data-dir", str(catalog_dir)) == 0


def test_substitutes(monkeypatch, catalog_dir):
    assert _run(monkeypatch, "--substitutes", "T002", "--kcal", "260", "--data-dir", str(catalog_dir)) == 0


def test_substitutes_need_kcal(monkeypatch, catalog_dir):
    assert _run(monkeypatch, "--substitutes", "T002", "--data-dir", str(catalog_dir)) == 1


def test_unknown_food(monkeypatch, catalog_dir):
    assert _run(monkeypatch, "--substitutes", "nope", "--kcal", "100", "--data-dir", str(catalog_dir)) == 1


def test_missing_directory(monkeypatch, tmp_path):
    assert _run(monkeypatch, "arroz", "--data-dir", str(tmp_path / "missing")) == 1
