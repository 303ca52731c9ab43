"""Tests for reading rows from CSV text, local files and published sheets."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from core.errors import SheetFetchError
from core.sheet_reader import fetch_rows, parse_csv_text, read_rows


class TestParseCsvText:
    """CSV text to rows."""

    def test_header_keys(self):
        rows = parse_csv_text('include,name,geometry\ny,A,"[[0,0],[1,1]]"\n')
        assert rows == [{'include': 'y', 'name': 'A', 'geometry': '[[0,0],[1,1]]'}]

    def test_short_rows_have_none(self):
        rows = parse_csv_text('include,name,description\ny,A\n')
        assert rows[0]['description'] is None

    def test_byte_order_mark_stripped(self):
        rows = parse_csv_text('\ufeffinclude,name\ny,A\n')
        assert 'include' in rows[0]

    def test_blank_lines_skipped(self):
        rows = parse_csv_text('include,name\ny,A\n\n\nn,B\n')
        assert [row['name'] for row in rows] == ['A', 'B']


class TestReadRows:
    """Local seed files."""

    def test_reads_file(self, tmp_path):
        path = tmp_path / 'seed.csv'
        path.write_text('lat,lon\n41.0,-4.0\n', encoding='utf-8')
        assert read_rows(path) == [{'lat': '41.0', 'lon': '-4.0'}]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_rows(tmp_path / 'missing.csv')


class TestFetchRows:
    """Published sheet download via requests."""

    def test_fetch_success(self):
        response = MagicMock()
        response.text = 'include,name\ny,A\n'
        with patch('core.sheet_reader.requests.get', return_value=response) as get:
            rows = fetch_rows('https://sheets.example/a.csv', timeout=5)
        get.assert_called_once_with('https://sheets.example/a.csv', timeout=5)
        response.raise_for_status.assert_called_once()
        assert rows == [{'include': 'y', 'name': 'A'}]

    def test_timeout_wrapped(self):
        with patch('core.sheet_reader.requests.get', side_effect=requests.exceptions.Timeout()):
            with pytest.raises(SheetFetchError) as exc_info:
                fetch_rows('https://sheets.example/a.csv', timeout=5)
        assert exc_info.value.url == 'https://sheets.example/a.csv'
        assert 'timed out' in str(exc_info.value)

    def test_http_error_wrapped(self):
        response = MagicMock()
        response.raise_for_status.side_effect = requests.exceptions.HTTPError('404 Client Error')
        with patch('core.sheet_reader.requests.get', return_value=response):
            with pytest.raises(SheetFetchError):
                fetch_rows('https://sheets.example/missing.csv')

    def test_connection_error_wrapped(self):
        with patch('core.sheet_reader.requests.get',
                   side_effect=requests.exceptions.ConnectionError('refused')):
            with pytest.raises(SheetFetchError):
                fetch_rows('https://sheets.example/a.csv')
