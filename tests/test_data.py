import math

import httpx
import numpy as np
import pandas as pd
import pytest

from exotab.data.dataset import Dataset
from exotab.data.loader import coerce_value, fetch_csv_text, load_csv_file, load_csv_url, parse_csv_text
from exotab.data.sample import SAMPLE_SOURCE, sample_records
from exotab.exceptions import DataLoadError


# ---------------------------------------------------------------------------
# Dataset
# ---------------------------------------------------------------------------

def test_from_records_normalizes_columns():
    ds = Dataset.from_records([
        {"i": 1, "f": 1.5, "b": True, "s": "x"},
        {"i": 2, "f": None, "b": False, "s": None},
    ])
    df = ds.frame
    assert ds.columns == ["i", "f", "b", "s"]
    assert df["i"].dtype == np.int64
    assert df["f"].dtype == np.float64
    assert df["b"].dtype == bool
    assert df["s"].dtype == object
    assert math.isnan(df["f"].iloc[1])


def test_int_column_with_nulls_becomes_float():
    ds = Dataset.from_records([{"a": 1}, {"a": None}])
    assert ds.frame["a"].dtype == np.float64


def test_bool_column_with_nulls_stays_object():
    ds = Dataset.from_records([{"a": True}, {"a": None}])
    assert ds.frame["a"].dtype == object
    assert ds.to_records() == [{"a": True}, {"a": None}]


def test_missing_keys_become_null_and_order_is_first_seen():
    ds = Dataset.from_records([{"a": 1}, {"b": "x", "a": 2}])
    assert ds.columns == ["a", "b"]
    assert ds.to_records() == [{"a": 1, "b": None}, {"a": 2, "b": "x"}]


def test_frame_is_a_copy():
    ds = Dataset.from_records([{"a": 1}, {"a": 2}])
    df = ds.frame
    df.loc[0, "a"] = 99
    assert ds.to_records()[0]["a"] == 1


def test_to_records_returns_python_scalars():
    ds = Dataset.from_frame(pd.DataFrame({"a": np.array([1, 2], dtype=np.int32), "b": [0.5, np.nan]}))
    records = ds.to_records()
    assert type(records[0]["a"]) is int
    assert records[1]["b"] is None


def test_duplicate_column_names_rejected():
    df = pd.DataFrame([[1, 2]], columns=["a", "a"])
    with pytest.raises(ValueError):
        Dataset(df)


def test_equality_and_shape(sample):
    assert sample.shape == (15, 7)
    assert len(sample) == 15
    assert sample == Dataset.from_records(sample_records(), source="other")
    assert sample != Dataset.from_records(sample_records()[:3])
    assert not Dataset().shape[0]
    assert Dataset().is_empty


# ---------------------------------------------------------------------------
# Value coercion
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("raw, expected", [
    ("", None),
    ("   ", None),
    ("true", True),
    ("FALSE", False),
    (" 42 ", 42),
    ("-3", -3),
    ("2.5", 2.5),
    ("1e3", 1000.0),
    ("hello", "hello"),
    (" padded ", " padded "),
    ("nan", "nan"),
])
def test_coerce_value(raw, expected):
    value = coerce_value(raw)
    assert value == expected
    assert type(value) is type(expected)


# ---------------------------------------------------------------------------
# CSV parsing
# ---------------------------------------------------------------------------

def test_parse_csv_text_coerces_and_skips_comments():
    text = "# exported catalogue\nname , period,confirmed\nKepler-1b,2.47,true\nKepler-2b,,false\n"
    ds = parse_csv_text(text, source="paste")
    assert ds.columns == ["name", "period", "confirmed"]
    assert ds.source == "paste"
    assert ds.to_records() == [
        {"name": "Kepler-1b", "period": 2.47, "confirmed": True},
        {"name": "Kepler-2b", "period": None, "confirmed": False},
    ]


def test_parse_csv_text_mixed_column_is_object():
    ds = parse_csv_text("a\n1\nx\n")
    assert ds.frame["a"].dtype == object
    assert ds.to_records() == [{"a": 1}, {"a": "x"}]


def test_parse_header_only():
    ds = parse_csv_text("a,b\n")
    assert ds.columns == ["a", "b"]
    assert ds.is_empty


@pytest.mark.parametrize("text", ["", "   \n", "# only a comment\n"])
def test_parse_empty_input_raises(text):
    with pytest.raises(DataLoadError):
        parse_csv_text(text)


def test_parse_malformed_rows_raise():
    with pytest.raises(DataLoadError) as exc:
        parse_csv_text("a,b\n1,2,3,4\n")
    assert "Could not parse CSV" in exc.value.message


def test_parse_rows_wider_than_header_raise():
    with pytest.raises(DataLoadError) as exc:
        parse_csv_text("a,b\n1,2,3\n4,5,6\n")
    assert "Could not parse CSV" in exc.value.message


def test_parse_short_rows_are_padded_with_null():
    ds = parse_csv_text("a,b,c\n1,2\n3,4,5\n")
    assert ds.to_records() == [{"a": 1, "b": 2, "c": None}, {"a": 3, "b": 4, "c": 5.0}]


def test_parse_duplicate_header_raises():
    with pytest.raises(DataLoadError) as exc:
        parse_csv_text("a, a\n1,2\n")
    assert "Duplicate column names" in exc.value.message


def test_parse_integers_beyond_int64_become_float():
    ds = parse_csv_text("kepid,koi_period\n12345678901234567890,1.5\n2,2.5\n")
    assert ds.frame["kepid"].dtype == np.float64
    assert ds.frame["kepid"].iloc[0] == pytest.approx(1.2345678901234567e19)


def test_parse_wraps_unexpected_errors(monkeypatch):
    def explode(raw):
        raise TypeError("cannot coerce")

    monkeypatch.setattr("exotab.data.loader.coerce_value", explode)
    with pytest.raises(DataLoadError) as exc:
        parse_csv_text("a\n1\n")
    assert "cannot coerce" in exc.value.message


def test_load_csv_file(tmp_path):
    path = tmp_path / "planets.csv"
    path.write_text("id,radius\n1,1.2\n2,0.8\n", encoding="utf-8")
    ds = load_csv_file(str(path))
    assert ds.shape == (2, 2)
    assert ds.source == "planets.csv"


def test_load_csv_file_missing(tmp_path):
    with pytest.raises(DataLoadError) as exc:
        load_csv_file(str(tmp_path / "nope.csv"))
    assert exc.value.details["source"].endswith("nope.csv")


# ---------------------------------------------------------------------------
# URL loading
# ---------------------------------------------------------------------------

def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_load_csv_url():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/data.csv"
        return httpx.Response(200, text="x,y\n1,2\n3,4\n")

    async with _client(handler) as client:
        ds = await load_csv_url("https://example.org/data.csv", client=client)
    assert ds.to_records() == [{"x": 1, "y": 2}, {"x": 3, "y": 4}]
    assert ds.source == "https://example.org/data.csv"


@pytest.mark.asyncio
async def test_fetch_csv_text_http_error():
    async with _client(lambda request: httpx.Response(404, text="missing")) as client:
        with pytest.raises(DataLoadError) as exc:
            await fetch_csv_text("https://example.org/missing.csv", client=client)
    assert "missing.csv" in exc.value.message


def test_sample_source_name(sample):
    assert sample.source == SAMPLE_SOURCE
