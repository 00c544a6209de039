import io
import logging
import os
import re
from typing import Any, Optional

import httpx
import pandas as pd

from ..config import get_settings
from ..exceptions import DataLoadError
from .dataset import Dataset, is_null

logger = logging.getLogger(__name__)

_INT_RE = re.compile(r"^[+-]?\d+$")
_FLOAT_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


def coerce_value(raw: Optional[str]) -> Any:
    """
    Coerce one CSV cell: blank -> None, true/false -> bool, then int, then
    float, else the original string.
    """
    if not isinstance(raw, str):
        # short rows come back from the parser as NaN
        return None if is_null(raw) else raw
    text = raw.strip()
    if text == "":
        return None

    lowered = text.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False

    if _INT_RE.match(text):
        return int(text)
    if _FLOAT_RE.match(text):
        return float(text)
    # words such as "nan" or "inf" stay text
    return raw


def _strip_comment_lines(text: str) -> str:
    return "\n".join(
        line for line in text.splitlines() if not line.lstrip().startswith("#")
    )


def parse_csv_text(text: str, source: Optional[str] = None) -> Dataset:
    """
    Parse CSV text into a Dataset, ignoring lines that start with ``#``.

    The first line is the header. Rows with more fields than the header are
    rejected; shorter rows are padded with null.
    """
    body = _strip_comment_lines(text)
    if not body.strip():
        raise DataLoadError("CSV input is empty", {"source": source})

    try:
        # with header=None a row wider than the first line is a ParserError
        raw = pd.read_csv(
            io.StringIO(body),
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise DataLoadError(f"Could not parse CSV: {e}", {"source": source}) from e

    header = [str(c).strip() for c in raw.iloc[0].tolist()]
    if len(set(header)) != len(header):
        dupes = sorted({name for name in header if header.count(name) > 1})
        raise DataLoadError(f"Duplicate column names: {dupes}", {"source": source})

    rows = raw.iloc[1:]
    try:
        records = [
            {col: coerce_value(value) for col, value in zip(header, row)}
            for row in rows.itertuples(index=False, name=None)
        ]
        if not records:
            return Dataset(pd.DataFrame(columns=header), source=source)
        dataset = Dataset.from_records(records, source=source)
    except (ValueError, TypeError, OverflowError) as e:
        raise DataLoadError(f"Could not build a table from CSV: {e}", {"source": source}) from e

    logger.info(f"Parsed CSV from {source or 'text'}: {dataset.shape[0]} rows x {dataset.shape[1]} columns")
    return dataset


def load_csv_file(path: str) -> Dataset:
    if not os.path.exists(path):
        raise DataLoadError(f"File not found: {path}", {"source": path})
    try:
        with open(path, "r", encoding="utf-8-sig") as handle:
            text = handle.read()
    except (OSError, UnicodeDecodeError) as e:
        raise DataLoadError(f"Could not read file {path}: {e}", {"source": path}) from e
    return parse_csv_text(text, source=os.path.basename(path))


async def fetch_csv_text(url: str, client: Optional[httpx.AsyncClient] = None) -> str:
    """Download CSV text. A caller-provided client is used as-is and left open."""
    timeout = get_settings().HTTP_TIMEOUT
    try:
        if client is not None:
            response = await client.get(url, timeout=timeout)
            response.raise_for_status()
            return response.text

        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as owned:
            response = await owned.get(url)
            response.raise_for_status()
            return response.text
    except httpx.HTTPError as e:
        raise DataLoadError(f"Failed to fetch {url}: {e}", {"source": url}) from e


async def load_csv_url(url: str, client: Optional[httpx.AsyncClient] = None) -> Dataset:
    text = await fetch_csv_text(url, client=client)
    return parse_csv_text(text, source=url)
