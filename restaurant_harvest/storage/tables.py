from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence, TypeVar

import pandas as pd
from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


def _read_frame(path: Path) -> pd.DataFrame:
    def _skip_bad_line(fields: list[str]) -> None:
        logger.warning("Skipping malformed row in %s (%d fields): %r", path, len(fields), fields)
        return None

    # The python engine is the one that hands bad lines to a callable.
    # Only empty cells are missing; text such as "NA" or "None" is kept.
    return pd.read_csv(
        path,
        engine="python",
        on_bad_lines=_skip_bad_line,
        keep_default_na=False,
        na_values=[""],
    )


def load_table(path: Path, model: type[RecordT]) -> list[RecordT]:
    """
    Load a CSV table into a list of ``model`` records.

    A missing file is an empty table. Empty cells fall back to the model's
    defaults; rows that fail validation are logged and skipped.
    """
    path = Path(path)
    if not path.is_file():
        logger.info("Table not found: %s", path)
        return []

    try:
        df = _read_frame(path)
    except pd.errors.EmptyDataError:
        logger.warning("Table %s is empty", path)
        return []

    df = df.astype(object).where(df.notna(), None)

    records: list[RecordT] = []
    for index, row in enumerate(df.to_dict("records")):
        values = {key: value for key, value in row.items() if value is not None}
        try:
            records.append(model.model_validate(values))
        except ValidationError as exc:
            logger.warning(
                "Skipping invalid row %d in %s: %s", index + 2, path, exc.errors(include_url=False)
            )

    logger.info("Loaded %d rows from %s", len(records), path)
    return records


def save_table(path: Path, records: Sequence[BaseModel]) -> Path:
    """Rewrite ``path`` with a header row and one line per record."""
    path = Path(path)
    if not records:
        logger.info("No data to write to %s", path)
        return path

    columns = list(type(records[0]).model_fields)
    df = pd.DataFrame([record.model_dump() for record in records], columns=columns)

    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(path.name + ".tmp")
    df.to_csv(tmp_path, index=False)
    tmp_path.replace(path)

    logger.info("Wrote %d rows to %s", len(records), path)
    return path
