"""Read-only import of study sets from spreadsheets and JSON files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd
import structlog

from quizdeck.study_set import StudySet, StudySetError, build_study_set

logger = structlog.get_logger(__name__)

PathLike = Union[str, Path]

SHEET_SUFFIXES = {".xlsx", ".xls", ".csv"}
# Column pairs tried in order: vocabulary list headers, then plain headers.
COLUMN_PAIRS: Sequence[Tuple[str, str]] = (
    ("Vocab:", "Translation:"),
    ("term", "definition"),
    ("term", "def"),
    ("Term", "Definition"),
)
DECK_INFO_KEY = "XXX"


def _resolve_columns(frame: pd.DataFrame, path: Path) -> Tuple[str, str]:
    for term_column, definition_column in COLUMN_PAIRS:
        if term_column in frame.columns and definition_column in frame.columns:
            return term_column, definition_column
    raise StudySetError(
        f"{path.name} has no term/definition columns (found: {', '.join(map(str, frame.columns))})"
    )


def _cell_text(value: Any) -> str:
    if value is None or pd.isna(value):
        return ""
    return str(value).strip()


def read_vocab_sheet(path: PathLike, title: Optional[str] = None) -> StudySet:
    """Build a study set from an Excel or CSV vocabulary list.

    Rows are read until the first blank term, like the vocabulary list
    templates which may carry notes underneath the table.
    """

    sheet_path = Path(path)
    if not sheet_path.exists():
        raise FileNotFoundError(f"Vocab list file not found: {sheet_path}")
    if sheet_path.suffix.lower() == ".csv":
        frame = pd.read_csv(sheet_path)
    else:
        frame = pd.read_excel(sheet_path)

    term_column, definition_column = _resolve_columns(frame, sheet_path)
    entries: List[Dict[str, str]] = []
    for _, row in frame.iterrows():
        term = _cell_text(row.get(term_column))
        if not term:
            break
        entries.append({"term": term, "def": _cell_text(row.get(definition_column))})

    study_set = build_study_set(title or sheet_path.stem, entries)
    logger.info("deck_imported", path=str(sheet_path), card_count=len(study_set))
    return study_set


def _sets_from_payload(payload: Any, default_title: str) -> List[StudySet]:
    if isinstance(payload, list):
        if not all(isinstance(entry, Mapping) for entry in payload):
            raise StudySetError("Every study set in a JSON list must be an object")
        return [StudySet.from_storage(entry) for entry in payload]
    if not isinstance(payload, Mapping):
        raise StudySetError("Study set JSON must be an object or a list of objects")
    if "sets" in payload:
        return _sets_from_payload(payload["sets"], default_title)
    if "cards" in payload:
        return [StudySet.from_storage(payload)]

    # Vocabulary deck: {word: {"definition": ..., "card_id": ...}, "XXX": {"Name": ...}}
    info = payload.get(DECK_INFO_KEY) or {}
    if not isinstance(info, Mapping):
        raise StudySetError(f"Deck info under '{DECK_INFO_KEY}' must be an object")
    entries = []
    for word, data in payload.items():
        if word == DECK_INFO_KEY:
            continue
        data = data if isinstance(data, Mapping) else {}
        entries.append(
            {
                "id": data.get("card_id") or word,
                "term": word,
                "def": data.get("definition") or "",
            }
        )
    return [build_study_set(info.get("Name") or default_title, entries)]


def load_study_sets(path: PathLike) -> List[StudySet]:
    """Read one or more study sets from a JSON file."""

    json_path = Path(path)
    if not json_path.exists():
        raise FileNotFoundError(f"Study set file not found: {json_path}")
    with json_path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    sets = _sets_from_payload(payload, json_path.stem)
    logger.info("study_sets_loaded", path=str(json_path), set_count=len(sets))
    return sets


def read_study_sets(path: PathLike) -> List[StudySet]:
    """Dispatch on the file suffix to the spreadsheet or JSON reader."""

    suffix = Path(path).suffix.lower()
    if suffix in SHEET_SUFFIXES:
        return [read_vocab_sheet(path)]
    if suffix == ".json":
        return load_study_sets(path)
    raise StudySetError(f"Unsupported study set format: {suffix or Path(path).name}")


__all__ = ["load_study_sets", "read_study_sets", "read_vocab_sheet"]
