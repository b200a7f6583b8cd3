"""Export and import of progress history.

Export writes the live record plus every stored record. Import is
authoritative per date: each valid candidate overwrites whatever is stored
for its date as a whole record (no field-level merge). Candidates are
validated one by one; a bad one is skipped and counted, the rest still apply.
Only a structurally broken payload aborts the import, and it does so before
anything is written.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date, timezone
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import ValidationError

from hundreds.errors import HundredsError, InvalidImportFormatError, InvalidImportRecordError
from hundreds.progress.day_record import DayRecord
from hundreds.progress.engine import DayRecordEngine
from hundreds.transfer.schemas import ExerciseValues, ExportPayload
from hundreds.utils.timezone import parse_date_key

DEFAULT_EXPORT_VERSION = "1.0"


@dataclass
class ImportReport:
    """Summary of an import run.

    Attributes:
        imported: Records accepted and applied
        skipped: Records rejected by validation or whose write failed
        errors: One error per skipped record
    """

    imported: int = 0
    skipped: int = 0
    errors: list[HundredsError] = field(default_factory=list)


@dataclass(frozen=True)
class _Candidate:
    key: str
    values: Any


# Export


def _export_timestamp(engine: DayRecordEngine) -> str:
    now = engine.clock.now()
    if now.tzinfo is None:
        # Naive clock readings are local time
        now = now.astimezone()
    return now.astimezone(timezone.utc).isoformat()


def build_export(engine: DayRecordEngine, version: str = DEFAULT_EXPORT_VERSION) -> ExportPayload:
    """Snapshot live state and history into an export payload.

    Raises:
        StorageUnavailableError: If history cannot be read
    """
    with engine.lock:
        live = engine.current
        stored = engine.store.all()

    history = {record.date_key: ExerciseValues.from_record(record) for record in stored}
    if live.has_progress:
        history[live.date_key] = ExerciseValues.from_record(live)

    payload = ExportPayload(
        current_date=live.date_key,
        current_data=ExerciseValues.from_record(live),
        workout_history=dict(sorted(history.items())),
        version=version,
        export_date=_export_timestamp(engine),
    )
    logger.bind(records=len(history)).info("[EXPORT] Built export payload")
    return payload


def export_json(engine: DayRecordEngine, version: str = DEFAULT_EXPORT_VERSION) -> str:
    return json.dumps(build_export(engine, version).to_json_dict(), indent=2)


def default_export_filename(day: date) -> str:
    return f"hundreds-backup-{day.isoformat()}.json"


def write_export(engine: DayRecordEngine, destination: Path, version: str = DEFAULT_EXPORT_VERSION) -> Path:
    """Write an export file.

    Args:
        engine: Engine holding live state and the store
        destination: File path, or a directory to place the default file name in

    Returns:
        The path written
    """
    path = destination / default_export_filename(engine.today) if destination.is_dir() else destination
    path.write_text(export_json(engine, version), encoding="utf-8")
    logger.info(f"[EXPORT] Wrote export to {path}")
    return path


# Import


def _load_raw(raw: str | bytes | dict | list) -> dict | list:
    if isinstance(raw, (str, bytes)):
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise InvalidImportFormatError(f"Import file is not valid JSON: {e}") from e
    return raw


def _collect_candidates(data: Any) -> tuple[list[_Candidate], _Candidate | None]:
    """Split a payload into history candidates and the optional current-day candidate."""
    if isinstance(data, list):
        candidates = []
        for index, item in enumerate(data):
            key = item.get("date") if isinstance(item, dict) else None
            candidates.append(_Candidate(key=key if isinstance(key, str) else f"[{index}]", values=item))
        return candidates, None

    if not isinstance(data, dict):
        raise InvalidImportFormatError(f"Import file must be a JSON object or list, got {type(data).__name__}")

    history = data.get("workoutHistory")
    current = data.get("currentData")
    if history is None and current is None:
        raise InvalidImportFormatError("Import file has neither workoutHistory nor currentData")
    if history is not None and not isinstance(history, dict):
        raise InvalidImportFormatError("workoutHistory must be an object keyed by yyyy-MM-dd dates")

    candidates = [_Candidate(key=str(key), values=values) for key, values in (history or {}).items()]
    current_candidate = None
    if current is not None:
        current_key = data.get("currentDate")
        current_candidate = _Candidate(key=current_key if isinstance(current_key, str) else "currentDate", values=current)
    return candidates, current_candidate


def validate_candidate(key: str, values: Any) -> DayRecord:
    """Turn one candidate into a clamped DayRecord.

    Raises:
        InvalidImportRecordError: If the date key or any of the four values is invalid
    """
    try:
        day = parse_date_key(key)
    except (TypeError, ValueError) as e:
        raise InvalidImportRecordError(key, f"bad date key: {e}") from e
    if not isinstance(values, dict):
        raise InvalidImportRecordError(key, "record must be an object")
    try:
        parsed = ExerciseValues.model_validate(values)
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err.get("loc"))
        raise InvalidImportRecordError(key, f"invalid or missing fields: {fields}") from e
    return DayRecord.from_values(day, parsed.as_kind_map())


def _apply(engine: DayRecordEngine, record: DayRecord, report: ImportReport) -> None:
    error = engine.upsert_history(record)
    if error is None:
        report.imported += 1
    else:
        report.skipped += 1
        report.errors.append(error)


def import_payload(engine: DayRecordEngine, raw: str | bytes | dict | list) -> ImportReport:
    """Apply an export payload (or legacy list) to history and live state.

    Raises:
        InvalidImportFormatError: If the payload is structurally unusable;
            nothing is applied in that case
    """
    history_candidates, current_candidate = _collect_candidates(_load_raw(raw))
    report = ImportReport()

    accepted: dict[date, DayRecord] = {}
    history_keys: set[str] = set()
    for candidate in history_candidates:
        history_keys.add(candidate.key)
        try:
            record = validate_candidate(candidate.key, candidate.values)
        except InvalidImportRecordError as e:
            report.skipped += 1
            report.errors.append(e)
            continue
        accepted[record.date] = record

    live_only: DayRecord | None = None
    if current_candidate is not None:
        try:
            current_record = validate_candidate(current_candidate.key, current_candidate.values)
        except InvalidImportRecordError as e:
            report.skipped += 1
            report.errors.append(e)
        else:
            if current_record.date_key in history_keys:
                # Same day already listed in history: the live copy is the newer one
                accepted[current_record.date] = current_record
            elif current_record.has_progress:
                accepted[current_record.date] = current_record
            else:
                # An empty day counts as absent: only overwrite it where it already exists
                live_only = current_record

    with engine.lock:
        for record in accepted.values():
            _apply(engine, record, report)

        if live_only is not None:
            try:
                stored = engine.store.get(live_only.date) is not None
            except HundredsError as e:
                engine.report(e)
                stored = False
            if stored:
                _apply(engine, live_only, report)
            elif engine.replace_today(live_only):
                report.imported += 1

    for error in report.errors:
        if isinstance(error, InvalidImportRecordError):
            logger.bind(key=error.key).warning(f"[IMPORT] Skipped record: {error.reason}")

    logger.bind(imported=report.imported, skipped=report.skipped).info("[IMPORT] Import complete")
    engine.notifier.import_completed(report.imported, report.skipped)
    return report


def import_file(engine: DayRecordEngine, path: Path) -> ImportReport:
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise InvalidImportFormatError(f"Unable to read import file {path}: {e}") from e
    return import_payload(engine, raw)
