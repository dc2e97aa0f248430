"""
Rule file import and export.

Supported formats:
- .json: {"rules": [...], "configuration": {...}}
- .csv: header row, then "source,target" rows
- .txt: one "source = target" per line

Uploads are decoded best-effort via charset-normalizer; imported rules are
case sensitive unless the JSON says otherwise.
"""

from __future__ import annotations

import csv
import io
import json
import logging
from typing import Any, Dict, List, Sequence

from charset_normalizer import from_bytes
from pydantic import ValidationError

from .models import MappingFile, MappingRule
from .rules import EXPORT_FORMATS, IMPORT_EXTENSIONS

logger = logging.getLogger(__name__)


class RuleFileError(ValueError):
    """Raised when an uploaded rule file cannot be parsed or validated."""


class UnsupportedFormatError(RuleFileError):
    pass


def decode_upload(raw: bytes) -> str:
    """
    Decode uploaded bytes to text.

    - A UTF-8 BOM means utf-8-sig, regardless of detection.
    - Otherwise use charset-normalizer's best guess, then utf-8.
    - Last resort: utf-8 with replacement characters.
    """
    if raw.startswith(b"\xef\xbb\xbf"):
        return raw.decode("utf-8-sig", errors="replace")

    # plain utf-8 first: short uploads confuse detection
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        pass

    match = from_bytes(raw).best()
    if match is not None:
        try:
            return raw.decode(match.encoding)
        except (LookupError, UnicodeDecodeError):
            logger.warning("detected encoding %s failed to decode upload", match.encoding)

    return raw.decode("utf-8", errors="replace")


def _parse_json(text: str) -> Dict[str, Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise RuleFileError(f"invalid JSON: {e.msg}") from e
    if not isinstance(data, dict):
        raise RuleFileError("JSON rule file must be an object with a 'rules' list")
    return data


def _parse_csv(text: str) -> Dict[str, Any]:
    reader = csv.reader(io.StringIO(text, newline=""))
    rows = [row for row in reader if any(cell.strip() for cell in row)]

    rules = []
    for row in rows[1:]:  # header
        source = row[0].strip() if len(row) > 0 else ""
        target = row[1].strip() if len(row) > 1 else ""
        rules.append({"sourceChar": source, "targetChar": target, "caseSensitive": True})
    return {"rules": rules}


def _parse_txt(text: str) -> Dict[str, Any]:
    rules = []
    for line in text.splitlines():
        if not line.strip() or "=" not in line:
            continue
        source, _, target = line.partition("=")
        source, target = source.strip(), target.strip()
        if source and target:
            rules.append({"sourceChar": source, "targetChar": target, "caseSensitive": True})
    return {"rules": rules}


_PARSERS = {
    ".json": _parse_json,
    ".csv": _parse_csv,
    ".txt": _parse_txt,
}


def parse_rule_file(filename: str, raw: bytes) -> MappingFile:
    name = (filename or "").lower()
    ext = next((e for e in IMPORT_EXTENSIONS if name.endswith(e)), None)
    if ext is None:
        raise UnsupportedFormatError("Unsupported file format. Use JSON, CSV, or TXT.")

    data = _PARSERS[ext](decode_upload(raw))
    try:
        return MappingFile.model_validate(data)
    except ValidationError as e:
        raise RuleFileError(f"invalid rule file: {e.error_count()} validation error(s)") from e


def export_rules(rules: Sequence[MappingRule], fmt: str = "json") -> str:
    """Serialize rules in a format ``parse_rule_file`` reads back."""
    if fmt not in EXPORT_FORMATS:
        raise UnsupportedFormatError(f"unsupported export format: {fmt}")

    if fmt == "json":
        payload: Dict[str, List[Dict[str, Any]]] = {
            "rules": [
                rule.model_dump(by_alias=True, exclude={"id"}) for rule in rules
            ]
        }
        return json.dumps(payload, ensure_ascii=False, indent=2)

    if fmt == "csv":
        outp = io.StringIO(newline="")
        writer = csv.writer(outp, lineterminator="\n")
        writer.writerow(["source", "target"])
        for rule in rules:
            writer.writerow([rule.source_char, rule.target_char])
        return outp.getvalue()

    return "".join(f"{rule.source_char} = {rule.target_char}\n" for rule in rules)
