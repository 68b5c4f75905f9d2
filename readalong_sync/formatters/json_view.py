"""Read-model JSON formatter for web clients.

WHY: A browser front end renders the highlight itself; it only needs the
tagged words, the active position, and the sentence progress as JSON. A
schema keeps the contract between the engine and that client explicit.

HOW: The ReadModel is flattened into camelCase JSON. Sentence-progress
keys become strings (JSON object keys). The document is validated with
jsonschema against the bundled read_model.schema.json before returning.

RULES:
- Top-level keys: version, readingMode, language, generation, state,
  position, progress, sentences
- state.kind is the SyncState kind; indices are included when present
- progress maps "sentence index" → percentage in [0, 100]
- Output suffix: "-readalong.json"
- Validate output against the schema before returning; raise on failure
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import jsonschema

from readalong_sync.core.ir import PlayingSentence, ReadModel, SyncState, TestMode
from readalong_sync.formatters.base import BaseFormatter, FormatterOutput

_SCHEMA_PATH = Path(__file__).resolve().parent / "read_model.schema.json"

SCHEMA_VERSION = "1.0.0"

_CACHED_SCHEMA: Optional[Dict[str, Any]] = None


def get_schema() -> Dict[str, Any]:
    """Load and cache the read-model JSON schema."""
    global _CACHED_SCHEMA
    if _CACHED_SCHEMA is None:
        with open(_SCHEMA_PATH, encoding="utf-8") as f:
            _CACHED_SCHEMA = json.load(f)
    return _CACHED_SCHEMA


def _state_to_dict(state: SyncState) -> Dict[str, Any]:
    data: Dict[str, Any] = {"kind": state.kind}
    if isinstance(state, PlayingSentence):
        data["sentenceIndex"] = state.sentence_index
    elif isinstance(state, TestMode):
        data["sentenceIndex"] = state.sentence_index
        data["wordIndex"] = state.word_index
    return data


def read_model_to_dict(read_model: ReadModel) -> Dict[str, Any]:
    """Plain-dict form of a ReadModel, matching read_model.schema.json."""
    sentences: List[Dict[str, Any]] = []
    for rendered in read_model.sentences:
        sentences.append({
            "index": rendered.sentence_index,
            "text": rendered.text,
            "words": [
                {"text": w.text, "index": w.word_index, "tag": w.tag.value}
                for w in rendered.words
            ],
        })

    return {
        "version": SCHEMA_VERSION,
        "readingMode": read_model.reading_mode.value,
        "language": read_model.language,
        "generation": read_model.generation,
        "state": _state_to_dict(read_model.state),
        "position": {
            "sentenceIndex": read_model.position.sentence_index,
            "wordIndex": read_model.position.word_index,
        },
        "progress": {str(index): round(pct, 2) for index, pct in read_model.progress.items()},
        "sentences": sentences,
    }


class JSONViewFormatter(BaseFormatter):
    """Formatter that produces the schema-validated read-model JSON."""

    @property
    def name(self) -> str:
        return "Read Model JSON"

    def format(self, read_model: ReadModel) -> List[FormatterOutput]:
        """Serialize the read model.

        Raises:
            jsonschema.ValidationError: If the document does not conform
                to the read-model schema.
        """
        output = read_model_to_dict(read_model)
        jsonschema.validate(instance=output, schema=get_schema())
        return [
            FormatterOutput(
                suffix="-readalong.json",
                content=json.dumps(output, indent=2, ensure_ascii=False),
                media_type="application/json",
            )
        ]
