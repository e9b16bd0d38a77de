from __future__ import annotations

from dataclasses import dataclass
import json
from pathlib import Path
import re
from typing import Any

from .validators import validate_top_k


@dataclass(frozen=True)
class EducationTopic:
    topic_id: str
    title: str
    tags: tuple[str, ...]
    content: str


@dataclass(frozen=True)
class WarningSymptom:
    symptom_id: str
    label: str
    urgent: bool


@dataclass(frozen=True)
class WellnessItem:
    item_id: str
    label: str
    default_checked: bool = False


@dataclass(frozen=True)
class TopicHit:
    topic: EducationTopic
    score: int
    confidence: float


class ContentLibrary:
    """Static patient-education content passed through to the host UI."""

    def __init__(self, content_path: str | Path | None = None) -> None:
        topics, warnings, checklist = _default_content()

        if content_path:
            loaded = _load_content_from_path(Path(content_path))
            if loaded is not None:
                topics, warnings, checklist = loaded

        self._topics = topics
        self._warnings = warnings
        self._checklist = checklist

    def topics(self) -> tuple[EducationTopic, ...]:
        return self._topics

    def warning_symptoms(self) -> tuple[WarningSymptom, ...]:
        return self._warnings

    def wellness_checklist(self) -> tuple[WellnessItem, ...]:
        return self._checklist

    def search(self, query: str, top_k: int = 3) -> list[TopicHit]:
        validate_top_k(top_k)
        terms = _tokenize(query)
        if not terms:
            return []

        scored: list[tuple[int, EducationTopic]] = []
        for topic in self._topics:
            bag = _tokenize(f"{topic.title} {' '.join(topic.tags)} {topic.content}")
            score = sum(1 for term in terms if term in bag)
            if score > 0:
                scored.append((score, topic))

        scored.sort(key=lambda item: item[0], reverse=True)
        selected = scored[:top_k]
        if not selected:
            return []

        max_score = max(score for score, _ in selected)
        return [
            TopicHit(topic=topic, score=score, confidence=round(score / max(1, max_score), 3))
            for score, topic in selected
        ]


def _tokenize(text: str) -> set[str]:
    cleaned = re.sub(r"[^\w]+", " ", text.lower())
    return {x for x in cleaned.split() if x}


def _load_content_from_path(
    path: Path,
) -> tuple[tuple[EducationTopic, ...], tuple[WarningSymptom, ...], tuple[WellnessItem, ...]] | None:
    if not path.exists():
        return None
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}") from exc
    if not isinstance(payload, dict):
        raise ValueError(f"Content file must contain a JSON object: {path}")
    return (
        _parse_topics(payload.get("topics", [])),
        _parse_warnings(payload.get("warning_symptoms", [])),
        _parse_checklist(payload.get("wellness_checklist", [])),
    )


def _parse_topics(raw: Any) -> tuple[EducationTopic, ...]:
    if not isinstance(raw, list):
        return ()
    topics: list[EducationTopic] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        topic_id = str(item.get("topic_id", "")).strip()
        title = str(item.get("title", "")).strip()
        content = str(item.get("content", "")).strip()
        tags_raw = item.get("tags", [])
        tags = tuple(str(x).strip() for x in tags_raw) if isinstance(tags_raw, list) else tuple()
        if topic_id and title and content:
            topics.append(EducationTopic(topic_id=topic_id, title=title, tags=tags, content=content))
    return tuple(topics)


def _parse_warnings(raw: Any) -> tuple[WarningSymptom, ...]:
    if not isinstance(raw, list):
        return ()
    warnings: list[WarningSymptom] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        symptom_id = str(item.get("symptom_id", "")).strip()
        label = str(item.get("label", "")).strip()
        if symptom_id and label:
            warnings.append(WarningSymptom(symptom_id=symptom_id, label=label, urgent=bool(item.get("urgent", False))))
    return tuple(warnings)


def _parse_checklist(raw: Any) -> tuple[WellnessItem, ...]:
    if not isinstance(raw, list):
        return ()
    items: list[WellnessItem] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        item_id = str(item.get("item_id", "")).strip()
        label = str(item.get("label", "")).strip()
        if item_id and label:
            items.append(
                WellnessItem(item_id=item_id, label=label, default_checked=bool(item.get("default_checked", False)))
            )
    return tuple(items)


def _default_content() -> tuple[tuple[EducationTopic, ...], tuple[WarningSymptom, ...], tuple[WellnessItem, ...]]:
    topics = (
        EducationTopic(
            topic_id="swelling",
            title="Managing Swelling",
            tags=("swelling", "cold", "compress", "elevation"),
            content="Keep the treated area elevated and use cold compresses for 20 minutes at a time during the first 72 hours.",
        ),
        EducationTopic(
            topic_id="pain",
            title="Pain Management",
            tags=("pain", "medication", "analgesic"),
            content="Take prescribed pain medication on schedule for the first days and avoid aspirin unless your surgeon approves it.",
        ),
        EducationTopic(
            topic_id="incision_care",
            title="Incision Care",
            tags=("incision", "wound", "sutures", "shower"),
            content="Keep incisions clean and dry, follow showering instructions, and do not soak wounds until cleared.",
        ),
        EducationTopic(
            topic_id="compression",
            title="Compression Garments",
            tags=("compression", "garment", "bra", "liposuction"),
            content="Wear the compression garment as directed, removing it only to shower, to limit swelling and support new contours.",
        ),
        EducationTopic(
            topic_id="activity",
            title="Returning to Activity",
            tags=("activity", "exercise", "walking", "lifting"),
            content="Short walks help circulation from day one; avoid heavy lifting and strenuous exercise until your surgeon clears you.",
        ),
        EducationTopic(
            topic_id="sleep",
            title="Sleeping Position",
            tags=("sleep", "elevation", "rhinoplasty", "swelling"),
            content="Sleep on your back with your head raised on two pillows to reduce swelling and protect the surgical site.",
        ),
    )
    warnings = (
        WarningSymptom("fever", "Fever above 38.3°C (101°F)", urgent=True),
        WarningSymptom("bleeding", "Bleeding that soaks through dressings", urgent=True),
        WarningSymptom("breathing", "Shortness of breath or chest pain", urgent=True),
        WarningSymptom("calf_pain", "Calf pain or swelling in one leg", urgent=True),
        WarningSymptom("infection", "Increasing redness, warmth or discharge at incisions", urgent=False),
        WarningSymptom("asymmetry", "Sudden swelling on one side only", urgent=False),
    )
    checklist = (
        WellnessItem("medication", "Took medication as prescribed", default_checked=True),
        WellnessItem("hydration", "Drank at least 8 glasses of water"),
        WellnessItem("walk", "Took a short walk"),
        WellnessItem("garment", "Wore compression garment or support bra"),
        WellnessItem("incisions", "Checked incisions for warning signs"),
    )
    return (topics, warnings, checklist)
