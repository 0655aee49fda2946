"""
Експорт результатів пошуку артефактів.

Два види вихідних файлів:
- замаскований текст (txt/md) для передачі логів назовні;
- звіт про артефакти (json/csv/txt): кожне унікальне значення один раз,
  з усіма позиціями, де воно трапилось (зручно як список індикаторів).
"""

import csv
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from io import StringIO
from typing import Callable, Dict, List, Tuple

from core.analyzer import AnalysisResult

logger = logging.getLogger(__name__)


class ExportFormat:
    """Константи підтримуваних форматів експорту."""
    TXT = 'txt'
    JSON = 'json'
    CSV = 'csv'
    MARKDOWN = 'md'


@dataclass
class ArtifactOccurrences:
    """Одне унікальне значення артефакту та всі його входження."""
    entity_type: str
    value: str
    spans: List[Tuple[int, int]] = field(default_factory=list)
    max_score: float = 0.0

    @property
    def count(self) -> int:
        return len(self.spans)


def collect_artifacts(result: AnalysisResult) -> List[ArtifactOccurrences]:
    """
    Згортає знайдені артефакти до унікальних (тип, значення).

    Порядок: за першою появою в тексті.
    """
    collected: Dict[Tuple[str, str], ArtifactOccurrences] = {}

    for entity in sorted(result.entities, key=lambda x: (x.start, x.end)):
        value = result.original_text[entity.start:entity.end]
        key = (entity.entity_type, value)

        item = collected.get(key)
        if item is None:
            item = collected[key] = ArtifactOccurrences(entity.entity_type, value)

        item.spans.append((entity.start, entity.end))
        item.max_score = max(item.max_score, entity.score)

    return list(collected.values())


class FileExporter:
    """Конвертація AnalysisResult у байти файлу для завантаження."""

    @staticmethod
    def export_anonymized_text(
        result: AnalysisResult,
        format: str = ExportFormat.TXT,
        include_metadata: bool = True
    ) -> bytes:
        """
        Експортує замаскований текст.

        Raises:
            ValueError: Непідтримуваний формат
        """
        writers: Dict[str, Callable[[AnalysisResult, bool], str]] = {
            ExportFormat.TXT: _redacted_txt,
            ExportFormat.MARKDOWN: _redacted_markdown,
        }
        if format not in writers:
            raise ValueError(f"Непідтримуваний формат: {format}")

        return writers[format](result, include_metadata).encode('utf-8')

    @staticmethod
    def export_entities_report(
        result: AnalysisResult,
        format: str = ExportFormat.JSON
    ) -> bytes:
        """
        Експортує звіт про унікальні артефакти (json/csv/txt).

        Raises:
            ValueError: Непідтримуваний формат
        """
        artifacts = collect_artifacts(result)

        if format == ExportFormat.JSON:
            content = _report_json(result, artifacts)
        elif format == ExportFormat.CSV:
            # BOM, щоб Excel правильно відкрив кирилицю
            return _report_csv(artifacts).encode('utf-8-sig')
        elif format == ExportFormat.TXT:
            content = _report_txt(result, artifacts)
        else:
            raise ValueError(f"Непідтримуваний формат: {format}")

        logger.info(f"Report exported as {format}: {len(artifacts)} unique artifacts")
        return content.encode('utf-8')


# ============ ЗАМАСКОВАНИЙ ТЕКСТ ============

def _metadata_lines(result: AnalysisResult) -> List[str]:
    return [
        f"Дата обробки: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        f"Знайдено артефактів: {result.entities_count}",
        f"Довжина оригінального тексту: {len(result.original_text)} символів",
        f"Довжина замаскованого тексту: {len(result.anonymized_text)} символів",
    ]


def _redacted_txt(result: AnalysisResult, include_metadata: bool) -> str:
    if not include_metadata:
        return result.anonymized_text

    return "\n".join(_metadata_lines(result) + ["=" * 60, "", result.anonymized_text])


def _redacted_markdown(result: AnalysisResult, include_metadata: bool) -> str:
    lines = ["# Замаскований документ", ""]

    if include_metadata:
        lines += ["```"] + _metadata_lines(result) + ["```", "", "---", ""]

    # Лог може містити markdown-символи, тому текст іде в code block
    lines += ["```text", result.anonymized_text, "```"]
    return "\n".join(lines)


# ============ ЗВІТИ ============

def _report_json(result: AnalysisResult, artifacts: List[ArtifactOccurrences]) -> str:
    by_type: Dict[str, int] = {}
    for item in artifacts:
        by_type[item.entity_type] = by_type.get(item.entity_type, 0) + 1

    data = {
        "metadata": {
            "analysis_timestamp": datetime.now().isoformat(),
            "total_entities": result.entities_count,
            "unique_artifacts": len(artifacts),
            "original_text_length": len(result.original_text)
        },
        "artifacts": [
            {
                "type": item.entity_type,
                "value": item.value,
                "count": item.count,
                "spans": [list(span) for span in item.spans],
                "confidence": round(item.max_score, 3)
            }
            for item in artifacts
        ],
        "unique_by_type": dict(sorted(by_type.items()))
    }

    return json.dumps(data, ensure_ascii=False, indent=2)


def _report_csv(artifacts: List[ArtifactOccurrences]) -> str:
    output = StringIO()
    writer = csv.writer(output)

    writer.writerow(["Тип артефакту", "Значення", "Кількість", "Позиції", "Впевненість (%)"])
    for item in artifacts:
        writer.writerow([
            item.entity_type,
            item.value,
            item.count,
            " ".join(f"{start}-{end}" for start, end in item.spans),
            f"{item.max_score * 100:.1f}"
        ])

    return output.getvalue()


def _report_txt(result: AnalysisResult, artifacts: List[ArtifactOccurrences]) -> str:
    lines = [
        "ЗВІТ ПРО ВИЯВЛЕНІ АРТЕФАКТИ",
        "=" * 60,
        f"Дата аналізу: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        f"Входжень: {result.entities_count}, унікальних значень: {len(artifacts)}",
        "=" * 60,
    ]

    if not artifacts:
        lines.append("✓ Артефактів не виявлено")
        return "\n".join(lines)

    current_type = None
    for item in sorted(artifacts, key=lambda a: a.entity_type):
        if item.entity_type != current_type:
            current_type = item.entity_type
            lines += ["", f"📌 {current_type}", "-" * 40]

        positions = ", ".join(f"{start}-{end}" for start, end in item.spans)
        lines.append(f"'{item.value}' x{item.count} [позиції {positions}]")

    return "\n".join(lines)


def generate_filename(
    base_name: str = "artifacts",
    format: str = ExportFormat.TXT,
    include_timestamp: bool = True
) -> str:
    """Ім'я файлу для експорту, за замовчуванням з timestamp."""
    if include_timestamp:
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        return f"{base_name}_{timestamp}.{format}"
    return f"{base_name}.{format}"
