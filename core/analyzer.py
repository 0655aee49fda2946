"""
Фасад пошуку та маскування артефактів для UI і скриптів.

Кроки: Presidio pattern recognizers -> обрізання координат ->
розв'язання перетинів -> заміна на [TYPE] через Presidio Anonymizer.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from presidio_analyzer import RecognizerResult
from presidio_anonymizer import AnonymizerEngine
from presidio_anonymizer.entities import OperatorConfig

from core.config import config
from core.recognizer import get_recognizer
from recognizers.presidio_patterns import ArtifactPatternRecognizer
from utils.conflict_resolution import remove_overlapping_entities

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    """Знайдені артефакти (без перетинів) та замаскований текст."""
    entities: List[RecognizerResult]
    anonymized_text: str
    original_text: str
    entities_count: int

    def _ordered(self) -> List[RecognizerResult]:
        return sorted(self.entities, key=lambda x: x.start)

    def format_entities_list(self) -> str:
        """Нумерований список: тип, значення, позиція, впевненість."""
        if not self.entities:
            return "Артефактів не знайдено"

        return "\n".join(
            f"{idx}. {e.entity_type}: '{self.original_text[e.start:e.end]}' "
            f"(позиція {e.start}-{e.end}, впевненість {e.score:.2f})"
            for idx, e in enumerate(self._ordered(), 1)
        )

    def entities_by_type(self) -> Dict[str, List[str]]:
        grouped: Dict[str, List[str]] = {}
        for e in self._ordered():
            grouped.setdefault(e.entity_type, []).append(self.original_text[e.start:e.end])
        return grouped


def _clamp(result: RecognizerResult, text_length: int) -> Optional[RecognizerResult]:
    """Обрізає діапазон до меж тексту; None, якщо від нього нічого не лишилось."""
    start = max(0, result.start)
    end = min(text_length, result.end)

    if start >= end:
        logger.warning(
            "Discarding %s at %s-%s, text length is %s",
            result.entity_type, result.start, result.end, text_length,
        )
        return None

    if (start, end) == (result.start, result.end):
        return result

    logger.warning(
        "Clamping %s: %s-%s -> %s-%s",
        result.entity_type, result.start, result.end, start, end,
    )
    return RecognizerResult(
        entity_type=result.entity_type,
        start=start,
        end=end,
        score=result.score,
        analysis_explanation=result.analysis_explanation,
        recognition_metadata=result.recognition_metadata,
    )


class ArtifactAnalyzer:
    """
    Пошук артефактів у тексті з подальшим маскуванням.

    Помилка Presidio на етапі пошуку логується і дає порожній результат,
    помилка маскування піднімається як RuntimeError.
    """

    def __init__(self):
        self.pattern_recognizer = ArtifactPatternRecognizer()
        self.anonymizer = AnonymizerEngine()

        logger.info("ArtifactAnalyzer initialized")

    def analyze(
        self,
        text: str,
        entities: Optional[List[str]] = None,
        conflict_strategy: str = "priority"
    ) -> AnalysisResult:
        """
        Args:
            text: Текст для аналізу
            entities: Типи артефактів (None = увімкнені в config)
            conflict_strategy: "priority", "score" або "length"

        Raises:
            ValueError: Порожній або завеликий текст
            RuntimeError: Помилка маскування
        """
        self._validate_input(text)

        if entities is None:
            entities = config.get_enabled_entities()

        found = [
            clamped for clamped in
            (_clamp(r, len(text)) for r in self._find(text, entities))
            if clamped is not None
        ]

        kept = remove_overlapping_entities(found, strategy=conflict_strategy) if found else []
        if found:
            logger.info(f"Kept {len(kept)} of {len(found)} artifacts after overlap resolution")

        return AnalysisResult(
            entities=kept,
            anonymized_text=self._anonymize(text, kept, self._operators(entities)),
            original_text=text,
            entities_count=len(kept)
        )

    def _find(self, text: str, entities: List[str]) -> List[RecognizerResult]:
        if not entities:
            return []

        logger.info(f"Scanning {len(text)} chars for {len(entities)} artifact types")
        try:
            results = self.pattern_recognizer.analyze(text, entities)
        except Exception as e:
            logger.error(f"Pattern analysis failed: {e}")
            return []

        logger.info(f"Pattern analysis found {len(results)} artifacts")
        return results

    @staticmethod
    def _validate_input(text: str) -> None:
        if not text:
            raise ValueError("Текст не може бути порожнім (порожній ввід)")

        if text.isspace():
            raise ValueError("Текст не може містити тільки пробіли (порожній ввід)")

        if len(text) > config.MAX_TEXT_LENGTH:
            raise ValueError(
                f"Текст завеликий: {len(text)} символів. "
                f"Максимум: {config.MAX_TEXT_LENGTH}"
            )

    @staticmethod
    def _operators(entities: List[str]) -> Dict[str, OperatorConfig]:
        """Replace-оператор на кожен тип; формат з EntityConfig або типовий."""
        operators = {}
        for entity_type in entities:
            entity = config.ARTIFACT_ENTITIES.get(entity_type)
            template = (
                entity.anonymization_format if entity
                else config.DEFAULT_ANONYMIZATION_FORMAT
            )
            operators[entity_type] = OperatorConfig(
                "replace", {"new_value": template.format(entity_type=entity_type)}
            )
        return operators

    def _anonymize(
        self,
        text: str,
        results: List[RecognizerResult],
        operators: Dict[str, OperatorConfig]
    ) -> str:
        if not results:
            return text

        try:
            return self.anonymizer.anonymize(text, results, operators).text
        except Exception as e:
            logger.error(f"Anonymization failed: {e}")
            raise RuntimeError(f"Помилка анонімізації: {e}") from e

    def get_system_info(self) -> Dict[str, Any]:
        """Стан реєстру патернів та ліміти (для діагностики)."""
        recognizer = get_recognizer()
        return {
            "pattern_names": sorted(recognizer.pattern_names()),
            "tld_count": len(recognizer.tld_table),
            "tld_file": config.TLD_FILE,
            "enabled_entities": config.get_enabled_entities(),
            "max_text_length": config.MAX_TEXT_LENGTH
        }
