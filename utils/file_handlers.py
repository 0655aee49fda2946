"""
Читання вхідних файлів для сканування: логи, конфіги, DOCX звіти.

Текстові файли декодуються так, щоб будь-які байти давали рядок:
UTF-8, далі chardet, а в кінці latin-1 (тоді позиції = байтові зміщення).
"""

import io
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import chardet
from docx import Document

logger = logging.getLogger(__name__)

_EXTRA_BLANK_LINES = re.compile(r'\n{3,}')


@dataclass
class FileReadResult:
    """Текст файлу разом з тим, як його прочитали."""
    text: str
    filename: str
    file_type: str
    encoding: Optional[str] = None
    char_count: int = 0

    def __post_init__(self):
        if self.char_count == 0:
            self.char_count = len(self.text)


def decode_bytes(raw: bytes) -> Tuple[str, str]:
    """
    Декодує байти текстового файлу.

    Returns:
        (текст, назва кодування)
    """
    try:
        return raw.decode('utf-8'), 'utf-8'
    except UnicodeDecodeError:
        logger.warning("Input is not valid UTF-8, running chardet")

    guess = chardet.detect(raw)
    encoding = guess.get('encoding')
    if encoding:
        try:
            text = raw.decode(encoding)
        except (UnicodeDecodeError, LookupError) as e:
            logger.warning(f"chardet guess {encoding} did not decode: {e}")
        else:
            logger.info(f"Detected {encoding} (confidence {guess['confidence']:.0%})")
            return text, encoding

    # latin-1 відображає кожен байт в один символ
    logger.info("Decoding as latin-1")
    return raw.decode('latin-1'), 'latin-1'


class FileHandler:
    """
    Вибір читача за розширенням файлу.

    Новий формат = новий метод `_read_<ext>` плюс розширення в наборі.
    """

    MAX_FILE_SIZE_MB = 50
    MAX_FILE_SIZE_BYTES = MAX_FILE_SIZE_MB * 1024 * 1024

    PLAIN_TEXT_EXTENSIONS = {'.txt', '.log', '.conf', '.cfg', '.ini'}
    SUPPORTED_EXTENSIONS = PLAIN_TEXT_EXTENSIONS | {'.docx'}

    @classmethod
    def read_file(cls, file_path) -> FileReadResult:
        """
        Читає файл з диска.

        Args:
            file_path: str, Path або завантаження Gradio (об'єкт з атрибутом name)

        Raises:
            ValueError: Формат не підтримується або файл завеликий
            RuntimeError: DOCX не вдалося розібрати
        """
        if isinstance(file_path, (str, Path)):
            path = Path(file_path)
        else:
            path = Path(file_path.name)

        cls._check_extension(path.name)
        cls._validate_file_size(path)

        return cls.read_bytes(path.read_bytes(), path.name)

    @classmethod
    def read_bytes(cls, data: bytes, filename: str) -> FileReadResult:
        """Розбирає вже прочитаний вміст; тип визначається за filename."""
        extension = cls._check_extension(filename)

        if len(data) > cls.MAX_FILE_SIZE_BYTES:
            cls._raise_too_large(len(data))

        if extension == '.docx':
            return cls._read_docx(data, filename)

        text, encoding = decode_bytes(data)
        logger.info(f"Read {filename}: {len(text)} chars, {encoding}")
        return FileReadResult(
            text=text,
            filename=filename,
            file_type=extension.lstrip('.'),
            encoding=encoding
        )

    @classmethod
    def _check_extension(cls, filename: str) -> str:
        extension = Path(filename).suffix.lower()
        if extension not in cls.SUPPORTED_EXTENSIONS:
            raise ValueError(
                f"Непідтримуваний формат файлу: {extension or '(без розширення)'}\n"
                f"Підтримуються: {', '.join(sorted(cls.SUPPORTED_EXTENSIONS))}"
            )
        return extension

    @classmethod
    def _validate_file_size(cls, path: Path) -> None:
        try:
            size = path.stat().st_size
        except OSError:
            # розмір перевірить read_bytes
            return

        if size > cls.MAX_FILE_SIZE_BYTES:
            cls._raise_too_large(size)

    @classmethod
    def _raise_too_large(cls, size: int) -> None:
        raise ValueError(
            f"Файл завеликий: {size / 1024 / 1024:.1f} MB. "
            f"Максимум: {cls.MAX_FILE_SIZE_MB} MB"
        )

    @staticmethod
    def _read_docx(data: bytes, filename: str) -> FileReadResult:
        """Непорожні параграфи, розділені порожнім рядком."""
        try:
            doc = Document(io.BytesIO(data))
        except Exception as e:
            raise RuntimeError(f"Помилка читання DOCX файлу {filename}: {e}") from e

        paragraphs = [p.text.strip() for p in doc.paragraphs]
        text = "\n\n".join(p for p in paragraphs if p)

        logger.info(f"Read DOCX {filename}: {len(doc.paragraphs)} paragraphs")
        return FileReadResult(text=text, filename=filename, file_type='docx')


def sanitize_text(text: str) -> str:
    """
    Уніфікує переводи рядків, прибирає пробіли в кінці рядків та
    зайві порожні рядки (залишається не більше одного підряд).

    Зворотні слеші та пробіли всередині рядка не змінюються.
    """
    text = text.replace('\r\n', '\n').replace('\r', '\n')
    text = '\n'.join(line.rstrip() for line in text.split('\n'))
    return _EXTRA_BLANK_LINES.sub('\n\n', text).strip()
