import re
import unicodedata
from typing import Optional

from config import CLAIM_CONFIG
from exceptions import EmptyInputException


class InputValidator:

    CONTROL_CHARS_PATTERN = re.compile(r'[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]')
    # OCR noise: runs of box-drawing, bullets and other symbol characters.
    SYMBOL_RUN_PATTERN = re.compile(r'[─-◿•·|]{3,}')
    HORIZONTAL_SPACE_PATTERN = re.compile(r'[ \t ]+')
    BLANK_LINES_PATTERN = re.compile(r'\n{3,}')

    @staticmethod
    def sanitize_text(text: Optional[str], max_length: int = CLAIM_CONFIG.MAX_INPUT_LENGTH) -> str:
        """Normalise OCR text for analysis.

        Line breaks are kept because sentence splitting treats them as
        boundaries; everything else is collapsed.
        """
        if text is None or not text.strip():
            raise EmptyInputException("text cannot be empty")

        text = unicodedata.normalize("NFKC", text)
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        text = InputValidator.CONTROL_CHARS_PATTERN.sub('', text)
        text = InputValidator.SYMBOL_RUN_PATTERN.sub(' ', text)
        text = InputValidator.HORIZONTAL_SPACE_PATTERN.sub(' ', text)
        text = "\n".join(line.strip() for line in text.split("\n"))
        text = InputValidator.BLANK_LINES_PATTERN.sub("\n\n", text).strip()

        if not any(ch.isalnum() for ch in text):
            raise EmptyInputException("text contains no letters or digits")

        if len(text) > max_length:
            text = text[:max_length]

        return text
