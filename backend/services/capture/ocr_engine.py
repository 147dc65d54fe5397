"""
OCR engine adapters.

The analytics pipeline only needs recognized text and a 0-100
confidence per frame; engines hide everything else.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Tuple

import pytesseract

from core.config import TESSERACT_CMD, TESSERACT_LANG


@dataclass
class OcrResult:
    """Raw recognition output for one frame"""
    text: str
    confidence: float  # 0-100


class OcrEngine(Protocol):
    def recognize(self, image: Any) -> OcrResult:
        ...


class TesseractOcrEngine:
    """Tesseract via pytesseract; accepts anything pytesseract accepts (PIL image, path, ndarray)."""

    def __init__(self, lang: str = TESSERACT_LANG, tesseract_cmd: Optional[str] = TESSERACT_CMD):
        self.lang = lang
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    def recognize(self, image: Any) -> OcrResult:
        data = pytesseract.image_to_data(
            image,
            lang=self.lang,
            output_type=pytesseract.Output.DICT,
        )
        return self._from_data(data)

    @staticmethod
    def _from_data(data: Dict[str, List[Any]]) -> OcrResult:
        """Rebuild lines from word boxes and average the word confidences."""
        lines: Dict[Tuple[int, int, int], List[str]] = {}
        confidences: List[float] = []

        for i, word in enumerate(data.get('text', [])):
            word = str(word).strip()
            conf = float(data['conf'][i])
            # Negative confidence marks layout boxes, not words
            if not word or conf < 0:
                continue
            key = (data['block_num'][i], data['par_num'][i], data['line_num'][i])
            lines.setdefault(key, []).append(word)
            confidences.append(conf)

        text = '\n'.join(' '.join(words) for words in lines.values())
        confidence = sum(confidences) / len(confidences) if confidences else 0.0
        return OcrResult(text=text, confidence=confidence)
