"""
Server-side strings.

Tables live in ``locales/<lang>/<namespace>.json`` and are addressed as
``"<namespace>.<KEY>"``. Arguments use ``{name}`` placeholders.
"""

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

from cyf_blog.core.config import settings

logger = logging.getLogger(__name__)

LOCALES_DIR = Path(__file__).resolve().parent / "locales"


@lru_cache(maxsize=None)
def _load_namespace(lang: str, namespace: str) -> Dict[str, str]:
    path = LOCALES_DIR / lang / f"{namespace}.json"
    if not path.exists():
        logger.warning(f"Missing translation table {path}")
        return {}
    with path.open(encoding="utf-8") as fh:
        return json.load(fh)


def normalize_language(lang: Optional[str]) -> Optional[str]:
    """Map 'zh-CN', 'en_US' etc. onto a supported language, or None."""
    if not lang:
        return None
    candidate = lang.strip().replace("_", "-").split("-")[0].lower()
    return candidate if candidate in settings.LANGUAGES else None


def translate(key: str, lang: Optional[str] = None, args: Optional[Dict[str, object]] = None) -> str:
    lang = normalize_language(lang) or settings.DEFAULT_LANGUAGE
    namespace, _, name = key.partition(".")
    text = _load_namespace(lang, namespace).get(name)
    if text is None and lang != settings.DEFAULT_LANGUAGE:
        text = _load_namespace(settings.DEFAULT_LANGUAGE, namespace).get(name)
    if text is None:
        return key
    if args:
        return text.format_map(args)
    return text
