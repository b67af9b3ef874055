import pytest

from cyf_blog.dependencies import parse_version, version_satisfies
from cyf_blog.i18n import normalize_language, translate


@pytest.mark.parametrize(
    "raw, expected",
    [("en", "en"), ("zh-CN", "zh"), ("en_US", "en"), (" ZH ", "zh"), ("fr", None), ("", None), (None, None)],
)
def test_normalize_language(raw, expected):
    assert normalize_language(raw) == expected


def test_translate_with_arguments():
    assert translate("common.NEW", "zh", args={"name": "Kimmy"}) == "你好，Kimmy！欢迎使用新版本。"


def test_translate_falls_back_to_default_language():
    assert translate("common.HELLO", "fr") == "Hello World!"


def test_translate_unknown_key_returns_key():
    assert translate("common.NOPE", "en") == "common.NOPE"
    assert translate("nonexistent.KEY", "zh") == "nonexistent.KEY"


@pytest.mark.parametrize(
    "version, requirement, expected",
    [
        ("1.0.0", ">=1.0.0", True),
        ("1.2", ">=1.0.0", True),
        ("v2.0.1", ">=1.0.0", True),
        ("0.9.9", ">=1.0.0", False),
        ("1.0.0", ">1.0.0", False),
        ("1.0.0", "1.0.0", True),
        ("0.5.0", "<1.0.0", True),
        (None, ">=1.0.0", False),
        ("banana", ">=1.0.0", False),
    ],
)
def test_version_satisfies(version, requirement, expected):
    assert version_satisfies(version, requirement) is expected


def test_parse_version_pads_missing_parts():
    assert parse_version("3") == (3, 0, 0)
    assert parse_version("3.1") == (3, 1, 0)
