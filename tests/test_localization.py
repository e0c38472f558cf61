from chatwidget.models.config import SupportedLanguage
from chatwidget.services.localization import TRANSLATIONS, get_translations, is_rtl, resolve


def test_every_language_has_every_key():
    keys = set(TRANSLATIONS["en"])
    for code, phrases in TRANSLATIONS.items():
        assert set(phrases) == keys, code


def test_unknown_language_falls_back_to_english():
    assert get_translations("xx") == TRANSLATIONS["en"]
    assert get_translations(None) == TRANSLATIONS["en"]


def test_builtin_rtl_languages():
    assert is_rtl("ar")
    assert not is_rtl("fr")


def test_configured_language_entry_decides_direction():
    languages = [SupportedLanguage(code="ar", name="Arabic", rtl=False), SupportedLanguage(code="he", rtl=True)]
    assert not is_rtl("ar", languages)
    assert is_rtl("he", languages)


def test_resolve():
    loc = resolve("ar")
    assert loc.rtl
    assert loc.t("send") == TRANSLATIONS["ar"]["send"]
    assert resolve(None).code == "en"


def test_unset_rtl_on_entry_uses_builtin_list():
    languages = [SupportedLanguage(code="ar"), SupportedLanguage(code="fr", name=None, rtl=None)]
    assert is_rtl("ar", languages)
    assert not is_rtl("fr", languages)
