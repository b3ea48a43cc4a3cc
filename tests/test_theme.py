import pytest

from app.errors import ValidationError
from app.firestore_models import COLOR_TOKENS
from app.theme import COLOR_PALETTES, DEFAULT_THEME, THEME_KEY, ThemeStore, get_palette


def test_six_palettes_with_every_token():
    assert [p.value for p in COLOR_PALETTES] == [
        'ocean-deep', 'emerald-forest', 'royal-purple',
        'sunset-orange', 'rose-gold', 'midnight-steel',
    ]
    for palette in COLOR_PALETTES:
        assert set(palette.colors) == set(COLOR_TOKENS)


def test_restore_defaults_to_ocean_deep():
    store = ThemeStore({})
    assert store.restore().value == DEFAULT_THEME
    assert store.get_colors()['ring'] == '#38bdf8'


def test_restore_saved_theme():
    store = ThemeStore({THEME_KEY: 'rose-gold'})
    assert store.restore().name == 'Rose Petal'
    assert store.current_theme == 'rose-gold'


def test_restore_unknown_saved_theme_falls_back_to_first_palette():
    store = ThemeStore({THEME_KEY: 'neon-disco'})
    assert store.restore() is COLOR_PALETTES[0]


def test_apply_theme_persists_and_notifies():
    storage = {}
    store = ThemeStore(storage)
    seen = []
    store.subscribe(lambda value, palette: seen.append((value, palette.name)))

    store.apply_theme('royal-purple')

    assert storage[THEME_KEY] == 'royal-purple'
    assert store.get_colors()['foreground'] == '#581c87'
    assert seen == [('royal-purple', 'Lavender Dream')]


def test_apply_unknown_theme_changes_nothing():
    storage = {}
    store = ThemeStore(storage)
    with pytest.raises(ValidationError):
        store.apply_theme('neon-disco')
    assert storage == {}
    assert store.current_theme == DEFAULT_THEME


def test_unsubscribed_listener_is_not_called():
    store = ThemeStore({})
    seen = []
    unsubscribe = store.subscribe(lambda value, palette: seen.append(value))
    unsubscribe()
    store.apply_theme('sunset-orange')
    assert seen == []


def test_reset_returns_to_default():
    storage = {THEME_KEY: 'midnight-steel'}
    store = ThemeStore(storage)
    store.restore()
    store.reset()
    assert storage[THEME_KEY] == DEFAULT_THEME


def test_get_palette_unknown():
    with pytest.raises(ValidationError):
        get_palette('plaid')
