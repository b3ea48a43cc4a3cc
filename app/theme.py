"""Dashboard color themes.

Six fixed palettes; the active one is persisted under ``dashboard_theme``
and every change is broadcast to registered listeners.
"""

import logging

from app.errors import ValidationError
from app.firestore_models import ThemePalette

logger = logging.getLogger(__name__)

THEME_KEY = 'dashboard_theme'
DEFAULT_THEME = 'ocean-deep'


def _palette(name, value, preview, description, **colors):
    return ThemePalette(name=name, value=value, preview=preview,
                        description=description, colors=colors)


COLOR_PALETTES = [
    _palette(
        'Soft Sky', 'ocean-deep', '#e0f2fe', 'Gentle sky blue tones',
        background='linear-gradient(135deg, #f0f9ff 0%, #e0f2fe 50%, #bae6fd 100%)',
        foreground='#0c4a6e',
        card='rgba(255, 255, 255, 0.9)',
        cardForeground='#075985',
        primary='linear-gradient(135deg, #7dd3fc 0%, #38bdf8 50%, #0ea5e9 100%)',
        primaryForeground='#ffffff',
        secondary='rgba(186, 230, 253, 0.5)',
        secondaryForeground='#0369a1',
        muted='rgba(224, 242, 254, 0.6)',
        mutedForeground='#0284c7',
        accent='rgba(125, 211, 252, 0.3)',
        accentForeground='#0369a1',
        border='rgba(186, 230, 253, 0.4)',
        input='rgba(255, 255, 255, 0.8)',
        ring='#38bdf8',
    ),
    _palette(
        'Mint Fresh', 'emerald-forest', '#d1fae5', 'Soft mint green',
        background='linear-gradient(135deg, #f0fdf4 0%, #dcfce7 50%, #bbf7d0 100%)',
        foreground='#14532d',
        card='rgba(255, 255, 255, 0.9)',
        cardForeground='#166534',
        primary='linear-gradient(135deg, #86efac 0%, #4ade80 50%, #22c55e 100%)',
        primaryForeground='#ffffff',
        secondary='rgba(187, 247, 208, 0.5)',
        secondaryForeground='#15803d',
        muted='rgba(220, 252, 231, 0.6)',
        mutedForeground='#16a34a',
        accent='rgba(134, 239, 172, 0.3)',
        accentForeground='#15803d',
        border='rgba(187, 247, 208, 0.4)',
        input='rgba(255, 255, 255, 0.8)',
        ring='#4ade80',
    ),
    _palette(
        'Lavender Dream', 'royal-purple', '#e9d5ff', 'Soft lavender purple',
        background='linear-gradient(135deg, #faf5ff 0%, #f3e8ff 50%, #e9d5ff 100%)',
        foreground='#581c87',
        card='rgba(255, 255, 255, 0.9)',
        cardForeground='#6b21a8',
        primary='linear-gradient(135deg, #c4b5fd 0%, #a78bfa 50%, #8b5cf6 100%)',
        primaryForeground='#ffffff',
        secondary='rgba(233, 213, 255, 0.5)',
        secondaryForeground='#7c3aed',
        muted='rgba(243, 232, 255, 0.6)',
        mutedForeground='#8b5cf6',
        accent='rgba(196, 181, 253, 0.3)',
        accentForeground='#7c3aed',
        border='rgba(233, 213, 255, 0.4)',
        input='rgba(255, 255, 255, 0.8)',
        ring='#a78bfa',
    ),
    _palette(
        'Peach Blush', 'sunset-orange', '#fed7aa', 'Warm peach tones',
        background='linear-gradient(135deg, #fff7ed 0%, #ffedd5 50%, #fed7aa 100%)',
        foreground='#7c2d12',
        card='rgba(255, 255, 255, 0.9)',
        cardForeground='#9a3412',
        primary='linear-gradient(135deg, #fdba74 0%, #fb923c 50%, #f97316 100%)',
        primaryForeground='#ffffff',
        secondary='rgba(254, 215, 170, 0.5)',
        secondaryForeground='#c2410c',
        muted='rgba(255, 237, 213, 0.6)',
        mutedForeground='#ea580c',
        accent='rgba(253, 186, 116, 0.3)',
        accentForeground='#c2410c',
        border='rgba(254, 215, 170, 0.4)',
        input='rgba(255, 255, 255, 0.8)',
        ring='#fb923c',
    ),
    _palette(
        'Rose Petal', 'rose-gold', '#fecdd3', 'Soft rose pink',
        background='linear-gradient(135deg, #fff1f2 0%, #ffe4e6 50%, #fecdd3 100%)',
        foreground='#881337',
        card='rgba(255, 255, 255, 0.9)',
        cardForeground='#9f1239',
        primary='linear-gradient(135deg, #fda4af 0%, #fb7185 50%, #f43f5e 100%)',
        primaryForeground='#ffffff',
        secondary='rgba(254, 205, 211, 0.5)',
        secondaryForeground='#be123c',
        muted='rgba(255, 228, 230, 0.6)',
        mutedForeground='#e11d48',
        accent='rgba(253, 164, 175, 0.3)',
        accentForeground='#be123c',
        border='rgba(254, 205, 211, 0.4)',
        input='rgba(255, 255, 255, 0.8)',
        ring='#fb7185',
    ),
    _palette(
        'Warm Gray', 'midnight-steel', '#f3f4f6', 'Soft warm grays',
        background='linear-gradient(135deg, #f9fafb 0%, #f3f4f6 50%, #e5e7eb 100%)',
        foreground='#374151',
        card='rgba(255, 255, 255, 0.95)',
        cardForeground='#4b5563',
        primary='linear-gradient(135deg, #d1d5db 0%, #9ca3af 50%, #6b7280 100%)',
        primaryForeground='#ffffff',
        secondary='rgba(229, 231, 235, 0.6)',
        secondaryForeground='#4b5563',
        muted='rgba(243, 244, 246, 0.7)',
        mutedForeground='#6b7280',
        accent='rgba(209, 213, 219, 0.4)',
        accentForeground='#4b5563',
        border='rgba(229, 231, 235, 0.5)',
        input='rgba(255, 255, 255, 0.9)',
        ring='#9ca3af',
    ),
]

PALETTES_BY_VALUE = {p.value: p for p in COLOR_PALETTES}


def get_palette(value):
    palette = PALETTES_BY_VALUE.get(value)
    if palette is None:
        raise ValidationError(f'Unknown theme: {value}')
    return palette


class ThemeStore:

    def __init__(self, storage, default=DEFAULT_THEME):
        self._storage = storage
        self._default = default if default in PALETTES_BY_VALUE else DEFAULT_THEME
        self._listeners = []
        self.current_theme = self._default
        self.palette = PALETTES_BY_VALUE[self.current_theme]

    def restore(self):
        saved = self._storage.get(THEME_KEY) or self._default
        palette = PALETTES_BY_VALUE.get(saved, COLOR_PALETTES[0])
        self.current_theme = palette.value
        self.palette = palette
        return palette

    def subscribe(self, listener):
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def apply_theme(self, value, palette=None):
        if palette is None:
            palette = get_palette(value)
        elif value not in PALETTES_BY_VALUE:
            raise ValidationError(f'Unknown theme: {value}')

        self.current_theme = value
        self.palette = palette
        self._storage[THEME_KEY] = value
        logger.info('Theme applied: %s', value)
        for listener in list(self._listeners):
            listener(value, palette)
        return palette

    def reset(self):
        return self.apply_theme(DEFAULT_THEME)

    def get_colors(self):
        return dict(self.palette.colors)
