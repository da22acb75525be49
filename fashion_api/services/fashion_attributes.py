"""
Heuristic fashion attribute detection.

Maps raw label detections (Rekognition `Labels`) and detected text lines
to VUFS attributes. A custom model prediction, when present, always wins
for the attributes it carries a value for.
"""

import re
from typing import Any

from fashion_api.schemas.analysis import CompositionEntry, ConfidenceScores
from fashion_api.services.vufs import (
    APPAREL_MATERIALS,
    APPAREL_PIECE_TYPES,
    FOOTWEAR_MATERIALS,
    FOOTWEAR_TYPES,
    VUFS_BRANDS,
    VUFS_COLORS,
    strip_mark,
)


Prediction = dict[str, Any] | None

FOOTWEAR_KEYWORDS = [
    'shoe', 'boot', 'sneaker', 'sandal', 'heel', 'loafer',
    'footwear', 'sole', 'lace', 'athletic shoe',
]

APPAREL_KEYWORDS = [
    'clothing', 'shirt', 'jacket', 'dress', 'pants', 'skirt',
    'top', 'blouse', 'sweater', 'coat', 'vest', 'shorts',
]

PIECE_TYPE_KEYWORDS = {
    'Shirts': ['shirt', 'blouse', 'button-up'],
    'Jackets': ['jacket', 'blazer', 'coat'],
    'Pants': ['pants', 'trousers', 'jeans'],
    'Dresses': ['dress', 'gown'],
    'Tops': ['top', 'shirt', 'blouse'],
    'Shorts': ['shorts'],
    'Sweats': ['sweatshirt', 'hoodie', 'sweatpants'],
    'Tank Tops': ['tank', 'camisole'],
    'Bags': ['bag', 'purse', 'handbag', 'backpack'],
    'Jewelry': ['jewelry', 'necklace', 'bracelet', 'ring'],
    'Eyewear': ['glasses', 'sunglasses'],
}

FOOTWEAR_TYPE_KEYWORDS = {
    'Sneakers': ['sneaker', 'athletic shoe', 'running shoe'],
    'Boots': ['boot', 'ankle boot'],
    'Sandals': ['sandal', 'flip-flop'],
    'Dress Shoes': ['dress shoe', 'oxford', 'loafer'],
    'Athletic': ['athletic', 'sport', 'running'],
}

MATERIAL_ALIASES = {
    'cotton': 'Cotton',
    'polyester': 'Polyester',
    'wool': 'Wool',
    'silk': 'Silk',
    'linen': 'Linen',
    'nylon': 'Nylon',
    'spandex': 'Spandex',
    'elastane': 'Elastane',
    'viscose': 'Viscose',
    'rayon': 'Rayon',
    'acrylic': 'Acrylic',
    'cashmere': 'Cashmere',
    'leather': 'Leather',
    'denim': 'Denim',
    'velvet': 'Velvet',
    'satin': 'Satin',
    'chiffon': 'Chiffon',
    'tweed': 'Tweed',
    'fleece': 'Fleece',
    'modal': 'Modal',
    'lyocell': 'Lyocell',
    'tencel': 'Tencel',
    'hemp': 'Hemp',
    'bamboo': 'Bamboo',
    # Portuguese tag text
    'algodão': 'Cotton',
    'algodao': 'Cotton',
    'poliéster': 'Polyester',
    'poliester': 'Polyester',
    'lã': 'Wool',
    'la': 'Wool',
    'seda': 'Silk',
    'linho': 'Linen',
    'náilon': 'Nylon',
    'nailon': 'Nylon',
    'elastano': 'Elastane',
    'couro': 'Leather',
    'acrílico': 'Acrylic',
    'acrilico': 'Acrylic',
    'caxemira': 'Cashmere',
    'cachemir': 'Cashmere',
}

DEFAULT_ATTRIBUTE_CONFIDENCE = {
    'brand': 70,
    'piece_type': 80,
    'color': 85,
    'material': 60,
}

_CARE_KEYWORDS = ['wash', 'dry', 'iron', 'bleach', 'cotton', 'polyester', 'wool', '%']
_SIZE_WORDS = ['s', 'm', 'l', 'xl', 'xxl', 'small', 'medium', 'large']
_BRAND_TAG_KEYWORDS = ['made in', 'rn', 'ca']
_DAMAGE_KEYWORDS = ['stain', 'hole', 'tear', 'damage', 'rip']

_PERCENT_FIRST = re.compile(r'(\d{1,3})\s*%\s*([A-Za-zÀ-ÿ]+)')
_MATERIAL_FIRST = re.compile(r'([A-Za-zÀ-ÿ]+)\s*(\d{1,3})\s*%')
_LETTER_SIZE = r'(XXS|XS|S|M|L|XL|XXL|XXXL|2XL|3XL|4XL|5XL)'
_SIZE_PATTERNS = [
    re.compile(rf'\b{_LETTER_SIZE}\b'),
    re.compile(r'\bSIZE\s*(\d{1,2})\b'),
    re.compile(r'\bTAMANHO\s*(\d{1,2})\b'),
    re.compile(r'\b(3[4-9]|4[0-9]|5[0-2])\b'),
    re.compile(r'\bUS\s*(\d{1,2})\b'),
    re.compile(r'\bUK\s*(\d{1,2})\b'),
]
_STANDALONE_SIZE = re.compile(r'^(XXS|XS|S|M|L|XL|XXL|XXXL|2XL|3XL)$')


def label_names(labels: list[dict[str, Any]]) -> list[str]:
    return [str(label.get('Name', '')).lower() for label in labels]


def _predicted(prediction: Prediction, key: str) -> Any:
    if prediction:
        return prediction.get(key) or None
    return None


def _any_label_contains(names: list[str], keywords: list[str]) -> bool:
    return any(keyword in name for keyword in keywords for name in names)


def extract_text_lines(text_detections: list[dict[str, Any]]) -> list[str]:
    """LINE detections longer than one character."""
    return [
        d['DetectedText']
        for d in text_detections
        if d.get('Type') == 'LINE' and d.get('DetectedText') and len(d['DetectedText']) > 1
    ]


def detect_domain(labels: list[dict[str, Any]], prediction: Prediction = None) -> str | None:
    predicted = str(_predicted(prediction, 'domain') or '').upper()
    if predicted in ('APPAREL', 'FOOTWEAR'):
        return predicted

    names = label_names(labels)
    if _any_label_contains(names, FOOTWEAR_KEYWORDS):
        return 'FOOTWEAR'
    if _any_label_contains(names, APPAREL_KEYWORDS):
        return 'APPAREL'
    return None


def detect_brand(detected_text: list[str], prediction: Prediction = None) -> str | None:
    predicted = _predicted(prediction, 'brand')
    if predicted:
        return predicted

    all_text = ' '.join(detected_text).lower()
    if not all_text:
        return None
    for brand in VUFS_BRANDS:
        if strip_mark(brand).lower() in all_text:
            return brand
    # Logo recognition would go here; labels alone cannot name a brand
    return None


def detect_piece_type(
    labels: list[dict[str, Any]], domain: str | None, prediction: Prediction = None
) -> str | None:
    predicted = _predicted(prediction, 'pieceType')
    if predicted:
        return predicted

    names = label_names(labels)
    if domain == 'APPAREL':
        candidates, keyword_map = APPAREL_PIECE_TYPES, PIECE_TYPE_KEYWORDS
    elif domain == 'FOOTWEAR':
        candidates, keyword_map = FOOTWEAR_TYPES, FOOTWEAR_TYPE_KEYWORDS
    else:
        return None

    for piece_type in candidates:
        keywords = keyword_map.get(piece_type, [piece_type.lower()])
        if _any_label_contains(names, [k.lower() for k in keywords]):
            return piece_type
    return None


def detect_color(labels: list[dict[str, Any]], prediction: Prediction = None) -> str | None:
    """First VUFS color whose every word appears in some label."""
    predicted = _predicted(prediction, 'color')
    if predicted:
        return predicted

    names = label_names(labels)
    for color in VUFS_COLORS:
        words = color.lower().split(' ')
        if all(any(word in name for name in names) for word in words):
            return color
    return None


def detect_material(
    labels: list[dict[str, Any]], domain: str | None, prediction: Prediction = None
) -> str | None:
    predicted = _predicted(prediction, 'material')
    if predicted:
        return predicted

    names = label_names(labels)
    materials = FOOTWEAR_MATERIALS if domain == 'FOOTWEAR' else APPAREL_MATERIALS
    for material in materials:
        if any(material.lower() in name for name in names):
            return material
    return None


def detect_viewpoint(labels: list[dict[str, Any]], detected_text: list[str]) -> str:
    """Which part of the garment the photo shows (tag, detail, damage, front)."""
    names = label_names(labels)
    all_text = ' '.join(detected_text).lower()

    if sum(1 for k in _CARE_KEYWORDS if k in all_text) >= 2:
        return 'Composition Tag'

    has_size_word = any(re.search(rf'\b{word}\b', all_text) for word in _SIZE_WORDS)
    if (
        (has_size_word and any('text' in name for name in names))
        or any(k in all_text for k in _BRAND_TAG_KEYWORDS)
        or any('label' in name and 'clothing' not in name for name in names)
    ):
        return 'Main Tag'

    for detail in ('zipper', 'button', 'pocket'):
        if detail in names:
            return detail.capitalize()

    if _any_label_contains(names, _DAMAGE_KEYWORDS):
        return 'Damage'

    if _any_label_contains(names, ['texture', 'pattern', 'macro']):
        return 'Details'

    return 'Front'


def normalize_material_name(raw: str) -> str:
    normalized = raw.strip().lower()
    if normalized in MATERIAL_ALIASES:
        return MATERIAL_ALIASES[normalized]
    return raw[:1].upper() + raw[1:].lower()


def parse_composition(detected_text: list[str]) -> list[CompositionEntry]:
    """
    Parse fiber composition from tag text.

    Tries "60% Cotton" first and falls back to "Cotton 60%". Entries are
    sorted by percentage, highest first.
    """
    all_text = ' '.join(detected_text)
    composition = []

    for match in _PERCENT_FIRST.finditer(all_text):
        percentage = int(match.group(1))
        if 0 < percentage <= 100:
            composition.append(CompositionEntry(material=normalize_material_name(match.group(2)), percentage=percentage))

    if not composition:
        for match in _MATERIAL_FIRST.finditer(all_text):
            percentage = int(match.group(2))
            if 0 < percentage <= 100:
                composition.append(CompositionEntry(material=normalize_material_name(match.group(1)), percentage=percentage))

    composition.sort(key=lambda entry: entry.percentage, reverse=True)
    return composition


def extract_size(detected_text: list[str]) -> str | None:
    all_text = ' '.join(detected_text).upper()
    for pattern in _SIZE_PATTERNS:
        match = pattern.search(all_text)
        if match:
            return match.group(1) or match.group(0)

    for text in detected_text:
        token = text.strip().upper()
        if _STANDALONE_SIZE.match(token):
            return token
        if re.fullmatch(r'\d{1,2}', token):
            number = int(token)
            if number <= 18 or 34 <= number <= 52:
                return token
    return None


def calculate_confidence(
    brand: str | None,
    piece_type: str | None,
    color: str | None,
    material: str | None,
    prediction: Prediction = None,
) -> ConfidenceScores:
    """
    Overall score comes from the model (0.5 without one); each attribute
    gets the model's own score or a fixed default when it was detected.
    """
    prediction = prediction or {}
    base = prediction.get('confidence') or 0.5

    def score(value: str | None, key: str, default: int) -> int:
        if not value:
            return 0
        return int(round(prediction.get(key) or default))

    return ConfidenceScores(
        overall=int(round(base * 100)),
        brand=score(brand, 'brandConfidence', DEFAULT_ATTRIBUTE_CONFIDENCE['brand']),
        piece_type=score(piece_type, 'pieceTypeConfidence', DEFAULT_ATTRIBUTE_CONFIDENCE['piece_type']),
        color=score(color, 'colorConfidence', DEFAULT_ATTRIBUTE_CONFIDENCE['color']),
        material=score(material, 'materialConfidence', DEFAULT_ATTRIBUTE_CONFIDENCE['material']),
    )
