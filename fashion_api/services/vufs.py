"""
VUFS taxonomy constants and item code generation.

VUFS is the catalog standard used for every wardrobe item: a domain
(apparel or footwear), a category hierarchy, a brand hierarchy and item
metadata. Brand names carry the registered mark as they appear in the
catalog (e.g. 'Nike®').
"""

import re
from enum import Enum


class VUFSDomain(str, Enum):
    APPAREL = 'APPAREL'
    FOOTWEAR = 'FOOTWEAR'


VUFS_BRANDS = [
    'Adidas®',
    'Nike®',
    'Zara®',
    'H&M',
    'Uniqlo®',
    'Puma®',
    'Vans®',
    'Converse®',
    'Levi\'s®',
    'Gap®',
    'Osklen',
    'Farm Rio',
]

VUFS_COLORS = [
    'Black',
    'White',
    'Off-White',
    'Gray',
    'Charcoal',
    'Navy',
    'Light Blue',
    'Blue',
    'Red',
    'Burgundy',
    'Pink',
    'Purple',
    'Green',
    'Olive',
    'Yellow',
    'Orange',
    'Brown',
    'Beige',
    'Cream',
]

APPAREL_PIECE_TYPES = [
    'Shirts',
    'Jackets',
    'Pants',
    'Dresses',
    'Tops',
    'Shorts',
    'Sweats',
    'Tank Tops',
    'Skirts',
    'Sweaters',
    'Bags',
    'Jewelry',
    'Eyewear',
]

FOOTWEAR_TYPES = [
    'Sneakers',
    'Boots',
    'Loafers',
    'Sandals',
    'Dress Shoes',
    'Athletic',
    'Casual',
    'Formal',
]

APPAREL_MATERIALS = [
    'Cotton',
    'Polyester',
    'Wool',
    'Silk',
    'Linen',
    'Denim',
    'Leather',
    'Nylon',
    'Viscose',
    'Elastane',
    'Cashmere',
    'Velvet',
]

FOOTWEAR_MATERIALS = [
    'Leather',
    'Canvas',
    'Suede',
    'Mesh',
    'Synthetic',
    'Nubuck',
    'Patent Leather',
    'Fabric',
    'Knit',
    'Rubber',
]

# Brands advertised by the capabilities endpoint
SUPPORTED_BRANDS = VUFS_BRANDS[:5]

_CODE_PREFIX = {VUFSDomain.APPAREL: 'APP', VUFSDomain.FOOTWEAR: 'FTW'}


def strip_mark(brand: str) -> str:
    return brand.replace('®', '').strip()


def _initials(words: list[str]) -> str:
    words = [w for w in words if w]
    if not words:
        return 'GEN'
    if len(words) == 1:
        return words[0][:3].upper()
    return ''.join(w[0] for w in words)[:3].upper()


def brand_code(brand: str) -> str:
    """Three-letter code: first letters of a one-word brand, else initials."""
    return _initials(re.sub(r'[^\w\s]', '', strip_mark(brand)).split(' '))


def type_code(piece_type: str) -> str:
    return _initials(re.split(r'[\s-]+', piece_type.strip()))


def code_prefix(domain: VUFSDomain | str, brand: str, piece_type: str) -> str:
    return f'{_CODE_PREFIX[VUFSDomain(domain)]}-{brand_code(brand)}-{type_code(piece_type)}-'


def generate_vufs_code(domain: VUFSDomain | str, brand: str, piece_type: str, sequence: int) -> str:
    """
    Build an item code such as APP-NIK-SHI-0001 or FTW-ADI-SNE-0042.

    Args:
        domain: APPAREL or FOOTWEAR
        brand: Brand name, registered mark allowed
        piece_type: Apparel piece type or footwear type
        sequence: Positive sequence number, zero padded to four digits
    """
    return f'{code_prefix(domain, brand, piece_type)}{sequence:04d}'
