"""
Label/text heuristics and VUFS code generation.
"""

from fashion_api.services import fashion_attributes as attrs
from fashion_api.services.vufs import brand_code, generate_vufs_code, type_code


def labels(*names):
    return [{'Name': name, 'Confidence': 90.0} for name in names]


# =============================================================================
# Domain / brand / piece type
# =============================================================================
def test_domain_from_footwear_labels():
    assert attrs.detect_domain(labels('Sneaker', 'Person')) == 'FOOTWEAR'


def test_domain_from_apparel_labels():
    assert attrs.detect_domain(labels('Clothing', 'Shirt')) == 'APPAREL'


def test_domain_unknown_without_fashion_labels():
    assert attrs.detect_domain(labels('Tree', 'Sky')) is None
    assert attrs.detect_domain([]) is None


def test_domain_prediction_is_normalized():
    assert attrs.detect_domain(labels('Shirt'), {'domain': 'footwear'}) == 'FOOTWEAR'


def test_domain_prediction_outside_taxonomy_is_ignored():
    assert attrs.detect_domain(labels('Shirt'), {'domain': 'bags'}) == 'APPAREL'


def test_brand_from_tag_text():
    assert attrs.detect_brand(['ZARA WOMAN', 'Made in Portugal']) == 'Zara®'
    assert attrs.detect_brand(['H&M conscious']) == 'H&M'


def test_brand_needs_text():
    assert attrs.detect_brand([]) is None
    assert attrs.detect_brand(['100% cotton']) is None


def test_brand_prediction_wins():
    assert attrs.detect_brand(['NIKE'], {'brand': 'Osklen'}) == 'Osklen'


def test_piece_type_uses_keyword_map():
    assert attrs.detect_piece_type(labels('Jeans'), 'APPAREL') == 'Pants'
    assert attrs.detect_piece_type(labels('Running Shoe'), 'FOOTWEAR') == 'Sneakers'


def test_piece_type_requires_domain():
    assert attrs.detect_piece_type(labels('Jeans'), None) is None


# =============================================================================
# Color / material / composition
# =============================================================================
def test_multi_word_color_needs_every_word():
    assert attrs.detect_color(labels('Light Blue')) == 'Light Blue'
    assert attrs.detect_color(labels('Blue')) == 'Blue'
    assert attrs.detect_color(labels('Fabric')) is None


def test_material_list_depends_on_domain():
    assert attrs.detect_material(labels('Denim'), 'APPAREL') == 'Denim'
    assert attrs.detect_material(labels('Suede'), 'FOOTWEAR') == 'Suede'
    assert attrs.detect_material(labels('Suede'), 'APPAREL') is None


def test_composition_portuguese_tag():
    composition = attrs.parse_composition(['60% ALGODÃO 40% POLIÉSTER'])

    assert [(c.material, c.percentage) for c in composition] == [('Cotton', 60), ('Polyester', 40)]


def test_composition_sorted_by_percentage():
    composition = attrs.parse_composition(['5% Elastane', '95% Cotton'])

    assert [(c.material, c.percentage) for c in composition] == [('Cotton', 95), ('Elastane', 5)]


def test_composition_material_first_fallback():
    composition = attrs.parse_composition(['COTTON 95%'])

    assert [(c.material, c.percentage) for c in composition] == [('Cotton', 95)]


def test_composition_ignores_zero_percent():
    assert attrs.parse_composition(['0% Silk']) == []


def test_unknown_material_is_title_cased():
    assert attrs.normalize_material_name('MODACRYLIC') == 'Modacrylic'


# =============================================================================
# Size / viewpoint / confidence
# =============================================================================
def test_size_patterns():
    assert attrs.extract_size(['SIZE M']) == 'M'
    assert attrs.extract_size(['TAMANHO 42']) == '42'
    assert attrs.extract_size(['EU 38']) == '38'
    assert attrs.extract_size(['US 9']) == '9'


def test_size_missing():
    assert attrs.extract_size(['Made in Brazil']) is None
    assert attrs.extract_size([]) is None


def test_viewpoint_composition_tag():
    assert attrs.detect_viewpoint([], ['Machine wash cold', 'Do not bleach']) == 'Composition Tag'


def test_viewpoint_details_and_damage():
    assert attrs.detect_viewpoint(labels('Zipper'), []) == 'Zipper'
    assert attrs.detect_viewpoint(labels('Stain'), []) == 'Damage'
    assert attrs.detect_viewpoint(labels('Texture'), []) == 'Details'


def test_viewpoint_defaults_to_front():
    assert attrs.detect_viewpoint(labels('Person'), []) == 'Front'


def test_confidence_without_model():
    scores = attrs.calculate_confidence('Nike®', 'Shirts', None, None)

    assert scores.overall == 50
    assert scores.brand == 70
    assert scores.piece_type == 80
    assert scores.color == 0
    assert scores.material == 0


def test_confidence_uses_model_scores():
    prediction = {'confidence': 0.92, 'brandConfidence': 88.6}
    scores = attrs.calculate_confidence('Nike®', None, 'Black', None, prediction)

    assert scores.overall == 92
    assert scores.brand == 89
    assert scores.piece_type == 0
    assert scores.color == 85


def test_text_lines_skip_words_and_single_characters():
    detections = [
        {'Type': 'LINE', 'DetectedText': 'NIKE'},
        {'Type': 'WORD', 'DetectedText': 'NIKE'},
        {'Type': 'LINE', 'DetectedText': 'M'},
    ]

    assert attrs.extract_text_lines(detections) == ['NIKE']


# =============================================================================
# VUFS codes
# =============================================================================
def test_vufs_codes():
    assert generate_vufs_code('APPAREL', 'Nike®', 'Shirts', 1) == 'APP-NIK-SHI-0001'
    assert generate_vufs_code('FOOTWEAR', 'Adidas®', 'Sneakers', 42) == 'FTW-ADI-SNE-0042'


def test_multi_word_codes_use_initials():
    assert brand_code('Farm Rio') == 'FR'
    assert brand_code("Levi's®") == 'LEV'
    assert type_code('Dress Shoes') == 'DS'
    assert type_code('Tank Tops') == 'TT'
