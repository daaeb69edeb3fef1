"""
FFRS (Farmers and Fisherfolk Registration System) codes.

Format: {region}-{province}-{municipality}-{barangay code}-{6 random digits}
e.g. 06-30-18-013-004217 for a farmer from Dumangas proper.
"""

import random
import re

from django.conf import settings


# Dumangas barangays and their FFRS codes
BARANGAY_CODES = {
    'Aurora-Del Pilar': '001',
    'Bacay': '002',
    'Bacong': '003',
    'Balabag': '004',
    'Balud': '005',
    'Bantud': '006',
    'Bantud Fabrica': '007',
    'Binaobawan': '008',
    'Bolilao': '009',
    'Cabilao Grande': '010',
    'Cabilao Pequeño': '011',
    'Calao': '012',
    'Dumangas': '013',
    'Ilaya': '014',
    'Jalaud': '015',
    'Lacturan': '016',
    'Lawa-an': '017',
    'Paco': '018',
    'Paloc Bigque': '019',
    'Pulao': '020',
    'Sapao': '021',
    'Tabucan': '022',
    'Taminla': '023',
    'Tiring': '024',
    'Victoria': '025',
    'Zaldivar': '026',
}

CODE_TO_BARANGAY = {code: name for name, code in BARANGAY_CODES.items()}

UNKNOWN_BARANGAY_CODE = '000'


def get_prefix():
    return settings.FFRS_CODE_PREFIX


def get_barangay_code(barangay):
    """Code for a barangay name, '000' when it is not in the table."""
    if not barangay:
        return UNKNOWN_BARANGAY_CODE
    return BARANGAY_CODES.get(barangay.strip(), UNKNOWN_BARANGAY_CODE)


def generate_ffrs_code(barangay, rng=random):
    """Build a new FFRS code for a farmer registered in `barangay`."""
    suffix = rng.randint(0, 999999)
    return f"{get_prefix()}-{get_barangay_code(barangay)}-{suffix:06d}"


def _code_pattern():
    return re.compile(rf'^{re.escape(get_prefix())}-(\d{{3}})-(\d{{6}})$')


def is_valid_ffrs_code(code):
    return bool(code) and _code_pattern().match(code) is not None


def get_barangay_from_ffrs_code(code):
    """
    Recover the barangay name from an FFRS code.

    Returns None for malformed codes and for the unmapped '000' code.
    """
    if not code:
        return None
    match = _code_pattern().match(code.strip())
    if not match:
        return None
    return CODE_TO_BARANGAY.get(match.group(1))
