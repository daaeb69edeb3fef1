"""
Stock catalog for input distribution.

Ten tracked types take part in shortage detection: four fertilizers counted
in bags and six seed varieties counted in kg. Complete 16-16-16 and Ammonium
Phosphate 16-20-0 are recorded on allocations and requests but are not
tracked for shortages.
"""

FERTILIZER = 'fertilizer'
SEED = 'seed'

# Order matters: breakdown strings and reports follow it.
STOCK_TYPES = [
    {
        'id': 'urea_46_0_0',
        'label': 'Urea (46-0-0)',
        'short_label': 'Urea',
        'category': FERTILIZER,
        'allocation_field': 'urea_46_0_0_bags',
        'request_field': 'requested_urea_bags',
    },
    {
        'id': 'complete_14_14_14',
        'label': 'Complete (14-14-14)',
        'short_label': 'Complete',
        'category': FERTILIZER,
        'allocation_field': 'complete_14_14_14_bags',
        'request_field': 'requested_complete_14_bags',
    },
    {
        'id': 'ammonium_sulfate_21_0_0',
        'label': 'Ammonium Sulfate (21-0-0)',
        'short_label': 'Ammonium Sulfate',
        'category': FERTILIZER,
        'allocation_field': 'ammonium_sulfate_21_0_0_bags',
        'request_field': 'requested_ammonium_sulfate_bags',
    },
    {
        'id': 'muriate_potash_0_0_60',
        'label': 'Muriate of Potash (0-0-60)',
        'short_label': 'Muriate Potash',
        'category': FERTILIZER,
        'allocation_field': 'muriate_potash_0_0_60_bags',
        'request_field': 'requested_muriate_potash_bags',
    },
    {
        'id': 'jackpot',
        'label': 'Jackpot',
        'short_label': 'Jackpot',
        'category': SEED,
        'crop': 'rice',
        'allocation_field': 'jackpot_kg',
        'request_field': 'requested_jackpot_kg',
    },
    {
        'id': 'us88',
        'label': 'US88',
        'short_label': 'US88',
        'category': SEED,
        'crop': 'rice',
        'allocation_field': 'us88_kg',
        'request_field': 'requested_us88_kg',
    },
    {
        'id': 'th82',
        'label': 'TH82',
        'short_label': 'TH82',
        'category': SEED,
        'crop': 'rice',
        'allocation_field': 'th82_kg',
        'request_field': 'requested_th82_kg',
    },
    {
        'id': 'rh9000',
        'label': 'RH9000',
        'short_label': 'RH9000',
        'category': SEED,
        'crop': 'corn',
        'allocation_field': 'rh9000_kg',
        'request_field': 'requested_rh9000_kg',
    },
    {
        'id': 'lumping143',
        'label': 'Lumping 143',
        'short_label': 'Lumping143',
        'category': SEED,
        'crop': 'corn',
        'allocation_field': 'lumping143_kg',
        'request_field': 'requested_lumping143_kg',
    },
    {
        'id': 'lp296',
        'label': 'LP296',
        'short_label': 'LP296',
        'category': SEED,
        'crop': 'corn',
        'allocation_field': 'lp296_kg',
        'request_field': 'requested_lp296_kg',
    },
]

# Recorded and offered as substitutes, never checked for shortages
EXTRA_STOCK_TYPES = [
    {
        'id': 'complete_16_16_16',
        'label': 'Complete (16-16-16)',
        'short_label': 'Complete 16',
        'category': FERTILIZER,
        'allocation_field': 'complete_16_16_16_bags',
        'request_field': 'requested_complete_16_bags',
    },
    {
        'id': 'ammonium_phosphate_16_20_0',
        'label': 'Ammonium Phosphate (16-20-0)',
        'short_label': 'Ammonium Phosphate',
        'category': FERTILIZER,
        'allocation_field': 'ammonium_phosphate_16_20_0_bags',
        'request_field': 'requested_ammonium_phosphate_bags',
    },
]

ALL_STOCK_TYPES = STOCK_TYPES + EXTRA_STOCK_TYPES
STOCK_TYPES_BY_ID = {t['id']: t for t in ALL_STOCK_TYPES}

FERTILIZER_TYPES = [t for t in STOCK_TYPES if t['category'] == FERTILIZER]
SEED_TYPES = [t for t in STOCK_TYPES if t['category'] == SEED]
RICE_SEED_TYPES = [t for t in SEED_TYPES if t['crop'] == 'rice']
CORN_SEED_TYPES = [t for t in SEED_TYPES if t['crop'] == 'corn']

ALLOCATION_QUANTITY_FIELDS = [t['allocation_field'] for t in ALL_STOCK_TYPES]
REQUEST_QUANTITY_FIELDS = [t['request_field'] for t in ALL_STOCK_TYPES]

# Request field reduced when a type is substituted away
SUBSTITUTION_ORIGINAL_FIELDS = {t['id']: t['request_field'] for t in STOCK_TYPES}

# Request field increased when a type is brought in as the substitute.
# Complete 16-16-16 is booked against the Complete 14-14-14 request line.
SUBSTITUTION_SUBSTITUTE_FIELDS = {
    **SUBSTITUTION_ORIGINAL_FIELDS,
    'complete_16_16_16': 'requested_complete_14_bags',
}


def get_stock_type(type_id):
    """Catalog entry for a type id; raises ValueError for unknown ids."""
    try:
        return STOCK_TYPES_BY_ID[type_id]
    except KeyError:
        raise ValueError(f"Unknown stock type: {type_id}")
