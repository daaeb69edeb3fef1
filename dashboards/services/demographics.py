"""
RSBSA Demographics Service

Breakdowns of the registered farmer population: age brackets, farming
activities, farm size, ownership type and gender.
"""

from django.utils import timezone

from rsbsa.models import RSBSASubmission

AGE_BRACKETS = ['< 20', '20-29', '30-39', '40-49', '50-59', '60-69', '70+']

ACTIVITY_FIELDS = [
    ('farmer_rice', 'Rice'),
    ('farmer_corn', 'Corn'),
    ('farmer_other_crops', 'Other Crops'),
    ('farmer_livestock', 'Livestock'),
    ('farmer_poultry', 'Poultry'),
]

OWNERSHIP_FIELDS = [
    ('ownership_type_registered_owner', 'Registered Owner'),
    ('ownership_type_tenant', 'Tenant'),
    ('ownership_type_lessee', 'Lessee'),
]


def _pct(count, total):
    return round(count / total * 100) if total > 0 else 0


def age_bracket(age):
    """Bracket label for an age in years; None when the age is unknown."""
    if age is None:
        return None
    if age < 20:
        return '< 20'
    if age >= 70:
        return '70+'
    low = age // 10 * 10
    return f"{low}-{low + 9}"


def farm_size_category(area):
    """'Small' under 2 ha, 'Medium' 2 to 4 ha, 'Large' above 4 ha."""
    if area is None or area <= 0:
        return None
    if area < 2:
        return 'Small'
    if area <= 4:
        return 'Medium'
    return 'Large'


class RSBSADemographicsService:

    def get_demographics(self, today=None):
        today = today or timezone.localdate()
        fields = ['birthdate', 'gender', 'total_farm_area']
        fields += [f for f, _ in ACTIVITY_FIELDS] + [f for f, _ in OWNERSHIP_FIELDS]
        rows = list(RSBSASubmission.objects.values(*fields))
        total = len(rows)

        ages = dict.fromkeys(AGE_BRACKETS, 0)
        sizes = {'Small': 0, 'Medium': 0, 'Large': 0}
        genders = {'Male': 0, 'Female': 0, 'Other': 0}
        counts = {field: 0 for field, _ in ACTIVITY_FIELDS + OWNERSHIP_FIELDS}

        for row in rows:
            bracket = age_bracket(self._age(row['birthdate'], today))
            if bracket:
                ages[bracket] += 1

            size = farm_size_category(row['total_farm_area'])
            if size:
                sizes[size] += 1

            for field in counts:
                if row[field]:
                    counts[field] += 1

            gender = (row['gender'] or '').lower()
            if gender == 'male':
                genders['Male'] += 1
            elif gender == 'female':
                genders['Female'] += 1
            else:
                genders['Other'] += 1

        size_descriptions = {
            'Small': '< 2 hectares',
            'Medium': '2 - 4 hectares',
            'Large': '> 4 hectares',
        }

        gender_breakdown = [
            {'gender': g, 'count': c, 'percentage': _pct(c, total)}
            for g, c in genders.items()
            if g != 'Other' or c > 0
        ]

        return {
            'total_farmers': total,
            'age_brackets': [
                {'bracket': b, 'count': c, 'percentage': _pct(c, total)} for b, c in ages.items()
            ],
            'crop_distribution': [
                {'crop': label, 'count': counts[field], 'percentage': _pct(counts[field], total)}
                for field, label in ACTIVITY_FIELDS
            ],
            'farm_size_categories': [
                {
                    'label': label,
                    'description': size_descriptions[label],
                    'count': c,
                    'percentage': _pct(c, total),
                }
                for label, c in sizes.items()
            ],
            'ownership_breakdown': [
                {'type': label, 'count': counts[field], 'percentage': _pct(counts[field], total)}
                for field, label in OWNERSHIP_FIELDS
            ],
            'gender_breakdown': gender_breakdown,
        }

    @staticmethod
    def _age(birthdate, today):
        if not birthdate:
            return None
        years = today.year - birthdate.year
        if (today.month, today.day) < (birthdate.month, birthdate.day):
            years -= 1
        return years if years >= 0 else None
