import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import phonenumber_field.modelfields
import uuid
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='RSBSASubmission',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('last_name', models.CharField(db_index=True, max_length=100)),
                ('first_name', models.CharField(db_index=True, max_length=100)),
                ('middle_name', models.CharField(blank=True, max_length=100)),
                ('ext_name', models.CharField(blank=True, help_text='Jr., Sr., III ...', max_length=20)),
                ('gender', models.CharField(blank=True, choices=[('Male', 'Male'), ('Female', 'Female')], max_length=10)),
                ('birthdate', models.DateField(blank=True, null=True)),
                ('contact_number', phonenumber_field.modelfields.PhoneNumberField(blank=True, max_length=128, null=True, region='PH')),
                ('barangay', models.CharField(db_index=True, max_length=100)),
                ('municipality', models.CharField(default='Dumangas', max_length=100)),
                ('main_livelihood', models.CharField(blank=True, help_text='e.g. Farmer, Farmworker/Laborer, Fisherfolk', max_length=100)),
                ('farm_location', models.CharField(blank=True, max_length=255)),
                ('parcel_area', models.CharField(blank=True, help_text='Comma-separated list of parcel areas in hectares', max_length=255)),
                ('total_farm_area', models.DecimalField(decimal_places=4, default=Decimal('0'), help_text='Sum of all parcel areas (ha)', max_digits=10)),
                ('ownership_type_registered_owner', models.BooleanField(default=False)),
                ('ownership_type_tenant', models.BooleanField(default=False)),
                ('ownership_type_lessee', models.BooleanField(default=False)),
                ('farmer_rice', models.BooleanField(default=False)),
                ('farmer_corn', models.BooleanField(default=False)),
                ('farmer_other_crops', models.BooleanField(default=False)),
                ('farmer_other_crops_text', models.CharField(blank=True, max_length=255)),
                ('farmer_livestock', models.BooleanField(default=False)),
                ('farmer_livestock_text', models.CharField(blank=True, max_length=255)),
                ('farmer_poultry', models.BooleanField(default=False)),
                ('farmer_poultry_text', models.CharField(blank=True, max_length=255)),
                ('status', models.CharField(choices=[('Submitted', 'Submitted'), ('Active Farmer', 'Active Farmer'), ('Not Active', 'Not Active')], db_index=True, default='Submitted', max_length=20)),
                ('ffrs_code', models.CharField(blank=True, help_text='FFRS identifier, assigned on registration', max_length=30, null=True, unique=True)),
                ('submitted_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='rsbsa_submissions', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'RSBSA Submission',
                'verbose_name_plural': 'RSBSA Submissions',
                'db_table': 'rsbsa_submission',
                'ordering': ['last_name', 'first_name'],
                'indexes': [
                    models.Index(fields=['barangay', 'status'], name='rsbsa_brgy_status_idx'),
                    models.Index(fields=['last_name', 'first_name'], name='rsbsa_name_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='FarmParcel',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('parcel_number', models.CharField(max_length=50)),
                ('farm_location_barangay', models.CharField(db_index=True, max_length=100)),
                ('farm_location_municipality', models.CharField(blank=True, max_length=100)),
                ('total_farm_area_ha', models.DecimalField(decimal_places=4, help_text='Parcel area in hectares (must be positive)', max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.0001'))])),
                ('within_ancestral_domain', models.CharField(choices=[('Yes', 'Yes'), ('No', 'No')], default='No', max_length=3)),
                ('ownership_document_no', models.CharField(blank=True, max_length=100)),
                ('agrarian_reform_beneficiary', models.CharField(choices=[('Yes', 'Yes'), ('No', 'No')], default='No', max_length=3)),
                ('ownership_type_registered_owner', models.BooleanField(default=False)),
                ('ownership_type_tenant', models.BooleanField(default=False)),
                ('ownership_type_lessee', models.BooleanField(default=False)),
                ('ownership_type_others', models.BooleanField(default=False)),
                ('tenant_land_owner_name', models.CharField(blank=True, db_index=True, max_length=255)),
                ('lessee_land_owner_name', models.CharField(blank=True, db_index=True, max_length=255)),
                ('ownership_others_specify', models.CharField(blank=True, max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('submission', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='parcels', to='rsbsa.rsbsasubmission')),
            ],
            options={
                'verbose_name': 'Farm Parcel',
                'verbose_name_plural': 'Farm Parcels',
                'db_table': 'rsbsa_farm_parcels',
                'ordering': ['submission', 'parcel_number'],
            },
        ),
    ]
