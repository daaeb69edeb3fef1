import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import uuid
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('rsbsa', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='RegionalAllocation',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('season', models.CharField(help_text='wet_YYYY or dry_YYYY, derived from allocation date', max_length=20, unique=True)),
                ('allocation_date', models.DateField()),
                ('season_start_date', models.DateField(blank=True, null=True)),
                ('season_end_date', models.DateField(blank=True, null=True)),
                ('urea_46_0_0_bags', models.DecimalField(decimal_places=2, default=Decimal('0'), help_text='Urea 46-0-0 (bags)', max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('complete_14_14_14_bags', models.DecimalField(decimal_places=2, default=Decimal('0'), help_text='Complete 14-14-14 (bags)', max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('complete_16_16_16_bags', models.DecimalField(decimal_places=2, default=Decimal('0'), help_text='Complete 16-16-16 (bags)', max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('ammonium_sulfate_21_0_0_bags', models.DecimalField(decimal_places=2, default=Decimal('0'), help_text='Ammonium Sulfate 21-0-0 (bags)', max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('ammonium_phosphate_16_20_0_bags', models.DecimalField(decimal_places=2, default=Decimal('0'), help_text='Ammonium Phosphate 16-20-0 (bags)', max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('muriate_potash_0_0_60_bags', models.DecimalField(decimal_places=2, default=Decimal('0'), help_text='Muriate of Potash 0-0-60 (bags)', max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('jackpot_kg', models.DecimalField(decimal_places=2, default=Decimal('0'), help_text='Jackpot rice seeds (kg)', max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('us88_kg', models.DecimalField(decimal_places=2, default=Decimal('0'), help_text='US88 rice seeds (kg)', max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('th82_kg', models.DecimalField(decimal_places=2, default=Decimal('0'), help_text='TH82 rice seeds (kg)', max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('rh9000_kg', models.DecimalField(decimal_places=2, default=Decimal('0'), help_text='RH9000 corn seeds (kg)', max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('lumping143_kg', models.DecimalField(decimal_places=2, default=Decimal('0'), help_text='Lumping 143 corn seeds (kg)', max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('lp296_kg', models.DecimalField(decimal_places=2, default=Decimal('0'), help_text='LP296 corn seeds (kg)', max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('notes', models.TextField(blank=True)),
                ('status', models.CharField(choices=[('active', 'Active'), ('completed', 'Completed'), ('cancelled', 'Cancelled')], default='active', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='allocations_created', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Regional Allocation',
                'verbose_name_plural': 'Regional Allocations',
                'db_table': 'regional_allocations',
                'ordering': ['-allocation_date', '-created_at'],
            },
        ),
        migrations.CreateModel(
            name='FarmerRequest',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('season', models.CharField(db_index=True, max_length=20)),
                ('request_date', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('farmer_name', models.CharField(max_length=255)),
                ('barangay', models.CharField(db_index=True, max_length=100)),
                ('farm_area_ha', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=10)),
                ('crop_type', models.CharField(choices=[('rice', 'Rice'), ('corn', 'Corn'), ('vegetables', 'Vegetables'), ('others', 'Others')], default='rice', max_length=20)),
                ('ownership_type', models.CharField(blank=True, max_length=50)),
                ('num_parcels', models.PositiveIntegerField(default=1)),
                ('fertilizer_requested', models.BooleanField(default=False)),
                ('seeds_requested', models.BooleanField(default=False)),
                ('requested_urea_bags', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('requested_complete_14_bags', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('requested_complete_16_bags', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('requested_ammonium_sulfate_bags', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('requested_ammonium_phosphate_bags', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('requested_muriate_potash_bags', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('requested_jackpot_kg', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('requested_us88_kg', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('requested_th82_kg', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('requested_rh9000_kg', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('requested_lumping143_kg', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('requested_lp296_kg', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('assigned_fertilizer_type', models.CharField(blank=True, max_length=100)),
                ('assigned_fertilizer_bags', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('assigned_seed_type', models.CharField(blank=True, max_length=100)),
                ('assigned_seed_kg', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('fertilizer_accepted', models.BooleanField(blank=True, null=True)),
                ('seeds_accepted', models.BooleanField(blank=True, null=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('approved', 'Approved'), ('rejected', 'Rejected'), ('distributed', 'Distributed')], db_index=True, default='pending', max_length=20)),
                ('rejection_reason', models.TextField(blank=True)),
                ('request_notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='farmer_requests_created', to=settings.AUTH_USER_MODEL)),
                ('farmer', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='distribution_requests', to='rsbsa.rsbsasubmission')),
            ],
            options={
                'verbose_name': 'Farmer Request',
                'verbose_name_plural': 'Farmer Requests',
                'db_table': 'farmer_requests',
                'ordering': ['request_date', 'created_at'],
                'indexes': [
                    models.Index(fields=['season', 'status'], name='freq_season_status_idx'),
                    models.Index(fields=['season', 'barangay'], name='freq_season_brgy_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='DistributionRecord',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('distribution_date', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('fertilizer_type', models.CharField(blank=True, max_length=255)),
                ('fertilizer_bags_given', models.IntegerField(default=0)),
                ('seed_type', models.CharField(blank=True, max_length=255)),
                ('seed_kg_given', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
                ('voucher_code', models.CharField(blank=True, max_length=50)),
                ('farmer_signature', models.BooleanField(default=False)),
                ('verified_by', models.CharField(blank=True, max_length=150)),
                ('verification_notes', models.TextField(blank=True)),
                ('claimed', models.BooleanField(default=False)),
                ('claim_date', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('request', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='distribution_record', to='distribution.farmerrequest')),
            ],
            options={
                'verbose_name': 'Distribution Record',
                'verbose_name_plural': 'Distribution Records',
                'db_table': 'distribution_records',
                'ordering': ['-distribution_date'],
            },
        ),
    ]
