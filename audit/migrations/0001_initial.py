import django.db.models.deletion
import django.utils.timezone
import uuid
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='AuditLog',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('user_name', models.CharField(default='SYSTEM', max_length=150)),
                ('user_role', models.CharField(default='system', max_length=20)),
                ('action', models.CharField(choices=[('CREATE', 'Create'), ('UPDATE', 'Update'), ('DELETE', 'Delete'), ('LOGIN', 'Login'), ('LOGOUT', 'Logout'), ('LOGIN_FAILED', 'Login Failed'), ('EXPORT', 'Export'), ('APPROVE', 'Approve'), ('REJECT', 'Reject'), ('DISTRIBUTE', 'Distribute'), ('PASSWORD_CHANGE', 'Password Change')], db_index=True, max_length=20)),
                ('module', models.CharField(choices=[('AUTH', 'Authentication'), ('RSBSA', 'RSBSA Registry'), ('DISTRIBUTION', 'Distribution'), ('INCENTIVES', 'Incentive Requests'), ('REPORTS', 'Reports'), ('USERS', 'Users'), ('SYSTEM', 'System')], db_index=True, max_length=20)),
                ('record_id', models.CharField(blank=True, help_text='Primary key of the affected record', max_length=64)),
                ('record_type', models.CharField(blank=True, help_text="Type of the affected record (e.g. 'farmer_request')", max_length=100)),
                ('description', models.TextField(help_text='Human-readable description of the action')),
                ('old_values', models.JSONField(blank=True, null=True)),
                ('new_values', models.JSONField(blank=True, null=True)),
                ('metadata', models.JSONField(blank=True, null=True)),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True)),
                ('timestamp', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('user', models.ForeignKey(blank=True, help_text='User who performed the action (null for system/anonymous)', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='audit_logs', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Audit Log',
                'verbose_name_plural': 'Audit Logs',
                'db_table': 'audit_logs',
                'ordering': ['-timestamp'],
                'indexes': [
                    models.Index(fields=['module', 'action'], name='audit_module_action_idx'),
                    models.Index(fields=['record_type', 'record_id'], name='audit_record_idx'),
                    models.Index(fields=['user_name'], name='audit_user_name_idx'),
                ],
            },
        ),
    ]
