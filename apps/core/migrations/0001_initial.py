# Initial schema for account profiles, the audit trail and the settings store

import uuid

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='AccountProfile',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Unique identifier (UUID)', primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, editable=False, help_text='Timestamp when record was created', verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when record was last updated', verbose_name='Updated At')),
                ('role', models.CharField(choices=[('village_admin', 'Village Admin'), ('business_owner', 'Business Owner')], db_index=True, default='business_owner', help_text='village_admin manages everything, business_owner manages one business', max_length=20, verbose_name='Role')),
                ('user', models.OneToOneField(help_text='The associated Django user account', on_delete=django.db.models.deletion.CASCADE, related_name='account_profile', to=settings.AUTH_USER_MODEL, verbose_name='User')),
            ],
            options={
                'verbose_name': 'Account Profile',
                'verbose_name_plural': 'Account Profiles',
                'db_table': 'account_profiles',
            },
        ),
        migrations.CreateModel(
            name='ActivityLog',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False, verbose_name='ID')),
                ('action', models.CharField(choices=[('login', 'Login'), ('logout', 'Logout'), ('create', 'Create'), ('update', 'Update'), ('delete', 'Delete'), ('submit', 'Submit for review'), ('approve', 'Approve'), ('reject', 'Reject')], db_index=True, max_length=20, verbose_name='Action')),
                ('target_type', models.CharField(db_index=True, help_text='e.g. article, business, category, user', max_length=50, verbose_name='Target Type')),
                ('target_id', models.CharField(max_length=64, verbose_name='Target ID')),
                ('description', models.TextField(blank=True, verbose_name='Description')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, editable=False, verbose_name='Created At')),
                ('user', models.ForeignKey(help_text='Who performed the action', on_delete=django.db.models.deletion.PROTECT, related_name='activity_logs', to=settings.AUTH_USER_MODEL, verbose_name='User')),
            ],
            options={
                'verbose_name': 'Activity Log',
                'verbose_name_plural': 'Activity Logs',
                'db_table': 'activity_logs',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['target_type', 'target_id'], name='activity_log_target_idx'),
                    models.Index(fields=['user', 'created_at'], name='activity_log_user_created_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Setting',
            fields=[
                ('key', models.CharField(max_length=100, primary_key=True, serialize=False, verbose_name='Key')),
                ('value', models.TextField(blank=True, verbose_name='Value')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
            ],
            options={
                'verbose_name': 'Setting',
                'verbose_name_plural': 'Settings',
                'db_table': 'settings',
                'ordering': ['key'],
            },
        ),
    ]
