# Initial schema for articles

import uuid

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('businesses', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Article',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Unique identifier (UUID)', primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, editable=False, help_text='Timestamp when record was created', verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when record was last updated', verbose_name='Updated At')),
                ('title', models.CharField(max_length=255, verbose_name='Title')),
                ('slug', models.SlugField(max_length=255, unique=True, verbose_name='Slug')),
                ('excerpt', models.TextField(blank=True, help_text='Short summary for previews', max_length=500, verbose_name='Excerpt')),
                ('content', models.TextField(verbose_name='Content')),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('pending', 'Menunggu Review'), ('approved', 'Disetujui'), ('rejected', 'Ditolak')], db_index=True, default='draft', max_length=20, verbose_name='Status')),
                ('seo_title', models.CharField(blank=True, help_text='Overrides the title in search results', max_length=60, verbose_name='SEO Title')),
                ('seo_description', models.CharField(blank=True, max_length=160, verbose_name='SEO Description')),
                ('rejection_notes', models.TextField(blank=True, help_text='Reason given by the reviewing admin; cleared on resubmission', null=True, verbose_name='Rejection Notes')),
                ('approved_at', models.DateTimeField(blank=True, null=True, verbose_name='Approved At')),
                ('published_at', models.DateTimeField(blank=True, db_index=True, null=True, verbose_name='Published At')),
                ('approved_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='approved_articles', to=settings.AUTH_USER_MODEL, verbose_name='Approved By')),
                ('business', models.ForeignKey(help_text='The business this article belongs to', on_delete=django.db.models.deletion.CASCADE, related_name='articles', to='businesses.business', verbose_name='Business')),
            ],
            options={
                'verbose_name': 'Article',
                'verbose_name_plural': 'Articles',
                'db_table': 'articles',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['status', 'published_at'], name='article_status_published_idx')],
                'constraints': [models.CheckConstraint(condition=models.Q(('status__in', ['draft', 'pending', 'approved', 'rejected'])), name='article_status_valid')],
            },
        ),
    ]
