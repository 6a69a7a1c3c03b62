# Products shown on business pages

import uuid

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('businesses', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Unique identifier (UUID)', primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, editable=False, help_text='Timestamp when record was created', verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when record was last updated', verbose_name='Updated At')),
                ('name', models.CharField(max_length=255, verbose_name='Name')),
                ('slug', models.SlugField(max_length=255, verbose_name='Slug')),
                ('description', models.TextField(blank=True, verbose_name='Description')),
                ('price_range', models.CharField(blank=True, help_text='Free text, e.g. "Rp 15.000 - Rp 25.000"', max_length=100, verbose_name='Price Range')),
                ('is_featured', models.BooleanField(default=False, verbose_name='Featured')),
                ('shopee_url', models.URLField(blank=True, max_length=500, verbose_name='Shopee URL')),
                ('tokopedia_url', models.URLField(blank=True, max_length=500, verbose_name='Tokopedia URL')),
                ('other_marketplace_url', models.URLField(blank=True, max_length=500, verbose_name='Other Marketplace URL')),
                ('business', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='products', to='businesses.business', verbose_name='Business')),
            ],
            options={
                'verbose_name': 'Product',
                'verbose_name_plural': 'Products',
                'db_table': 'products',
                'ordering': ['-is_featured', '-created_at'],
                'constraints': [models.UniqueConstraint(fields=('business', 'slug'), name='product_business_slug_unique')],
            },
        ),
    ]
