"""
Business models for the UMKM Directory.
Categories, the micro-enterprises registered under them and their products.
"""

from enum import Enum

from django.conf import settings
from django.db import models

from apps.core.models import BaseModel, unique_slug


class Category(BaseModel):
    """Business category (kuliner, kerajinan, jasa...)."""

    name = models.CharField(
        max_length=100,
        verbose_name='Name'
    )

    slug = models.SlugField(
        max_length=120,
        unique=True,
        verbose_name='Slug'
    )

    description = models.TextField(
        blank=True,
        verbose_name='Description'
    )

    class Meta:
        db_table = 'categories'
        verbose_name = 'Category'
        verbose_name_plural = 'Categories'
        ordering = ['name']

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = unique_slug(Category, self.name, self, max_length=120)
        super().save(*args, **kwargs)


class BusinessStatus(str, Enum):
    """Lifecycle of a business record. Changed by village admins only."""
    ACTIVE = 'active'
    INACTIVE = 'inactive'
    SUSPENDED = 'suspended'

    @classmethod
    def from_string(cls, value: str) -> 'BusinessStatus':
        """Convert string to BusinessStatus."""
        for status in cls:
            if status.value == value:
                return status
        raise ValueError(f"Unknown business status: {value}")


BUSINESS_STATUS_CHOICES = [
    (BusinessStatus.ACTIVE.value, 'Aktif'),
    (BusinessStatus.INACTIVE.value, 'Nonaktif'),
    (BusinessStatus.SUSPENDED.value, 'Ditangguhkan'),
]


class BusinessQuerySet(models.QuerySet):

    def active(self):
        return self.filter(status=BusinessStatus.ACTIVE.value)

    def featured(self):
        return self.active().filter(is_featured=True)


class Business(BaseModel):
    """
    A registered micro-enterprise (UMKM).

    Owned by exactly one business_owner account. The owner is fixed at
    creation; status is changed only by a village admin.
    """

    owner = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='business',
        verbose_name='Owner',
        help_text='business_owner account that manages this business'
    )

    category = models.ForeignKey(
        Category,
        on_delete=models.PROTECT,
        related_name='businesses',
        verbose_name='Category'
    )

    name = models.CharField(
        max_length=255,
        verbose_name='Name'
    )

    slug = models.SlugField(
        max_length=255,
        unique=True,
        verbose_name='Slug'
    )

    owner_name = models.CharField(
        max_length=255,
        blank=True,
        verbose_name='Owner Name',
        help_text='Name of the person running the business'
    )

    description = models.TextField(
        verbose_name='Description'
    )

    address = models.TextField(
        verbose_name='Address'
    )

    latitude = models.DecimalField(
        max_digits=10,
        decimal_places=8,
        verbose_name='Latitude'
    )

    longitude = models.DecimalField(
        max_digits=11,
        decimal_places=8,
        verbose_name='Longitude'
    )

    phone = models.CharField(
        max_length=30,
        blank=True,
        verbose_name='Phone'
    )

    whatsapp = models.CharField(
        max_length=30,
        blank=True,
        verbose_name='WhatsApp'
    )

    email = models.EmailField(
        blank=True,
        verbose_name='Email'
    )

    status = models.CharField(
        max_length=20,
        choices=BUSINESS_STATUS_CHOICES,
        default=BusinessStatus.ACTIVE.value,
        db_index=True,
        verbose_name='Status'
    )

    is_featured = models.BooleanField(
        default=False,
        verbose_name='Featured'
    )

    objects = BusinessQuerySet.as_manager()

    class Meta:
        db_table = 'businesses'
        verbose_name = 'Business'
        verbose_name_plural = 'Businesses'
        ordering = ['name']
        indexes = [
            models.Index(fields=['latitude', 'longitude'], name='business_coordinates_idx'),
        ]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = unique_slug(Business, self.name, self)
        super().save(*args, **kwargs)

    def is_active(self):
        return self.status == BusinessStatus.ACTIVE.value


class Product(BaseModel):
    """
    A product shown on a business page, with links to where it is sold.

    Slugs are unique within one business.
    """

    business = models.ForeignKey(
        Business,
        on_delete=models.CASCADE,
        related_name='products',
        verbose_name='Business'
    )

    name = models.CharField(
        max_length=255,
        verbose_name='Name'
    )

    slug = models.SlugField(
        max_length=255,
        verbose_name='Slug'
    )

    description = models.TextField(
        blank=True,
        verbose_name='Description'
    )

    price_range = models.CharField(
        max_length=100,
        blank=True,
        verbose_name='Price Range',
        help_text='Free text, e.g. "Rp 15.000 - Rp 25.000"'
    )

    is_featured = models.BooleanField(
        default=False,
        verbose_name='Featured'
    )

    shopee_url = models.URLField(
        max_length=500,
        blank=True,
        verbose_name='Shopee URL'
    )

    tokopedia_url = models.URLField(
        max_length=500,
        blank=True,
        verbose_name='Tokopedia URL'
    )

    other_marketplace_url = models.URLField(
        max_length=500,
        blank=True,
        verbose_name='Other Marketplace URL'
    )

    class Meta:
        db_table = 'products'
        verbose_name = 'Product'
        verbose_name_plural = 'Products'
        ordering = ['-is_featured', '-created_at']
        constraints = [
            models.UniqueConstraint(fields=['business', 'slug'], name='product_business_slug_unique'),
        ]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = product_slug(self, self.name)
        super().save(*args, **kwargs)


def product_slug(product, name):
    """Slug for name, unique among the products of product.business."""
    siblings = Product.objects.filter(business_id=product.business_id)
    return unique_slug(Product, name, product, queryset=siblings)
