"""
Serializers for categories and businesses.

Three shapes of Business:
- public: what the directory shows
- admin: everything, including status and the owning account
- owner: the profile a business owner may edit themselves

Products are edited by their owner (business fixed to their own) or by a
village admin (business chosen on create).
"""

from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework import serializers

from apps.core.models import UserRole, unique_slug
from apps.core.permissions import get_user_role

from .models import BUSINESS_STATUS_CHOICES, Business, Category, Product, product_slug

User = get_user_model()


class CategorySerializer(serializers.ModelSerializer):

    class Meta:
        model = Category
        fields = ['id', 'name', 'slug', 'description', 'created_at', 'updated_at']
        read_only_fields = ['id', 'slug', 'created_at', 'updated_at']

    def update(self, instance, validated_data):
        if 'name' in validated_data and validated_data['name'] != instance.name:
            validated_data['slug'] = unique_slug(Category, validated_data['name'], instance, max_length=120)
        return super().update(instance, validated_data)


class CategoryBriefSerializer(serializers.ModelSerializer):

    class Meta:
        model = Category
        fields = ['id', 'name', 'slug']


class RenameSlugMixin:
    """Regenerate a business slug when its name changes."""

    def update(self, instance, validated_data):
        if 'name' in validated_data and validated_data['name'] != instance.name:
            validated_data['slug'] = unique_slug(Business, validated_data['name'], instance)
        return super().update(instance, validated_data)


class BusinessPublicSerializer(serializers.ModelSerializer):
    """Directory listing and detail."""

    category = CategoryBriefSerializer(read_only=True)

    class Meta:
        model = Business
        fields = [
            'id',
            'name',
            'slug',
            'owner_name',
            'description',
            'address',
            'latitude',
            'longitude',
            'phone',
            'whatsapp',
            'email',
            'is_featured',
            'category',
        ]
        read_only_fields = fields


class AdminBusinessSerializer(RenameSlugMixin, serializers.ModelSerializer):
    """
    Full business record for village admins.

    On create the owning account is either an existing, unlinked
    business_owner (`owner`) or a new account built from `owner_username`,
    `owner_email` and `owner_password`. The owner cannot change afterwards.
    """

    owner = serializers.PrimaryKeyRelatedField(queryset=User.objects.all(), required=False)
    owner_username = serializers.CharField(write_only=True, required=False, max_length=150)
    owner_email = serializers.EmailField(write_only=True, required=False, allow_blank=True)
    owner_password = serializers.CharField(
        write_only=True, required=False, min_length=8, style={'input_type': 'password'},
    )
    category_detail = CategoryBriefSerializer(source='category', read_only=True)
    status = serializers.ChoiceField(choices=BUSINESS_STATUS_CHOICES, required=False)

    class Meta:
        model = Business
        fields = [
            'id',
            'owner',
            'owner_username',
            'owner_email',
            'owner_password',
            'category',
            'category_detail',
            'name',
            'slug',
            'owner_name',
            'description',
            'address',
            'latitude',
            'longitude',
            'phone',
            'whatsapp',
            'email',
            'status',
            'is_featured',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'slug', 'created_at', 'updated_at']

    def validate_owner(self, value):
        if self.instance is not None:
            if value != self.instance.owner:
                raise serializers.ValidationError("The owner of a business cannot be changed.")
            return value
        if get_user_role(value) != UserRole.BUSINESS_OWNER.value:
            raise serializers.ValidationError("Owner must be a business_owner account.")
        if Business.objects.filter(owner=value).exists():
            raise serializers.ValidationError("This account already manages a business.")
        return value

    def validate_owner_username(self, value):
        if User.objects.filter(username=value).exists():
            raise serializers.ValidationError("A user with that username already exists.")
        return value

    def validate(self, attrs):
        if self.instance is None:
            has_owner = 'owner' in attrs
            has_account = 'owner_username' in attrs
            if has_owner == has_account:
                raise serializers.ValidationError(
                    "Provide either an existing owner or owner_username for a new account."
                )
            if has_account and not attrs.get('owner_password'):
                raise serializers.ValidationError({'owner_password': "Required for a new account."})
        elif any(key in attrs for key in ('owner_username', 'owner_email', 'owner_password')):
            raise serializers.ValidationError("The owner of a business cannot be changed.")
        return attrs

    def create(self, validated_data):
        username = validated_data.pop('owner_username', None)
        email = validated_data.pop('owner_email', '')
        password = validated_data.pop('owner_password', None)

        with transaction.atomic():
            if username:
                # New accounts get the business_owner profile via post_save
                validated_data['owner'] = User.objects.create_user(
                    username=username, email=email or '', password=password,
                )
            return super().create(validated_data)


class BusinessStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=BUSINESS_STATUS_CHOICES)


class OwnerBusinessSerializer(RenameSlugMixin, serializers.ModelSerializer):
    """Profile of the owner's own business. Status and owner are admin-only."""

    category_detail = CategoryBriefSerializer(source='category', read_only=True)

    class Meta:
        model = Business
        fields = [
            'id',
            'category',
            'category_detail',
            'name',
            'slug',
            'owner_name',
            'description',
            'address',
            'latitude',
            'longitude',
            'phone',
            'whatsapp',
            'email',
            'status',
            'is_featured',
            'updated_at',
        ]
        read_only_fields = ['id', 'slug', 'status', 'is_featured', 'updated_at']


PRODUCT_FIELDS = [
    'id',
    'name',
    'slug',
    'description',
    'price_range',
    'is_featured',
    'shopee_url',
    'tokopedia_url',
    'other_marketplace_url',
]


class ProductSerializer(serializers.ModelSerializer):
    """A product of the owner's own business."""

    class Meta:
        model = Product
        fields = PRODUCT_FIELDS + ['business', 'created_at', 'updated_at']
        read_only_fields = ['id', 'slug', 'business', 'created_at', 'updated_at']

    def update(self, instance, validated_data):
        if 'name' in validated_data and validated_data['name'] != instance.name:
            validated_data['slug'] = product_slug(instance, validated_data['name'])
        return super().update(instance, validated_data)


class AdminProductSerializer(ProductSerializer):
    """Any product. The business is chosen on create and fixed afterwards."""

    business = serializers.PrimaryKeyRelatedField(queryset=Business.objects.all())
    business_name = serializers.CharField(source='business.name', read_only=True)

    class Meta(ProductSerializer.Meta):
        fields = PRODUCT_FIELDS + ['business', 'business_name', 'created_at', 'updated_at']
        read_only_fields = ['id', 'slug', 'created_at', 'updated_at']

    def validate_business(self, value):
        if self.instance is not None and value != self.instance.business:
            raise serializers.ValidationError("A product cannot be moved to another business.")
        return value


class PublicProductSerializer(serializers.ModelSerializer):

    class Meta:
        model = Product
        fields = PRODUCT_FIELDS
        read_only_fields = fields
